# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Set, Union

from shared.errors import (
    InsufficientNegatives,
    InsufficientPositives,
    InvalidImage,
    MissingName,
    MissingNegatives,
    MissingPositives,
)
from shared.schemas import TrainingRequest
from shared.utils.artifacts import remove_artifact
from shared.utils.logging import log_duration
from shared.utils.zip_utils import zip_images

logger = logging.getLogger(__name__)


def validate_training_request(body: Any, min_images: int = 10) -> TrainingRequest:
    """
    Check a raw training request body.

    Raises:
        MissingPositives, MissingNegatives, MissingName,
        InsufficientPositives, InsufficientNegatives (all code 400)
    """
    body = body if isinstance(body, dict) else {}
    positives = body.get("positives")
    negatives = body.get("negatives")
    name = body.get("name")

    if not isinstance(positives, list):
        raise MissingPositives()
    if not isinstance(negatives, list):
        raise MissingNegatives()
    if not isinstance(name, str) or not name.strip():
        raise MissingName()
    if len(positives) < min_images:
        raise InsufficientPositives(min_images, len(positives))
    if len(negatives) < min_images:
        raise InsufficientNegatives(min_images, len(negatives))
    if not all(isinstance(image, str) for image in positives + negatives):
        raise InvalidImage("Images must be base64 data URIs or images/... paths")

    return TrainingRequest(positives=positives, negatives=negatives, name=name)


class ClassifierTrainer:
    """
    Trains classifiers on the remote service.

    Both image sets are zipped concurrently, the archives are submitted
    together with the classifier name, and the archives are deleted
    whether or not the submission succeeded.
    """

    def __init__(
        self,
        client: Any,
        uploads_dir: Union[str, Path],
        static_dir: Union[str, Path],
        min_images: int = 10,
        classifier_ttl: float = 0
    ):
        self.client = client
        self.uploads_dir = Path(uploads_dir)
        self.static_dir = Path(static_dir)
        self.min_images = min_images
        self.classifier_ttl = classifier_ttl
        self._expiry_tasks: Set[asyncio.Task] = set()

    def validate(self, body: Any) -> TrainingRequest:
        return validate_training_request(body, self.min_images)

    async def train(self, request: TrainingRequest) -> Dict[str, Any]:
        """
        Zip, submit and clean up.

        Returns:
            Classifier descriptor from the remote service

        Raises:
            The first zip error or the remote service error
        """
        positives_zip, negatives_zip = await self._zip_both(request.positives, request.negatives)

        try:
            with open(positives_zip, "rb") as positive_examples, \
                    open(negatives_zip, "rb") as negative_examples:
                with log_duration(logger, "training"):
                    classifier = await self.client.create_classifier(
                        positive_examples=positive_examples,
                        negative_examples=negative_examples,
                        name=request.name
                    )
        finally:
            logger.info(f"Deleting positive images: {positives_zip}")
            remove_artifact(positives_zip)
            logger.info(f"Deleting negative images: {negatives_zip}")
            remove_artifact(negatives_zip)

        if self.classifier_ttl > 0 and classifier.get("classifier_id"):
            self._schedule_expiry(classifier["classifier_id"])

        return classifier

    async def _zip_both(self, positives: List[str], negatives: List[str]) -> List[Path]:
        """Zip both image sets in worker threads; on any failure remove what was produced"""
        results = await asyncio.gather(
            asyncio.to_thread(zip_images, positives, self.uploads_dir, self.static_dir),
            asyncio.to_thread(zip_images, negatives, self.uploads_dir, self.static_dir),
            return_exceptions=True
        )

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            for archive in results:
                if isinstance(archive, Path):
                    remove_artifact(archive)
            raise errors[0]

        return list(results)

    def _schedule_expiry(self, classifier_id: str) -> None:
        task = asyncio.create_task(self._expire(classifier_id))
        self._expiry_tasks.add(task)
        task.add_done_callback(self._expiry_tasks.discard)

    async def _expire(self, classifier_id: str) -> None:
        await asyncio.sleep(self.classifier_ttl)
        try:
            await self.client.delete_classifier(classifier_id)
        except Exception as e:
            logger.warning(f"Failed to delete expired classifier {classifier_id}: {e}")

    async def close(self) -> None:
        """Cancel pending classifier expirations"""
        tasks = list(self._expiry_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
