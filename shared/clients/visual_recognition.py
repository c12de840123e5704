# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import json
import logging
from typing import Any, BinaryIO, Dict, List, Sequence

import aiohttp

from shared.clients.base import RemoteServiceClient

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://gateway.watsonplatform.net/visual-recognition-beta/api"
DEFAULT_VERSION_DATE = "2015-12-02"


class VisualRecognitionClient(RemoteServiceClient):
    """Client for the Visual Recognition v2-beta classifier API"""

    service_name = "visual_recognition"

    def __init__(
        self,
        username: str,
        password: str,
        url: str = DEFAULT_URL,
        version_date: str = DEFAULT_VERSION_DATE,
        timeout: float = 60.0
    ):
        super().__init__(url, timeout=timeout)
        self.username = username
        self.password = password
        self.version_date = version_date

    def _auth(self) -> aiohttp.BasicAuth:
        return aiohttp.BasicAuth(self.username, self.password)

    def _params(self) -> Dict[str, str]:
        return {"version": self.version_date}

    async def create_classifier(
        self,
        positive_examples: BinaryIO,
        negative_examples: BinaryIO,
        name: str
    ) -> Dict[str, Any]:
        """
        Train a classifier from two zip archives.

        Args:
            positive_examples: Open zip archive of positive images
            negative_examples: Open zip archive of negative images
            name: Classifier name

        Returns:
            Classifier descriptor (classifier_id, name, owner, created)
        """
        form = aiohttp.FormData()
        form.add_field("positive_examples", positive_examples,
                       filename="positive_examples.zip", content_type="application/zip")
        form.add_field("negative_examples", negative_examples,
                       filename="negative_examples.zip", content_type="application/zip")
        form.add_field("name", name)

        classifier = await self._request("POST", "v2/classifiers", params=self._params(), data=form)
        logger.info(f"Created classifier: {classifier.get('classifier_id')}")
        return classifier

    async def classify(
        self,
        images_file: Any,
        classifier_ids: Sequence[str],
        filename: str = "image.jpg"
    ) -> Dict[str, Any]:
        """
        Classify an image against a set of classifiers.

        Args:
            images_file: Byte stream (open file or streaming response body)
            classifier_ids: Classifier ids to score against
            filename: Filename reported for the upload

        Returns:
            Raw result: ``{"images": [{"image": ..., "scores": [...]}]}``
        """
        form = aiohttp.FormData()
        form.add_field("images_file", images_file, filename=filename)
        form.add_field("classifier_ids", json.dumps({"classifier_ids": list(classifier_ids)}),
                       content_type="application/json")

        return await self._request("POST", "v2/classify", params=self._params(), data=form)

    async def delete_classifier(self, classifier_id: str) -> None:
        """Delete a user-created classifier"""
        await self._request("DELETE", f"v2/classifiers/{classifier_id}", params=self._params())
        logger.info(f"Deleted classifier: {classifier_id}")

    async def list_classifiers(self) -> List[Dict[str, Any]]:
        """List classifiers visible to these credentials"""
        payload = await self._request("GET", "v2/classifiers", params=self._params())
        return payload.get("classifiers", [])
