# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict, List, Optional, Sequence

from config.app_config import ClassifyMode
from services.webapp.core.image_resolver import ImageRequest, ImageResolver
from services.webapp.core.normalizer import (
    filter_user_created_classifiers,
    normalize_keyword_result,
)

logger = logging.getLogger(__name__)


class ImageClassifier:
    """
    Classifies one image per request.

    Resolves the image source, calls the remote service and returns a
    result in the uniform ``{"images": [{"scores": [...]}]}`` shape.
    Temp files created for the request are removed on every exit path.
    """

    def __init__(
        self,
        resolver: ImageResolver,
        recognition_client: Any,
        classifier_ids: Sequence[str],
        keywords_client: Optional[Any] = None,
        mode: ClassifyMode = ClassifyMode.FIXED
    ):
        self.resolver = resolver
        self.recognition_client = recognition_client
        self.keywords_client = keywords_client
        self.classifier_ids = list(classifier_ids)
        self.mode = mode

    def select_classifier_ids(self, request: ImageRequest) -> Optional[List[str]]:
        """
        Classifier ids to score against, or None to use keyword extraction.
        """
        if self.mode == ClassifyMode.KEYWORDS and self.keywords_client is not None:
            return None
        if self.mode == ClassifyMode.REQUEST:
            if request.classifier_id:
                return [request.classifier_id]
            if self.keywords_client is not None:
                return None
        return self.classifier_ids

    async def classify(self, request: ImageRequest) -> Dict[str, Any]:
        """
        Classify the image referenced by request.

        Raises:
            InvalidRequest / InvalidImage: no usable image source (400)
            RemoteServiceError: the remote call failed
        """
        image = await self.resolver.resolve(request)
        classifier_ids = self.select_classifier_ids(request)

        try:
            async with image.open() as stream:
                if classifier_ids is None:
                    results = await self.keywords_client.get_image_keywords(stream)
                    return normalize_keyword_result(results)

                results = await self.recognition_client.classify(
                    stream, classifier_ids, filename=image.filename
                )
        finally:
            # delete the recognized file
            image.cleanup()

        return filter_user_created_classifiers(results, classifier_ids)
