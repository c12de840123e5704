# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import json
import logging
from typing import Any, Optional
from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from shared.schemas import ClassificationResult
from services.webapp.core.classifier import ImageClassifier
from services.webapp.core.image_resolver import ImageRequest

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


async def read_image_request(request: Request) -> ImageRequest:
    """Collect image fields from a multipart form, urlencoded form or JSON body"""
    classifier_id = request.query_params.get("classifier_id")
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        upload = form.get("images_file")
        return ImageRequest(
            # blank file inputs arrive as a part with an empty filename
            images_file=upload if isinstance(upload, UploadFile) and upload.filename else None,
            image_data=_text(form.get("image_data")),
            url=_text(form.get("url")),
            classifier_id=classifier_id or _text(form.get("classifier_id"))
        )

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = {}
    if not isinstance(body, dict):
        body = {}

    return ImageRequest(
        image_data=_text(body.get("image_data")),
        url=_text(body.get("url")),
        classifier_id=classifier_id or _text(body.get("classifier_id"))
    )


def create_classify_api(classifier: ImageClassifier) -> APIRouter:
    """Create classification API with dependencies"""
    router = APIRouter(prefix="/api", tags=["classification"])

    @router.post("/classify", responses={200: {"model": ClassificationResult}})
    async def classify_image(request: Request):
        """
        Classify an image.

        Accepts a multipart ``images_file`` upload, ``image_data`` (base64 data URI)
        or ``url`` (``https://example.com/test.jpg`` or ``images/test.jpg``).

        Returns:
            Classification result with user-created classifiers filtered out
        """
        image_request = await read_image_request(request)
        return await classifier.classify(image_request)

    return router
