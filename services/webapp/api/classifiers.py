# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import json
import logging
from fastapi import APIRouter, Request

from shared.schemas import ClassifierDescriptor
from services.webapp.core.trainer import ClassifierTrainer

logger = logging.getLogger(__name__)


def create_classifiers_api(trainer: ClassifierTrainer) -> APIRouter:
    """Create classifier training API with dependencies"""
    router = APIRouter(prefix="/api", tags=["classifiers"])

    @router.post("/classifiers", responses={200: {"model": ClassifierDescriptor}})
    async def create_classifier(request: Request):
        """
        Create a classifier.

        Body:
            positives: Array of base64 data URIs or images/... paths (at least 10)
            negatives: Array of base64 data URIs or images/... paths (at least 10)
            name: Classifier name

        Returns:
            Classifier descriptor from the remote service
        """
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = {}

        training_request = trainer.validate(body)
        logger.info(
            f"Training classifier '{training_request.name}' with "
            f"{len(training_request.positives)} positives, {len(training_request.negatives)} negatives"
        )
        return await trainer.train(training_request)

    return router
