#!/usr/bin/env python3
# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import uvicorn

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from config.app_config import AppConfig, print_config
from shared.clients import AlchemyVisionClient, VisualRecognitionClient
from shared.utils.artifacts import sweep_artifacts
from shared.utils.logging import setup_logger, setup_package_loggers
from services.webapp.api.classifiers import create_classifiers_api
from services.webapp.api.classify import create_classify_api
from services.webapp.api.errors import register_error_handlers
from services.webapp.api.views import create_views_api, load_datasets
from services.webapp.core.classifier import ImageClassifier
from services.webapp.core.image_resolver import ImageResolver
from services.webapp.core.trainer import ClassifierTrainer

logger = setup_logger("webapp", level=os.getenv("LOGGING_LEVEL", "INFO"))


def create_app(
    config: Optional[AppConfig] = None,
    recognition_client: Optional[Any] = None,
    keywords_client: Optional[Any] = None
) -> FastAPI:
    """
    Build the web application.

    Args:
        config: Configuration; read from the environment when omitted
        recognition_client: Visual Recognition client (built from config when omitted)
        keywords_client: Keyword-extraction client (built from config when omitted)

    Returns:
        Configured FastAPI app
    """
    config = config or AppConfig.from_env()
    setup_package_loggers(config.logging_level)

    if recognition_client is None:
        recognition_client = VisualRecognitionClient(
            username=config.visual_recognition_username,
            password=config.visual_recognition_password,
            url=config.visual_recognition_url,
            version_date=config.visual_recognition_version_date,
            timeout=config.remote_timeout_seconds
        )
    if keywords_client is None:
        keywords_client = AlchemyVisionClient(
            api_key=config.alchemy_key,
            url=config.alchemy_url,
            timeout=config.remote_timeout_seconds
        )

    resolver = ImageResolver(config.uploads_dir, config.static_dir, timeout=config.remote_timeout_seconds)
    classifier = ImageClassifier(
        resolver=resolver,
        recognition_client=recognition_client,
        keywords_client=keywords_client,
        classifier_ids=config.classifier_ids,
        mode=config.classify_mode
    )
    trainer = ClassifierTrainer(
        client=recognition_client,
        uploads_dir=config.uploads_dir,
        static_dir=config.static_dir,
        min_images=config.min_training_images,
        classifier_ttl=config.classifier_ttl_seconds
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        uploads_dir = Path(config.uploads_dir)
        uploads_dir.mkdir(parents=True, exist_ok=True)
        # files left by a crashed process
        sweep_artifacts(uploads_dir)
        logger.info("Visual Recognition demo ready")

        yield

        logger.info("Shutting down...")
        await trainer.close()

    app = FastAPI(
        title="Visual Recognition Demo",
        description="Train custom image classifiers and classify images",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.classifier = classifier
    app.state.trainer = trainer

    register_error_handlers(app)
    app.include_router(create_views_api(load_datasets(config.datasets_path)))
    app.include_router(create_classifiers_api(trainer))
    app.include_router(create_classify_api(classifier))

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "healthy"}

    # Serve static assets (example images, datasets)
    if os.path.isdir(config.static_dir):
        app.mount("/static", StaticFiles(directory=config.static_dir), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    config: AppConfig = app.state.config
    print_config(config)
    logger.info(f"Listening at: {config.port}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=config.port,
        log_level=config.logging_level.lower()
    )
