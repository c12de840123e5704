# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.errors import AppError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map application errors to {"error", "code"} JSON responses"""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if isinstance(exc, ValidationError):
            logger.info(f"{request.method} {request.url.path} rejected: {exc.error}")
        else:
            logger.error(f"{request.method} {request.url.path} failed ({exc.code}): {exc.error}")
        return JSONResponse(status_code=exc.code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error in {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": 500}
        )
