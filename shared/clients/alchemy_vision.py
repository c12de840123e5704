# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict

from shared.clients.base import RemoteServiceClient
from shared.errors import RemoteServiceError

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://gateway-a.watsonplatform.net/calls"


class AlchemyVisionClient(RemoteServiceClient):
    """Client for the Alchemy Vision ranked image keyword API"""

    service_name = "alchemy_vision"

    def __init__(self, api_key: str, url: str = DEFAULT_URL, timeout: float = 60.0):
        super().__init__(url, timeout=timeout)
        self.api_key = api_key

    async def get_image_keywords(self, image: Any) -> Dict[str, Any]:
        """
        Extract ranked keywords from an image.

        Args:
            image: Byte stream posted as the raw request body

        Returns:
            Raw result: ``{"status": "OK", "imageKeywords": [{"text": ..., "score": ...}]}``
        """
        params = {
            "apikey": self.api_key,
            "outputMode": "json",
            "imagePostMode": "raw",
        }
        payload = await self._request(
            "POST",
            "image/ImageGetRankedImageKeywords",
            params=params,
            data=image,
            headers={"Content-Type": "application/x-www-form-urlencoded"}
        )

        # Errors come back with HTTP 200 and status=ERROR
        if payload.get("status") == "ERROR":
            message = payload.get("statusInfo") or "Keyword extraction failed"
            logger.error(f"Alchemy Vision error: {message}")
            raise RemoteServiceError(message, code=400, service=self.service_name)

        return payload
