# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

"""
Base class for remote recognition service clients.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from shared.errors import RemoteServiceError

logger = logging.getLogger(__name__)


class RemoteServiceClient:
    """
    Shared plumbing for the remote service clients.

    A session is opened per call; every call is attempted once and any
    failure surfaces as RemoteServiceError.
    """

    service_name = "remote"

    def __init__(self, base_url: str, timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _auth(self) -> Optional[aiohttp.BasicAuth]:
        return None

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        **kwargs: Any
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body"""
        url = self._url(path)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout, auth=self._auth()) as session:
                async with session.request(method, url, params=params, **kwargs) as response:
                    body = await response.text()
                    payload = _decode(body)
                    if response.status >= 400:
                        message = _error_message(payload) or response.reason or "Request failed"
                        logger.error(f"{self.service_name} {method} {path} failed ({response.status}): {message}")
                        raise RemoteServiceError(message, code=response.status, service=self.service_name)
                    return payload
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{self.service_name} {method} {path} failed: {e}")
            raise RemoteServiceError(str(e) or type(e).__name__, service=self.service_name) from e


def _decode(body: str) -> Dict[str, Any]:
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return {"error": body}
    return payload if isinstance(payload, dict) else {"data": payload}


def _error_message(payload: Dict[str, Any]) -> Optional[str]:
    for key in ("error", "description", "statusInfo", "message"):
        value = payload.get(key)
        if isinstance(value, dict):
            value = value.get("message") or value.get("description")
        if value:
            return str(value)
    return None
