# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

"""
Resolve the image a classify request refers to.

Sources are tried in a fixed order: uploaded file, base64 payload, remote
URL, local static path. Uploads and base64 payloads are written to the
uploads directory and owned by the request; the caller must call
``cleanup()`` once the remote call is done.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Union

import aiohttp
from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from shared.errors import InvalidImage, InvalidRequest, RemoteServiceError
from shared.utils.artifacts import new_artifact_path, remove_artifact
from shared.utils.zip_utils import LOCAL_IMAGE_PREFIX, parse_base64_image, resolve_static_path

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyHttpUrl)


class ImageSourceKind(str, Enum):
    UPLOAD = "upload"
    BASE64 = "base64"
    URL = "url"
    LOCAL = "local"


@dataclass
class ImageRequest:
    """Image fields of a classify request"""
    images_file: Optional[Any] = None   # UploadFile-like: .filename and async .read()
    image_data: Optional[str] = None
    url: Optional[str] = None
    classifier_id: Optional[str] = None


@dataclass
class ResolvedImage:
    """The single byte source chosen for a request"""
    kind: ImageSourceKind
    path: Optional[Path] = None
    url: Optional[str] = None
    timeout: aiohttp.ClientTimeout = field(default_factory=lambda: aiohttp.ClientTimeout(total=60))

    @property
    def owned(self) -> bool:
        """True when the file is a temp artifact of this request"""
        return self.kind in (ImageSourceKind.UPLOAD, ImageSourceKind.BASE64)

    @property
    def filename(self) -> str:
        if self.path is not None:
            return self.path.name
        return Path(self.url or "image.jpg").name or "image.jpg"

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Any]:
        """Open the source as a byte stream for the duration of the block"""
        if self.kind == ImageSourceKind.URL:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                try:
                    async with session.get(self.url) as response:
                        response.raise_for_status()
                        yield response.content
                except aiohttp.ClientResponseError as e:
                    raise RemoteServiceError(f"Failed to fetch image: {e.message}", code=e.status) from e
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    raise RemoteServiceError(f"Failed to fetch image: {e}") from e
        else:
            with open(self.path, "rb") as stream:
                yield stream

    def cleanup(self) -> None:
        """Delete the temp artifact, if this request owns one"""
        if self.owned and self.path is not None:
            remove_artifact(self.path)


def is_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


class ImageResolver:
    """Pick and materialize the image source of a classify request"""

    def __init__(
        self,
        uploads_dir: Union[str, Path],
        static_dir: Union[str, Path],
        timeout: float = 60.0
    ):
        self.uploads_dir = Path(uploads_dir)
        self.static_dir = Path(static_dir)
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def resolve(self, request: ImageRequest) -> ResolvedImage:
        """
        Resolve the request's image source, first match wins.

        Returns:
            ResolvedImage; the caller owns cleanup of UPLOAD and BASE64 sources

        Raises:
            InvalidRequest: if no source matches (malformed URL)
            InvalidImage: if a base64 payload or local path is unusable
        """
        if request.images_file is not None:
            return await self._spool_upload(request.images_file)

        if request.image_data:
            return self._write_base64(request.image_data)

        url = request.url
        if url and is_url(url):
            # query strings are dropped before fetching
            return ResolvedImage(kind=ImageSourceKind.URL, url=url.split("?")[0], timeout=self.timeout)

        if url and url.startswith(LOCAL_IMAGE_PREFIX):
            path = resolve_static_path(self.static_dir, url)
            if not path.is_file():
                raise InvalidImage(f"Image not found: {url}")
            return ResolvedImage(kind=ImageSourceKind.LOCAL, path=path)

        raise InvalidRequest("Malformed URL")

    async def _spool_upload(self, upload: Any) -> ResolvedImage:
        extension = Path(getattr(upload, "filename", None) or "").suffix or ".jpg"
        path = new_artifact_path(self.uploads_dir, extension)
        try:
            data = await upload.read()
            path.write_bytes(data)
        except Exception:
            remove_artifact(path)
            raise
        logger.debug(f"Stored upload {getattr(upload, 'filename', '')} as {path}")
        return ResolvedImage(kind=ImageSourceKind.UPLOAD, path=path)

    def _write_base64(self, image_data: str) -> ResolvedImage:
        resource = parse_base64_image(image_data)
        path = new_artifact_path(self.uploads_dir, resource.type)
        path.write_bytes(resource.data)
        logger.debug(f"Wrote base64 image to {path}")
        return ResolvedImage(kind=ImageSourceKind.BASE64, path=path)
