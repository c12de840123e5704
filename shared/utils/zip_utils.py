# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import io
import re
import base64
import binascii
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple, Union

from PIL import Image

from shared.errors import InvalidImage
from shared.utils.artifacts import new_artifact_path, remove_artifact

logger = logging.getLogger(__name__)

# data:image/jpeg;base64,/9j/4AAQ...
DATA_URI_PATTERN = re.compile(r"^data:[^/;,]+/([A-Za-z0-9]+);base64,(.*)$", re.DOTALL)

LOCAL_IMAGE_PREFIX = "images"


@dataclass
class Base64Image:
    """Decoded data URI"""
    type: str
    data: bytes


def parse_base64_image(data_string: str) -> Base64Image:
    """
    Parse a base64 data URI into its type tag and decoded bytes.

    Args:
        data_string: String like ``data:image/png;base64,iVBORw0...``

    Returns:
        Base64Image with the subtype (``png``) and the raw bytes

    Raises:
        InvalidImage: if the string is not a base64 data URI
    """
    if not isinstance(data_string, str):
        raise InvalidImage("Invalid base64 image")

    match = DATA_URI_PATTERN.match(data_string.strip())
    if not match:
        raise InvalidImage("Invalid base64 image")

    image_type, body = match.groups()
    # line-wrapped payloads are accepted
    body = re.sub(r"\s+", "", body)
    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImage(f"Invalid base64 image: {e}") from e

    if not data:
        raise InvalidImage("Empty base64 image")

    return Base64Image(type=image_type.lower(), data=data)


def verify_image(data: bytes) -> str:
    """Check that data is a readable image and return its lowercase format"""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            image.verify()
    except Exception as e:
        raise InvalidImage(f"Invalid image data: {e}") from e
    return (image_format or "").lower()


def resolve_static_path(static_dir: Union[str, Path], relative_path: str) -> Path:
    """Resolve an images/... path under the static root, refusing paths that escape it"""
    root = Path(static_dir).resolve()
    candidate = (root / relative_path).resolve()
    if root != candidate and root not in candidate.parents:
        raise InvalidImage(f"Image path outside static assets: {relative_path}")
    return candidate


def _load_image(image: str, static_dir: Union[str, Path]) -> Tuple[bytes, str]:
    """Return (bytes, extension) for a data URI or a local images/... path"""
    if isinstance(image, str) and image.startswith("data:"):
        resource = parse_base64_image(image)
        verify_image(resource.data)
        return resource.data, resource.type

    if isinstance(image, str) and image.startswith(LOCAL_IMAGE_PREFIX):
        path = resolve_static_path(static_dir, image)
        if not path.is_file():
            raise InvalidImage(f"Image not found: {image}")
        data = path.read_bytes()
        image_format = verify_image(data)
        return data, path.suffix.lstrip(".") or image_format

    raise InvalidImage("Images must be base64 data URIs or images/... paths")


def zip_images(
    images: Sequence[str],
    uploads_dir: Union[str, Path],
    static_dir: Union[str, Path]
) -> Path:
    """
    Package a set of images into a zip archive in the uploads directory.

    Blocking; callers on the event loop run it in a worker thread.

    Args:
        images: Base64 data URIs or paths relative to the static root
        uploads_dir: Scratch directory for the archive
        static_dir: Static-assets root for images/... paths

    Returns:
        Path of the archive; the caller owns it and must delete it

    Raises:
        InvalidImage: if any image cannot be decoded or read. No archive is left behind.
    """
    archive = new_artifact_path(uploads_dir, "zip")
    try:
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for index, image in enumerate(images):
                data, extension = _load_image(image, static_dir)
                zf.writestr(f"{index}.{extension}", data)
    except Exception:
        remove_artifact(archive)
        raise

    logger.info(f"Zipped {len(images)} images into {archive}")
    return archive
