# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

"""
Request-scoped scratch files.

Decoded images, spooled uploads and training archives are written to the
uploads directory, used by exactly one request and removed before the
request completes. Anything left behind by a crash is swept at startup.
"""

import logging
import uuid
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def new_artifact_path(directory: PathLike, extension: str) -> Path:
    """Return a fresh, uniquely named path in directory"""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    extension = extension.lstrip(".")
    name = uuid.uuid1().hex
    return directory / (f"{name}.{extension}" if extension else name)


def remove_artifact(path: PathLike) -> bool:
    """
    Delete a scratch file, best effort.

    Returns:
        True if the file was removed, False if it was missing or could not be deleted
    """
    try:
        Path(path).unlink()
        logger.info(f"Deleted artifact: {path}")
        return True
    except FileNotFoundError:
        logger.debug(f"Artifact already gone: {path}")
        return False
    except OSError as e:
        logger.warning(f"Could not delete artifact {path}: {e}")
        return False


def sweep_artifacts(directory: PathLike) -> int:
    """Remove files left in the scratch directory by an earlier process"""
    directory = Path(directory)
    if not directory.is_dir():
        return 0

    removed = 0
    for entry in directory.iterdir():
        if entry.is_file() and not entry.name.startswith("."):
            if remove_artifact(entry):
                removed += 1

    if removed:
        logger.info(f"Swept {removed} stale artifact(s) from {directory}")
    return removed
