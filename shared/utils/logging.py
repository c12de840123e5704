# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str,
    level: str = "INFO",
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Setup logger with standard configuration.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_string: Optional custom format string

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(getattr(logging, level.upper()))
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
        logger.addHandler(handler)

    return logger


def setup_package_loggers(
    level: str = "INFO",
    packages: Iterable[str] = ("services", "shared", "config")
) -> None:
    """Apply setup_logger to the project packages so module loggers share one handler"""
    for package in packages:
        setup_logger(package, level=level)


@contextmanager
def log_duration(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log the wall-clock duration of the wrapped block, even if it raises"""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{label}: {elapsed_ms:.1f}ms")
