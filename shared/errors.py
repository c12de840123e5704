# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

"""
Error types raised by the recognition demo.

Every error carries the message and HTTP status code that the web layer
returns as ``{"error": ..., "code": ...}``.
"""

from typing import Optional


class AppError(Exception):
    """Base error with a client-facing message and status code"""

    code: int = 500

    def __init__(self, error: str, code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": self.error, "code": self.code}


class ValidationError(AppError):
    """Request rejected before any remote call or resource allocation"""

    code = 400


class MissingPositives(ValidationError):
    def __init__(self):
        super().__init__("Missing positives images")


class MissingNegatives(ValidationError):
    def __init__(self):
        super().__init__("Missing negatives images")


class MissingName(ValidationError):
    def __init__(self):
        super().__init__("Missing classifier name")


class InsufficientPositives(ValidationError):
    def __init__(self, minimum: int, sent: int):
        super().__init__(f"Minimum positives images ({minimum}) sent:{sent}")
        self.minimum = minimum
        self.sent = sent


class InsufficientNegatives(ValidationError):
    def __init__(self, minimum: int, sent: int):
        super().__init__(f"Minimum negatives images ({minimum}) sent:{sent}")
        self.minimum = minimum
        self.sent = sent


class InvalidRequest(ValidationError):
    """No usable image source in a classify request"""

    def __init__(self, error: str = "Malformed URL"):
        super().__init__(error)


class InvalidImage(ValidationError):
    """Image payload could not be decoded or read"""


class RemoteServiceError(AppError):
    """Failure reported by a remote recognition service"""

    def __init__(self, error: str, code: Optional[int] = None, service: Optional[str] = None):
        if code is None or code < 400:
            code = 500
        super().__init__(error, code)
        self.service = service
