"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error. `details` maps field name to messages."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=422, details=details)


class AuthenticationRequiredError(AppError):
    """No authenticated user on a request that needs one."""

    def __init__(self, message: str = "Unauthenticated", details: Any | None = None) -> None:
        super().__init__(code="unauthenticated", message=message, status_code=401, details=details)


class UnauthorizedError(AppError):
    """Authenticated, but not allowed to act on the resource.

    The message stays generic: it must not reveal who the owner is.
    """

    def __init__(self, message: str = "Unauthorized", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=403, details=details)
