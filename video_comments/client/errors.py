"""Errors raised on the viewer side (player and API calls)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class UpstreamPlayerError(Exception):
    """The embedded player failed to answer a query or a seek."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation


@dataclass
class ApiError(Exception):
    """Non-2xx response (or transport failure, ``status_code == 0``)."""

    status_code: int
    message: str
    details: Any | None = None

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"
