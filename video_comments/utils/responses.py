"""Helpers for consistent JSON responses."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(data: Any, status_code: int = 200) -> Response:
    """Success response. The payload is sent as-is (object or array)."""

    return jsonify(data), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> Response:
    """Error response."""

    return (
        jsonify({"error": message, "code": code, "details": details}),
        status_code,
    )
