"""Health check routes."""

from __future__ import annotations

from flask import Blueprint
from sqlalchemy import text

from video_comments.db import get_session
from video_comments.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Liveness plus a round trip to the database."""

    get_session().execute(text("SELECT 1"))
    return ok({"status": "ok"})
