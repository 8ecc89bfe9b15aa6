"""Video comment routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from video_comments.auth import current_user, login_required
from video_comments.db import get_session
from video_comments.schemas.comment import CommentSchema
from video_comments.services.comment_service import CommentService
from video_comments.utils.responses import ok

comments_bp = Blueprint("video_comments", __name__)

_comment_schema = CommentSchema()
_comments_schema = CommentSchema(many=True)
_service = CommentService()


@comments_bp.get("/video-comments")
def list_comments():
    """List every comment of a video, ordered by timestamp."""

    comments = _service.list_comments(get_session(), request.args.get("video_id"))
    return ok(_comments_schema.dump(comments))


@comments_bp.post("/video-comments")
@login_required
def create_comment():
    """Anchor a new comment at a playback position."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    comment = _service.create_comment(
        get_session(),
        video_id=payload.get("video_id"),
        text=payload.get("comment"),
        timestamp=payload.get("timestamp"),
        acting_user=current_user(),
    )

    # Commit occurs in teardown if no exception.
    return ok(_comment_schema.dump(comment), status_code=201)


@comments_bp.delete("/video-comments/<int:comment_id>")
@login_required
def delete_comment(comment_id: int):
    """Delete one of the caller's own comments."""

    _service.delete_comment(get_session(), comment_id, current_user())
    return ok({"message": "Comment deleted successfully"})
