"""Service layer for timestamp-anchored video comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.orm import Session

from video_comments.errors import AuthenticationRequiredError, NotFoundError, UnauthorizedError, ValidationError
from video_comments.models.comment import VideoComment
from video_comments.repositories.comment_repository import CommentRepository
from video_comments.schemas.comment import CommentCreateSchema, CommentListQuerySchema
from video_comments.utils.timefmt import format_timestamp

logger = logging.getLogger(__name__)


class ActingUser(Protocol):
    """The authenticated identity a request acts as."""

    id: int
    name: str


@dataclass(frozen=True)
class CommentView:
    """A comment denormalized with its author's display name."""

    id: int
    username: str
    user_id: int
    text: str
    timestamp: float
    timestamp_formatted: str
    created_at: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_view(comment: VideoComment, username: str) -> CommentView:
    timestamp = float(comment.timestamp)
    return CommentView(
        id=int(comment.id),
        username=username,
        user_id=int(comment.user_id),
        text=comment.comment,
        timestamp=timestamp,
        timestamp_formatted=format_timestamp(timestamp),
        created_at=_as_utc(comment.created_at),
    )


def _load(schema: Any, payload: dict[str, Any]) -> dict[str, Any]:
    try:
        return schema.load(payload)
    except MarshmallowValidationError as exc:
        raise ValidationError(details=exc.messages) from exc


class CommentService:
    """Comment use-cases. The acting user is always passed in explicitly."""

    def __init__(self, repository: CommentRepository | None = None) -> None:
        self._repo = repository or CommentRepository()
        self._list_schema = CommentListQuerySchema()
        self._create_schema = CommentCreateSchema()

    def list_comments(self, session: Session, video_id: Any) -> list[CommentView]:
        payload = {} if video_id is None else {"video_id": video_id}
        data = _load(self._list_schema, payload)

        rows = self._repo.list_for_video(session, data["video_id"])
        return [_to_view(comment, username) for comment, username in rows]

    def create_comment(
        self,
        session: Session,
        *,
        video_id: Any,
        text: Any,
        timestamp: Any,
        acting_user: ActingUser | None,
    ) -> CommentView:
        if acting_user is None:
            raise AuthenticationRequiredError()

        payload = {
            key: value
            for key, value in (("video_id", video_id), ("comment", text), ("timestamp", timestamp))
            if value is not None
        }
        data = _load(self._create_schema, payload)

        comment = self._repo.create(
            session,
            user_id=acting_user.id,
            video_id=data["video_id"],
            text=data["text"],
            timestamp=round(float(data["timestamp"]), 2),
        )
        logger.info(
            "Comment %s created by user %s on video %s at %.2fs",
            comment.id,
            acting_user.id,
            comment.video_id,
            comment.timestamp,
        )
        return _to_view(comment, acting_user.name)

    def delete_comment(self, session: Session, comment_id: int, acting_user: ActingUser | None) -> None:
        if acting_user is None:
            raise AuthenticationRequiredError()

        comment = self._repo.get_by_id(session, comment_id)
        if comment is None:
            raise NotFoundError(message=f"Comment {comment_id} not found")

        if comment.user_id != acting_user.id:
            logger.warning("User %s refused deletion of comment %s", acting_user.id, comment_id)
            raise UnauthorizedError()

        self._repo.delete(session, comment)
        logger.info("Comment %s deleted by its owner %s", comment_id, acting_user.id)
