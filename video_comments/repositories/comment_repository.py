"""Repository layer for video comment persistence."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from video_comments.models.comment import VideoComment
from video_comments.models.user import User


class CommentRepository:
    """CRUD operations for VideoComment."""

    def list_for_video(self, session: Session, video_id: str) -> Sequence[tuple[VideoComment, str]]:
        """Comments of one video joined with their author's name.

        Ordered by timestamp, then by insertion order for equal timestamps.
        """

        stmt = (
            select(VideoComment, User.name)
            .join(User, User.id == VideoComment.user_id)
            .where(VideoComment.video_id == video_id)
            .order_by(VideoComment.timestamp.asc(), VideoComment.id.asc())
        )
        return [(comment, str(name)) for comment, name in session.execute(stmt).all()]

    def get_by_id(self, session: Session, comment_id: int) -> VideoComment | None:
        return session.get(VideoComment, comment_id)

    def create(
        self,
        session: Session,
        *,
        user_id: int,
        video_id: str,
        text: str,
        timestamp: float,
    ) -> VideoComment:
        now = datetime.now(timezone.utc)
        comment = VideoComment(
            user_id=user_id,
            video_id=video_id,
            comment=text,
            timestamp=timestamp,
            created_at=now,
            updated_at=now,
        )
        session.add(comment)
        session.flush()  # assign PK
        return comment

    def delete(self, session: Session, comment: VideoComment) -> None:
        session.delete(comment)
        session.flush()
