"""Timestamp-anchored video comment.

Rows are create-once: there is no update path, and deletion is a hard delete.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from video_comments.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VideoComment(Base):
    __tablename__ = "video_comments"
    __table_args__ = (Index("ix_video_comments_video_id_timestamp", "video_id", "timestamp"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    video_id: Mapped[str] = mapped_column(String(255), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    # Seconds into the video, two decimal places.
    timestamp: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
