"""ORM models."""

from video_comments.models.comment import VideoComment
from video_comments.models.user import User

__all__ = ["User", "VideoComment"]
