"""Viewer-side pieces: player adapter, API client and the comment panel."""

from video_comments.client.api import CommentEntry, CommentsApiClient
from video_comments.client.errors import ApiError, UpstreamPlayerError
from video_comments.client.panel import CommentPanel, Viewer
from video_comments.client.player import PlayerAdapter, PlayerBackend

__all__ = [
    "ApiError",
    "CommentEntry",
    "CommentPanel",
    "CommentsApiClient",
    "PlayerAdapter",
    "PlayerBackend",
    "UpstreamPlayerError",
    "Viewer",
]
