"""Comment panel: viewer-side state of the comment list and the new-comment form.

Everything runs on one asyncio loop. Each public coroutine re-checks that the
panel is still mounted after every ``await`` so that nothing mutates state
once :meth:`CommentPanel.unmount` has been called.
"""

from __future__ import annotations

import inspect
import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Union

from video_comments.client.api import CommentEntry, CommentsApiClient
from video_comments.client.errors import ApiError, UpstreamPlayerError
from video_comments.client.player import PlayerAdapter, PlayerFactory
from video_comments.schemas.comment import COMMENT_MAX_LENGTH
from video_comments.utils.timefmt import format_timestamp

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading comments..."
EMPTY_MESSAGE = "No comments yet. Be the first to comment!"
LOGIN_PROMPT = "Please log in to leave a comment"
DELETE_CONFIRMATION = "Are you sure you want to delete this comment?"

LOGIN_REQUIRED_NOTICE = "Please log in to comment"
PLAYER_NOT_READY_NOTICE = "Video player not ready. Please try again."
SUBMIT_FAILED_NOTICE = "Failed to submit comment. Please try again."
DELETE_FAILED_NOTICE = "Failed to delete comment. Please try again."
LOAD_FAILED_NOTICE = "Failed to load comments. Please reload the page."
SEEK_FAILED_NOTICE = "Could not seek the video. Please try again."
PLAYER_FAILED_NOTICE = "Could not load the video player. Please reload the page."

ConfirmHandler = Callable[[str], Union[Awaitable[bool], bool]]
NoticeHandler = Callable[[str], None]


@dataclass(frozen=True)
class Viewer:
    """The signed-in user, as handed over by the page."""

    id: int
    name: str


@dataclass(frozen=True)
class CommentCardView:
    comment_id: int
    username: str
    text: str
    timestamp: float
    timestamp_label: str
    can_delete: bool


@dataclass(frozen=True)
class CommentFormView:
    time_label: str
    draft: str
    can_submit: bool
    max_length: int = COMMENT_MAX_LENGTH


@dataclass(frozen=True)
class LoginPromptView:
    message: str
    can_register: bool


@dataclass(frozen=True)
class PanelView:
    """Snapshot of what the panel shows."""

    status_message: str | None
    cards: tuple[CommentCardView, ...]
    form: CommentFormView | LoginPromptView
    notices: tuple[str, ...]


def _sorted_by_timestamp(entries: list[CommentEntry]) -> list[CommentEntry]:
    # sorted() is stable: equal timestamps keep their arrival order.
    return sorted(entries, key=lambda entry: entry.timestamp)


class CommentPanel:
    """Comment list, form and player sync for one video."""

    def __init__(
        self,
        api: CommentsApiClient,
        player_factory: PlayerFactory,
        video_id: str,
        *,
        confirm: ConfirmHandler,
        viewer: Viewer | None = None,
        can_register: bool = True,
        notify: NoticeHandler | None = None,
        region: str = "player",
    ) -> None:
        self._api = api
        self._confirm = confirm
        self._notify_handler = notify
        self._player = PlayerAdapter(
            player_factory,
            video_id,
            region=region,
            on_time_update=self.handle_time_update,
        )
        self._mounted = False

        self.video_id = video_id
        self.viewer = viewer
        self.can_register = can_register

        self.comments: list[CommentEntry] = []
        self.is_loading = True
        self.current_time = 0.0
        self.display_time = format_timestamp(0)
        self.draft = ""
        self.notices: list[str] = []

    @property
    def player(self) -> PlayerAdapter:
        return self._player

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def can_submit(self) -> bool:
        return self.viewer is not None and bool(self.draft.strip())

    async def mount(self) -> None:
        """Acquire the player and load the comments."""

        if self._mounted:
            return
        self._mounted = True
        try:
            await self._player.open()
        except UpstreamPlayerError:
            logger.exception("Error opening the video player for %s", self.video_id)
            self._notify(PLAYER_FAILED_NOTICE)
        await self.refresh()

    async def unmount(self) -> None:
        """Release the player. No state changes happen after this."""

        if not self._mounted:
            return
        self._mounted = False
        try:
            await self._player.close()
        except UpstreamPlayerError:
            logger.exception("Error releasing the video player")

    async def switch_video(self, video_id: str) -> None:
        """Rebind the player to another video and reload its comments."""

        if not self._mounted:
            raise RuntimeError("Comment panel is not mounted")

        self.video_id = video_id
        self.comments = []
        self.is_loading = True
        self.current_time = 0.0
        self.display_time = format_timestamp(0)
        try:
            await self._player.rebind(video_id)
        except UpstreamPlayerError:
            logger.exception("Error rebinding the video player to %s", video_id)
            self._notify(PLAYER_FAILED_NOTICE)
        await self.refresh()

    async def refresh(self) -> None:
        video_id = self.video_id
        entries: list[CommentEntry] | None
        try:
            entries = await self._api.list_comments(video_id)
        except ApiError:
            logger.exception("Error fetching comments for video %s", video_id)
            entries = None

        # Unmounted, or switched to another video while the request was out.
        if not self._mounted or video_id != self.video_id:
            return

        if entries is None:
            self._notify(LOAD_FAILED_NOTICE)
        else:
            self.comments = _sorted_by_timestamp(entries)
        self.is_loading = False

    def handle_time_update(self, seconds: float) -> None:
        """Player push: remember the position and show it on the form."""

        if not self._mounted:
            return
        value = float(seconds)
        if not math.isfinite(value) or value < 0:
            logger.warning("Ignoring invalid playback position %r", seconds)
            return
        self.current_time = value
        self.display_time = format_timestamp(value)

    async def focus_input(self) -> None:
        """Refresh the form's time label from the live player."""

        if not self._player.is_ready:
            return
        video_id = self.video_id
        try:
            seconds = await self._player.get_current_time()
        except UpstreamPlayerError:
            logger.exception("Error getting current time")
            return

        if not self._mounted or video_id != self.video_id:
            return
        if not math.isfinite(seconds) or seconds < 0:
            logger.warning("Ignoring invalid playback position %r", seconds)
            return
        self.display_time = format_timestamp(seconds)

    def set_draft(self, text: str) -> None:
        if self._mounted:
            self.draft = text[:COMMENT_MAX_LENGTH]

    async def submit(self) -> CommentEntry | None:
        """Post the draft anchored at the player's position right now."""

        text = self.draft
        if not text.strip():
            return None
        if self.viewer is None:
            self._notify(LOGIN_REQUIRED_NOTICE)
            return None
        if not self._player.is_ready:
            self._notify(PLAYER_NOT_READY_NOTICE)
            return None

        video_id = self.video_id
        try:
            timestamp = await self._player.get_current_time()
            entry = await self._api.create_comment(video_id, text, timestamp)
        except (UpstreamPlayerError, ApiError):
            logger.exception("Error submitting comment")
            self._notify(SUBMIT_FAILED_NOTICE)
            return None

        if not self._mounted:
            return entry

        if video_id == self.video_id:
            self.comments = _sorted_by_timestamp([*self.comments, entry])
        # Keep anything typed while the request was in flight.
        if self.draft == text:
            self.draft = ""
        return entry

    async def seek(self, timestamp: float) -> bool:
        """Jump the player to a comment's anchor."""

        if not self._player.is_ready:
            return False
        try:
            await self._player.set_current_time(timestamp)
        except UpstreamPlayerError:
            logger.exception("Error seeking video")
            self._notify(SEEK_FAILED_NOTICE)
            return False
        return True

    async def delete(self, comment_id: int) -> bool:
        """Delete one of the viewer's comments after explicit confirmation.

        The comment leaves the list only once the server has confirmed.
        """

        if self.viewer is None:
            return False

        confirmed = self._confirm(DELETE_CONFIRMATION)
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed or not self._mounted:
            return False

        try:
            await self._api.delete_comment(comment_id)
        except ApiError:
            logger.exception("Error deleting comment %s", comment_id)
            self._notify(DELETE_FAILED_NOTICE)
            return False

        if self._mounted:
            self.comments = [entry for entry in self.comments if entry.id != comment_id]
        return True

    def dismiss_notices(self) -> None:
        self.notices = []

    def render(self) -> PanelView:
        status: str | None = None
        cards: tuple[CommentCardView, ...] = ()
        if self.is_loading:
            status = LOADING_MESSAGE
        elif not self.comments:
            status = EMPTY_MESSAGE
        else:
            viewer_id = self.viewer.id if self.viewer is not None else None
            cards = tuple(
                CommentCardView(
                    comment_id=entry.id,
                    username=entry.username,
                    text=entry.text,
                    timestamp=entry.timestamp,
                    timestamp_label=entry.timestamp_formatted,
                    can_delete=viewer_id is not None and viewer_id == entry.user_id,
                )
                for entry in self.comments
            )

        form: CommentFormView | LoginPromptView
        if self.viewer is None:
            form = LoginPromptView(message=LOGIN_PROMPT, can_register=self.can_register)
        else:
            form = CommentFormView(
                time_label=self.display_time,
                draft=self.draft,
                can_submit=self.can_submit,
            )

        return PanelView(
            status_message=status,
            cards=cards,
            form=form,
            notices=tuple(self.notices),
        )

    def _notify(self, message: str) -> None:
        if not self._mounted:
            logger.info("Notice after unmount dropped: %s", message)
            return
        self.notices.append(message)
        if self._notify_handler is not None:
            self._notify_handler(message)
