"""Adapter around the embedded third-party video player.

The adapter owns one player instance bound to one video. It is acquired when
the comment panel mounts and released when it unmounts; rebinding to another
video tears the old instance down first.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from typing import Any, Callable, Protocol

from video_comments.client.errors import UpstreamPlayerError

logger = logging.getLogger(__name__)

TIME_UPDATE_EVENT = "timeupdate"


class PlayerBackend(Protocol):
    """What the player SDK has to provide."""

    async def ready(self) -> None: ...

    async def get_current_time(self) -> float: ...

    async def set_current_time(self, seconds: float) -> float: ...

    def on(self, event: str, handler: Callable[[Any], None]) -> None: ...

    def off(self, event: str, handler: Callable[[Any], None]) -> None: ...

    async def destroy(self) -> None: ...


# (display region, video id) -> player instance
PlayerFactory = Callable[[str, str], PlayerBackend]
TimeUpdateHandler = Callable[[float], None]
ReadyHandler = Callable[["PlayerAdapter"], None]


class PlayerAdapter:
    """Push playback position out, let callers query and seek the live player."""

    def __init__(
        self,
        factory: PlayerFactory,
        video_id: str,
        *,
        region: str = "player",
        on_time_update: TimeUpdateHandler | None = None,
        on_ready: ReadyHandler | None = None,
    ) -> None:
        self._factory = factory
        self._video_id = video_id
        self._region = region
        self._on_time_update = on_time_update
        self._on_ready = on_ready

        self._backend: PlayerBackend | None = None
        self._ready_task: asyncio.Task[None] | None = None
        self._ready = False

    @property
    def video_id(self) -> str:
        return self._video_id

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_open(self) -> bool:
        return self._backend is not None

    async def open(self) -> PlayerAdapter:
        """Create the player. Readiness is awaited in the background."""

        if self._backend is not None:
            raise RuntimeError(f"Player for video {self._video_id} is already open")

        try:
            backend = self._factory(self._region, self._video_id)
        except Exception as exc:
            raise UpstreamPlayerError(
                f"Could not create the video player for {self._video_id}", operation="open"
            ) from exc

        try:
            backend.on(TIME_UPDATE_EVENT, self._handle_time_update)
        except Exception as exc:
            try:
                await backend.destroy()
            except Exception:
                logger.exception("Could not release a half-initialized player for video %s", self._video_id)
            raise UpstreamPlayerError(
                "Could not subscribe to the player's time updates", operation="open"
            ) from exc

        self._backend = backend
        self._ready = False
        self._ready_task = asyncio.create_task(self._wait_until_ready(backend))
        logger.debug("Player opened for video %s in region %s", self._video_id, self._region)
        return self

    async def close(self) -> None:
        """Release the player. Safe to call more than once."""

        backend, task = self._backend, self._ready_task
        self._backend = None
        self._ready_task = None
        self._ready = False

        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if backend is None:
            return

        backend.off(TIME_UPDATE_EVENT, self._handle_time_update)
        try:
            await backend.destroy()
        except Exception as exc:
            raise UpstreamPlayerError("Could not release the video player", operation="destroy") from exc
        logger.debug("Player closed for video %s", self._video_id)

    async def rebind(self, video_id: str) -> None:
        """Point the adapter at another video."""

        try:
            await self.close()
        finally:
            self._video_id = video_id
            await self.open()

    async def get_current_time(self) -> float:
        backend = self._require_ready("get_current_time")
        try:
            return float(await backend.get_current_time())
        except Exception as exc:
            raise UpstreamPlayerError(
                "Could not read the current playback time", operation="get_current_time"
            ) from exc

    async def set_current_time(self, seconds: float) -> float:
        backend = self._require_ready("set_current_time")
        try:
            return float(await backend.set_current_time(float(seconds)))
        except Exception as exc:
            raise UpstreamPlayerError(
                f"Could not seek the video to {seconds}s", operation="set_current_time"
            ) from exc

    async def __aenter__(self) -> PlayerAdapter:
        return await self.open()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _require_ready(self, operation: str) -> PlayerBackend:
        if self._backend is None or not self._ready:
            raise UpstreamPlayerError("Video player is not ready", operation=operation)
        return self._backend

    async def _wait_until_ready(self, backend: PlayerBackend) -> None:
        try:
            await backend.ready()
        except Exception:
            logger.exception("Player for video %s never became ready", self._video_id)
            return

        if backend is not self._backend:
            return

        self._ready = True
        if self._on_ready is not None:
            self._on_ready(self)

        try:
            seconds = await backend.get_current_time()
        except Exception:
            logger.exception("Could not read the initial playback time of video %s", self._video_id)
            return
        self._emit(backend, seconds)

    def _handle_time_update(self, data: Any) -> None:
        seconds = data.get("seconds") if isinstance(data, Mapping) else data
        if seconds is None:
            return
        self._emit(self._backend, seconds)

    def _emit(self, backend: PlayerBackend | None, seconds: Any) -> None:
        # Late events from a released (or replaced) player are dropped.
        if backend is None or backend is not self._backend:
            return
        if self._on_time_update is not None:
            self._on_time_update(float(seconds))
