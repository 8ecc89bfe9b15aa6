"""Common test fixtures for all test modules"""
import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from video_comments import create_app
from video_comments.auth import SESSION_USER_KEY
from video_comments.client.api import CommentEntry
from video_comments.client.errors import ApiError
from video_comments.config import TestingConfig
from video_comments.models.user import User
from video_comments.utils.timefmt import format_timestamp


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database"""
    app = create_app(TestingConfig)
    yield app
    app.extensions["engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    session = app.extensions["session_factory"]()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    """Create a committed user; verified unless told otherwise"""
    def _make(name: str, *, verified: bool = True) -> User:
        user = User(
            name=name,
            email=f"{name.lower()}@example.com",
            email_verified_at=datetime(2026, 1, 1, tzinfo=timezone.utc) if verified else None,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


@pytest.fixture
def bob(make_user):
    return make_user("Bob")


def _login(test_client, user: User) -> None:
    """Sign a Flask test client in the way the auth subsystem does"""
    with test_client.session_transaction() as sess:
        sess[SESSION_USER_KEY] = user.id


def _flask_transport(test_client) -> httpx.MockTransport:
    """Route httpx requests into a Flask test client"""
    def handler(request: httpx.Request) -> httpx.Response:
        headers = {}
        if "content-type" in request.headers:
            headers["Content-Type"] = request.headers["content-type"]
        response = test_client.open(
            request.url.path,
            method=request.method,
            query_string=request.url.query.decode(),
            data=request.content,
            headers=headers,
        )
        return httpx.Response(
            response.status_code,
            content=response.get_data(),
            headers={"Content-Type": response.content_type},
        )

    return httpx.MockTransport(handler)


async def _settle(rounds: int = 10) -> None:
    """Let pending tasks (player readiness, callbacks) run"""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakePlayer:
    """In-memory stand-in for the embedded player SDK"""

    def __init__(self, region: str, video_id: str, *, current_time: float = 0.0, auto_ready: bool = True):
        self.region = region
        self.video_id = video_id
        self.current_time = current_time
        self.handlers: dict = {}
        self.destroyed = False
        self.fail_get = False
        self.fail_seek = False
        self.seeks: list = []
        self._ready = asyncio.Event()
        if auto_ready:
            self._ready.set()

    def make_ready(self) -> None:
        self._ready.set()

    async def ready(self) -> None:
        await self._ready.wait()

    async def get_current_time(self) -> float:
        if self.fail_get:
            raise RuntimeError("player unreachable")
        return self.current_time

    async def set_current_time(self, seconds: float) -> float:
        if self.fail_seek:
            raise RuntimeError("seek rejected")
        self.seeks.append(seconds)
        self.current_time = seconds
        return seconds

    def on(self, event, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event, handler) -> None:
        self.handlers.get(event, []).remove(handler)

    def fire_time_update(self, seconds: float) -> None:
        for handler in list(self.handlers.get("timeupdate", [])):
            handler({"seconds": seconds, "percent": 0.0, "duration": 600.0})

    async def destroy(self) -> None:
        self.destroyed = True


class FakePlayerFactory:
    """Records every player it builds"""

    def __init__(self, *, current_time: float = 0.0, auto_ready: bool = True):
        self.current_time = current_time
        self.auto_ready = auto_ready
        self.created: list = []

    def __call__(self, region: str, video_id: str) -> FakePlayer:
        player = FakePlayer(region, video_id, current_time=self.current_time, auto_ready=self.auto_ready)
        self.created.append(player)
        return player

    @property
    def last(self) -> FakePlayer:
        return self.created[-1]


class FakeCommentsApi:
    """In-memory comments API with switchable failures"""

    def __init__(self, author_id: int = 1, author_name: str = "Alice"):
        self.author_id = author_id
        self.author_name = author_name
        self.by_video: dict = {}
        self.calls: list = []
        self.fail: set = set()
        self.gate = None
        self._next_id = 1

    def seed(self, video_id: str, *, text: str, timestamp: float, user_id: int, username: str) -> CommentEntry:
        entry = CommentEntry(
            id=self._next_id,
            username=username,
            user_id=user_id,
            text=text,
            timestamp=timestamp,
            timestamp_formatted=format_timestamp(timestamp),
            created_at="2026-10-17T12:00:00+00:00",
        )
        self._next_id += 1
        self.by_video.setdefault(video_id, []).append(entry)
        return entry

    async def _checkpoint(self, name: str) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail:
            raise ApiError(status_code=500, message=f"{name} failed")

    async def list_comments(self, video_id: str):
        self.calls.append(("list", video_id))
        await self._checkpoint("list")
        return list(self.by_video.get(video_id, []))

    async def create_comment(self, video_id: str, text: str, timestamp: float):
        self.calls.append(("create", video_id, text, timestamp))
        await self._checkpoint("create")
        return self.seed(video_id, text=text, timestamp=timestamp, user_id=self.author_id, username=self.author_name)

    async def delete_comment(self, comment_id: int) -> str:
        self.calls.append(("delete", comment_id))
        await self._checkpoint("delete")
        for entries in self.by_video.values():
            entries[:] = [e for e in entries if e.id != comment_id]
        return "Comment deleted successfully"


@pytest.fixture
def player_factory():
    return FakePlayerFactory()


@pytest.fixture
def fake_api():
    return FakeCommentsApi()


@pytest.fixture
def login():
    return _login


@pytest.fixture
def flask_transport():
    return _flask_transport


@pytest.fixture
def settle():
    return _settle
