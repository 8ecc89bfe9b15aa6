"""Request identity: who is acting, and the gate for write endpoints.

Login and registration belong to the authentication subsystem. It records the
signed-in user's id in the Flask session under ``user_id``; this module only
reads it.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import Flask, g, session

from video_comments.db import get_session
from video_comments.errors import AuthenticationRequiredError, UnauthorizedError
from video_comments.models.user import User

SESSION_USER_KEY = "user_id"

F = TypeVar("F", bound=Callable[..., Any])


def init_auth(app: Flask) -> None:
    """Load the acting user for every request.

    Must be registered after ``init_db`` so the DB session already exists.
    """

    @app.before_request
    def _load_current_user() -> None:
        g.user = None  # type: ignore[attr-defined]
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            return

        user = get_session().get(User, int(user_id))
        if user is None:
            # Stale session for a user that no longer exists.
            session.pop(SESSION_USER_KEY, None)
            return
        g.user = user  # type: ignore[attr-defined]


def current_user() -> User | None:
    return getattr(g, "user", None)


def login_required(view: F) -> F:
    """Reject anonymous (401) and unverified (403) callers."""

    @wraps(view)
    def _wrapped(*args: Any, **kwargs: Any) -> Any:
        user = current_user()
        if user is None:
            raise AuthenticationRequiredError()
        if not user.is_verified:
            raise UnauthorizedError(message="Your email address is not verified.")
        return view(*args, **kwargs)

    return _wrapped  # type: ignore[return-value]
