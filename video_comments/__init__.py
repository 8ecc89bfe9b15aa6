"""Timestamp-anchored video comments: Flask application package."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dotenv import load_dotenv
from flask import Flask

if TYPE_CHECKING:
    from video_comments.config import BaseConfig


def create_app(config_object: type[BaseConfig] | None = None) -> Flask:
    """Application factory.

    Args:
        config_object: Configuration class; resolved from APP_ENV when omitted.

    Returns:
        Configured Flask application.
    """
    # Before the config module is imported: its defaults read the environment.
    load_dotenv()

    from video_comments.auth import init_auth
    from video_comments.config import get_config
    from video_comments.db import init_db
    from video_comments.error_handlers import register_error_handlers
    from video_comments.logging_config import configure_logging
    from video_comments.routes.comments import comments_bp
    from video_comments.routes.health import health_bp
    from video_comments.routes.web import web_bp

    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    configure_logging(app)
    init_db(app)
    init_auth(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(web_bp)
    app.register_blueprint(comments_bp, url_prefix="/api")

    return app
