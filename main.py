"""Development entrypoint.

Exposes an `app` object without shadowing the `video_comments/` package.
"""

from video_comments import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=False)
