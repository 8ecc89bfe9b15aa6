"""Web page routes."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, redirect, render_template, session, url_for

from video_comments.auth import SESSION_USER_KEY, current_user


web_bp = Blueprint("web", __name__)


@web_bp.get("/")
def index():
    user = current_user()
    page_props = {
        "auth": {"user": {"id": user.id, "name": user.name} if user is not None else None},
        "videoId": str(current_app.config["FEATURED_VIDEO_ID"]),
        "canRegister": bool(current_app.config.get("CAN_REGISTER", True)),
    }
    return render_template("index.html", page_props=page_props)


@web_bp.post("/logout")
def logout():
    session.pop(SESSION_USER_KEY, None)
    return redirect(url_for("web.index"))


@web_bp.get("/favicon.ico")
def favicon() -> Response:
    svg = """<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 64 64'>
    <rect x='4' y='12' width='56' height='40' rx='8' fill='#0b1220'/>
    <path d='M26 22 L44 32 L26 42 Z' fill='#eaf0ff'/>
    <rect x='10' y='46' width='44' height='3' rx='1.5' fill='#2dd4bf'/>
</svg>"""

    return Response(svg, mimetype="image/svg+xml")
