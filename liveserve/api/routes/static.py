"""Static file serving routes."""

import os

from flask import Blueprint, current_app, make_response
from werkzeug.security import safe_join

from ..config import (
    BODY_CLOSE_TAG,
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    INDEX_FILE,
    NOT_FOUND_BODY,
    RELOAD_SNIPPET,
)

static_bp = Blueprint("static_files", __name__)


def get_content_type(path: str) -> str:
    """Map a file extension to the Content-Type it is served with."""
    extension = os.path.splitext(path)[1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def inject_reload_snippet(data: bytes) -> bytes:
    """Insert the live-reload script before the first closing body tag."""
    return data.replace(BODY_CLOSE_TAG, RELOAD_SNIPPET + BODY_CLOSE_TAG, 1)


def not_found():
    response = make_response(NOT_FOUND_BODY, 404)
    response.headers["Content-Type"] = "text/plain; charset=utf-8"
    return response


@static_bp.route("/")
def serve_index():
    """Serve the index page of the root."""
    return serve_file(INDEX_FILE)


@static_bp.route("/<path:filename>")
def serve_file(filename):
    """Serve a file from the root, wiring HTML pages up for live reload."""
    path = safe_join(current_app.config["serve_root"], filename)
    if path is None or not os.path.isfile(path):
        return not_found()

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError:
        return not_found()

    content_type = get_content_type(path)
    if content_type == "text/html":
        data = inject_reload_snippet(data)

    response = make_response(data)
    response.headers["Content-Type"] = content_type
    return response
