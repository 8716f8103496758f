"""Live reload WebSocket functionality."""

import logging

from flask import Blueprint, Response, current_app, request
from simple_websocket import ConnectionClosed, Server

from ..config import LIVE_RELOAD_PATH
from ..errors import UpgradeError
from .connection import LiveConnection

logger = logging.getLogger(__name__)

live_reload_bp = Blueprint("live_reload", __name__)


class WebSocketResponse(Response):
    """Response returned once a WebSocket is finished with the request.

    The socket has already been taken over, so calling it aborts the
    request instead of writing an HTTP response.
    """

    def __call__(self, environ, start_response):
        # werkzeug's dev server treats ConnectionError as a dropped client
        raise ConnectionError("WebSocket connection closed")


def accept_connection(environ) -> LiveConnection:
    """Perform the WebSocket handshake for a WSGI request.

    Raises:
        UpgradeError: If the request is not an upgrade or the handshake fails
    """
    remote_addr = environ.get("REMOTE_ADDR")
    if environ.get("HTTP_UPGRADE", "").lower() != "websocket":
        raise UpgradeError(f"Request from {remote_addr} is not a WebSocket upgrade")
    try:
        ws = Server.accept(environ)
    except Exception as e:
        raise UpgradeError(f"Handshake with {remote_addr} failed: {e}") from e
    return LiveConnection(ws, remote_addr=remote_addr)


@live_reload_bp.route(LIVE_RELOAD_PATH)
def live_reload():
    """Hold a live-reload connection open until the browser goes away."""
    registry = current_app.config["client_registry"]

    try:
        connection = accept_connection(request.environ)
    except UpgradeError as e:
        logger.warning("WebSocket upgrade failed: %s", e)
        return Response("WebSocket upgrade failed.", status=400, mimetype="text/plain")

    try:
        registry.add(connection)
        logger.debug("Client connected: %s", connection.remote_addr)
        while True:
            # Inbound messages carry no meaning, reading only detects the close
            connection.receive()
    except ConnectionClosed:
        pass
    finally:
        registry.remove(connection)
        connection.close()
        logger.debug("Client disconnected: %s", connection.remote_addr)

    return WebSocketResponse()
