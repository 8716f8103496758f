"""Configuration constants for the API module."""

import logging

# Logging configuration
DEFAULT_LOG_LEVEL = logging.INFO
DEBUG_LOG_LEVEL = logging.DEBUG
QUIET_LOG_LEVEL = logging.WARNING
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# Server configuration
DEFAULT_ROOT = "."
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# Timeout configuration
SERVER_START_TIMEOUT = 5  # seconds
SHUTDOWN_JOIN_TIMEOUT = 5  # seconds

# WebSocket configuration
LIVE_RELOAD_PATH = "/ws"
RELOAD_MESSAGE = "reload"

# File watching configuration
WATCH_POLL_INTERVAL = 0.5  # seconds

# Static file configuration
INDEX_FILE = "index.html"
NOT_FOUND_BODY = "File not found."
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
}

# Injected in front of the first closing body tag of every HTML response
BODY_CLOSE_TAG = b"</body>"
RELOAD_SNIPPET = b"""    <script>
        // live-reload injected code
        var ws = new WebSocket("ws://" + location.host + "/ws");
        ws.onmessage = function() { window.location.reload(); };
    </script>
"""
