"""Live-reload API module.

This module wires the static file server, the live-reload WebSocket and
the file watcher together.
"""

from .app import api_logger, configure_logging, create_app, werkzeug_logger
from .server import LiveServer
from .websocket import ClientRegistry, LiveConnection, Notifier

# Export the main interface
__all__ = [
    "LiveServer",
    "ClientRegistry",
    "LiveConnection",
    "Notifier",
    "create_app",
    "configure_logging",
    "api_logger",
    "werkzeug_logger",
]
