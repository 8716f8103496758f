"""Flask application setup and configuration."""

import logging
import os

from flask import Flask

from .config import DEFAULT_LOG_LEVEL, LOG_FORMAT
from .routes import register_routes
from .websocket.registry import ClientRegistry

# Create loggers
api_logger = logging.getLogger("liveserve.api")
werkzeug_logger = logging.getLogger("werkzeug")


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
    """Configure console logging for the server.

    Args:
        level: Level for the liveserve loggers
    """
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        force=True,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("liveserve").setLevel(level)

    # Werkzeug should use WARNING to avoid request spam
    werkzeug_logger.setLevel(logging.WARNING)

    # watchdog is chatty at debug level
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def create_app(root: str, registry: ClientRegistry) -> Flask:
    """Create the Flask app that serves a directory with live reload.

    Args:
        root: Directory to serve files from
        registry: Registry that live-reload connections are added to

    Returns:
        Configured Flask application
    """
    # No static folder: every path is resolved against the served root
    app = Flask(__name__, static_folder=None)
    app.debug = False
    app.config["serve_root"] = os.path.abspath(root)
    app.config["client_registry"] = registry
    register_routes(app)
    return app
