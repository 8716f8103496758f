"""API route modules."""

from flask import Flask

from ..websocket.live_reload import live_reload_bp
from .static import static_bp


def register_routes(app: Flask) -> None:
    """Register all route blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(live_reload_bp)
    app.register_blueprint(static_bp)
