"""WebSocket functionality for the API."""

from .connection import LiveConnection
from .live_reload import live_reload_bp
from .notifier import Notifier
from .registry import ClientRegistry

__all__ = ["ClientRegistry", "LiveConnection", "Notifier", "live_reload_bp"]
