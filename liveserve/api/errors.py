"""Error types raised by the live-reload server."""

from typing import Optional


class LiveServeError(Exception):
    """Base class for all live-reload server errors."""


class WatchError(LiveServeError):
    """Base class for filesystem watch errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class WatchInitError(WatchError):
    """The underlying filesystem observer could not be created."""


class WatchRegisterError(WatchError):
    """A directory could not be registered for observation."""


class WatchObserveError(WatchError):
    """A runtime observation problem, such as a watched directory vanishing."""


class UpgradeError(LiveServeError):
    """A WebSocket handshake could not be completed."""


class DeliveryError(LiveServeError):
    """A message could not be written to a live connection."""
