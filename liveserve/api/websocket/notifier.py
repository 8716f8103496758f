"""Bridge filesystem changes to live-reload broadcasts."""

import logging
from threading import Thread
from typing import Optional

from ..config import RELOAD_MESSAGE
from ..errors import WatchObserveError
from ..utils.file_watcher import ChangeEvent, WatchItem
from .registry import ClientRegistry

logger = logging.getLogger(__name__)


class Notifier:
    """Read the watcher's stream and tell every client to reload on writes."""

    def __init__(self, watcher, registry: ClientRegistry, message: str = RELOAD_MESSAGE):
        """Initialize the notifier.

        Args:
            watcher: Object whose ``events()`` yields change events and errors
            registry: Registry of connected clients
            message: Text broadcast on every write
        """
        self.watcher = watcher
        self.registry = registry
        self.message = message
        self.thread: Optional[Thread] = None

    def handle(self, item: WatchItem) -> bool:
        """Dispatch one item from the watcher stream.

        Returns:
            True if a broadcast was sent
        """
        if isinstance(item, WatchObserveError):
            logger.warning("Watch error: %s", item)
            return False

        if not isinstance(item, ChangeEvent) or not item.is_write:
            logger.debug("Ignoring %r", item)
            return False

        logger.info("File updated: %s", item.path)
        outcomes = self.registry.broadcast(self.message)
        dropped = sum(1 for _, error in outcomes if error is not None)
        if dropped:
            logger.debug("Dropped %d of %d clients", dropped, len(outcomes))
        return True

    def run(self) -> None:
        """Process the watcher stream until it ends."""
        for item in self.watcher.events():
            try:
                self.handle(item)
            except Exception as e:
                logger.error("Failed to handle %r: %s", item, e, exc_info=True)
        logger.debug("Change stream closed, notifier stopping")

    def start(self) -> None:
        """Run the notifier loop in a background thread."""
        if self.thread is not None:
            return
        self.thread = Thread(target=self.run, name="liveserve-notifier")
        self.thread.daemon = True
        self.thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the notifier loop to finish."""
        if self.thread is not None:
            self.thread.join(timeout)
