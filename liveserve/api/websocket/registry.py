"""Registry of connected live-reload clients."""

import logging
import threading
from typing import List, Optional, Set, Tuple

from ..errors import DeliveryError
from .connection import LiveConnection

logger = logging.getLogger(__name__)

DeliveryOutcome = Tuple[LiveConnection, Optional[DeliveryError]]


class ClientRegistry:
    """Thread-safe set of live connections.

    Every method takes the same lock. ``broadcast`` keeps it for the whole
    deliver-and-prune pass, so no add or remove can interleave with a
    notification in flight.
    """

    def __init__(self):
        self._clients: Set[LiveConnection] = set()
        self._lock = threading.Lock()

    def add(self, handle: LiveConnection) -> None:
        """Register a connection; adding it twice is a no-op."""
        with self._lock:
            self._clients.add(handle)

    def remove(self, handle: LiveConnection) -> bool:
        """Unregister a connection.

        Returns:
            True if the connection was registered
        """
        with self._lock:
            if handle in self._clients:
                self._clients.discard(handle)
                return True
            return False

    def snapshot(self) -> List[LiveConnection]:
        """Return the currently registered connections."""
        with self._lock:
            return list(self._clients)

    def broadcast(self, message: str) -> List[DeliveryOutcome]:
        """Send a message to every client and evict those that fail.

        Args:
            message: Text to deliver

        Returns:
            One (connection, error) pair per client; error is None on success
        """
        outcomes = []
        with self._lock:
            for handle in list(self._clients):
                try:
                    handle.send(message)
                except DeliveryError as e:
                    logger.debug("Dropping client %s: %s", handle.remote_addr, e)
                    self._clients.discard(handle)
                    handle.close()
                    outcomes.append((handle, e))
                else:
                    outcomes.append((handle, None))
        return outcomes

    def close_all(self) -> int:
        """Close and unregister every connection.

        Returns:
            Number of connections closed
        """
        with self._lock:
            handles = list(self._clients)
            self._clients.clear()
            for handle in handles:
                handle.close()
        return len(handles)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def __contains__(self, handle: LiveConnection) -> bool:
        with self._lock:
            return handle in self._clients
