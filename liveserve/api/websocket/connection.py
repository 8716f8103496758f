"""Server-side handle for one live-reload WebSocket."""

import logging
import threading
from typing import Any, Optional

from simple_websocket import ConnectionClosed
from wsproto.utilities import LocalProtocolError

from ..errors import DeliveryError

logger = logging.getLogger(__name__)


class LiveConnection:
    """Own one WebSocket transport and close it exactly once."""

    def __init__(self, ws: Any, remote_addr: Optional[str] = None):
        """Initialize the connection handle.

        Args:
            ws: Accepted WebSocket (a ``simple_websocket.Server``)
            remote_addr: Peer address, used in log messages
        """
        self.ws = ws
        self.remote_addr = remote_addr
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: str) -> None:
        """Write a text message.

        Raises:
            DeliveryError: If the transport is closed or the write fails
        """
        if self._closed:
            raise DeliveryError(f"Connection to {self.remote_addr} is closed")
        try:
            self.ws.send(message)
        except (ConnectionClosed, LocalProtocolError, OSError) as e:
            # LocalProtocolError: the peer's close frame arrived before this write
            raise DeliveryError(f"Cannot write to {self.remote_addr}: {e}") from e

    def receive(self) -> Any:
        """Block until the peer sends a message; raises ConnectionClosed on close."""
        return self.ws.receive()

    def close(self) -> bool:
        """Close the transport.

        Returns:
            True if this call closed it, False if it was already closed
        """
        with self._lock:
            if self._closed:
                return False
            self._closed = True
        try:
            self.ws.close()
        except (ConnectionClosed, OSError) as e:
            logger.debug("Transport for %s already gone: %s", self.remote_addr, e)
        return True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<LiveConnection {self.remote_addr} {state}>"
