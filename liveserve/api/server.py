"""Live-reload server management."""

import os
from threading import Event, Thread
from typing import Optional

from werkzeug.serving import make_server

from .app import api_logger, create_app
from .config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_ROOT,
    SERVER_START_TIMEOUT,
    SHUTDOWN_JOIN_TIMEOUT,
)
from .utils.file_watcher import ChangeWatcher, collect_watch_paths
from .websocket import ClientRegistry, Notifier


class LiveServer:
    """Static file server that reloads connected browsers on file writes."""

    def __init__(
        self,
        root: str = DEFAULT_ROOT,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ):
        """Initialize the server.

        Args:
            root: Directory to serve and watch
            host: Host to bind to
            port: Port to bind to, 0 picks a free one
        """
        self.root = os.path.abspath(root)
        self.host = host
        self.port = port

        self.registry = ClientRegistry()
        self.app = create_app(self.root, self.registry)
        self.watcher: Optional[ChangeWatcher] = None
        self.notifier: Optional[Notifier] = None

        self.server = None
        self.server_thread: Optional[Thread] = None
        self.started = Event()
        self.shutdown_event = Event()

    def start(self) -> None:
        """Start watching the root and serving requests.

        Raises:
            WatchInitError: If the file observer cannot be created
            WatchRegisterError: If a directory under the root cannot be watched
            OSError: If the port cannot be bound
            RuntimeError: If the HTTP thread does not come up in time
        """
        if self.server_thread is not None:
            return  # Already started

        # The watch set is fixed here; directories created later are not watched
        watch_paths = collect_watch_paths(self.root)
        self.watcher = ChangeWatcher(watch_paths)
        self.watcher.start()
        api_logger.info(f"Watching {len(watch_paths)} directories under {self.root}")

        try:
            self.server = make_server(self.host, self.port, self.app, threaded=True)
            self.port = self.server.server_port

            self.notifier = Notifier(self.watcher, self.registry)
            self.notifier.start()

            self.server_thread = Thread(target=self._run_server, name="liveserve-http")
            self.server_thread.daemon = True
            self.server_thread.start()

            self.started.wait(timeout=SERVER_START_TIMEOUT)
            if not self.started.is_set():
                raise RuntimeError("Server failed to start within the timeout period")
        except Exception:
            self.stop()
            raise

        api_logger.info(f"Serving {self.root} at {self.get_url()}")
        print(f"Serving on {self.get_url()}")

    def _run_server(self) -> None:
        """Run the server in a thread."""
        try:
            self.started.set()
            self.server.serve_forever()
        except Exception as e:
            api_logger.error(f"Server crashed with exception: {e}", exc_info=True)
            raise
        finally:
            self.shutdown_event.set()

    def wait(self) -> None:
        """Block until the server stops."""
        self.shutdown_event.wait()

    def stop(self) -> None:
        """Stop serving, stop watching and close every live connection."""
        if self.server is not None:
            # shutdown() blocks forever unless serve_forever has been entered
            if self.started.is_set():
                self.server.shutdown()
            self.server.server_close()
            self.server = None

        if self.server_thread is not None:
            self.server_thread.join(SHUTDOWN_JOIN_TIMEOUT)
            self.server_thread = None

        if self.watcher is not None:
            self.watcher.close()

        if self.notifier is not None:
            self.notifier.join(SHUTDOWN_JOIN_TIMEOUT)
            self.notifier = None

        closed = self.registry.close_all()
        if closed:
            api_logger.debug(f"Closed {closed} live connections")
        self.shutdown_event.set()

    def get_url(self) -> str:
        """Get the address browsers should open.

        Returns:
            Server URL
        """
        host = "localhost" if self.host in ("", "0.0.0.0", "::") else self.host
        return f"http://{host}:{self.port}"

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
