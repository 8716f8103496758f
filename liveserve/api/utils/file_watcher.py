"""File watching utilities for live reload."""

import enum
import logging
import os
import queue
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..config import WATCH_POLL_INTERVAL
from ..errors import WatchInitError, WatchObserveError, WatchRegisterError

logger = logging.getLogger(__name__)


class ChangeKind(enum.Enum):
    """Kinds of filesystem mutation reported by the watcher."""

    WRITE = "write"
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    CHMOD = "chmod"


_KIND_BY_EVENT_TYPE = {
    EVENT_TYPE_MODIFIED: ChangeKind.WRITE,
    EVENT_TYPE_CREATED: ChangeKind.CREATE,
    EVENT_TYPE_DELETED: ChangeKind.REMOVE,
    EVENT_TYPE_MOVED: ChangeKind.RENAME,
}


@dataclass(frozen=True)
class ChangeEvent:
    """A single filesystem mutation under a watched directory."""

    path: str
    kind: ChangeKind
    dest_path: Optional[str] = None
    is_directory: bool = False

    @property
    def is_write(self) -> bool:
        return self.kind is ChangeKind.WRITE

    @classmethod
    def from_watchdog(cls, event: FileSystemEvent) -> Optional["ChangeEvent"]:
        """Translate a watchdog event, or return None if it has no counterpart.

        Opened/closed notifications are dropped, and so are directory
        modifications, which watchdog reports as a side effect of a child
        being created or removed.
        """
        kind = _KIND_BY_EVENT_TYPE.get(event.event_type)
        if kind is None:
            return None
        if event.is_directory and kind is ChangeKind.WRITE:
            return None
        dest_path = getattr(event, "dest_path", None) or None
        return cls(
            path=os.fsdecode(event.src_path),
            kind=kind,
            dest_path=os.fsdecode(dest_path) if dest_path else None,
            is_directory=event.is_directory,
        )


WatchItem = Union[ChangeEvent, WatchObserveError]


def collect_watch_paths(root: str) -> List[str]:
    """Walk a directory tree and return every directory in it, root first.

    Args:
        root: Directory to walk

    Returns:
        List of absolute directory paths

    Raises:
        WatchRegisterError: If the root or one of its subdirectories
            cannot be read
    """
    root = os.path.abspath(root)
    if not os.path.isdir(root):
        raise WatchRegisterError(f"Not a directory: {root}", path=root)

    def on_error(exc: OSError) -> None:
        raise WatchRegisterError(
            f"Cannot read directory {exc.filename}: {exc.strerror}",
            path=exc.filename,
        ) from exc

    paths = []
    for dirpath, _dirnames, _filenames in os.walk(root, onerror=on_error):
        paths.append(dirpath)
    return paths


class ChangeEventHandler(FileSystemEventHandler):
    """Forward watchdog events into the watcher's queue."""

    def __init__(self, watcher: "ChangeWatcher"):
        """Initialize the handler.

        Args:
            watcher: Watcher that owns the event queue
        """
        self.watcher = watcher

    def on_any_event(self, event):
        """Translate and enqueue every event the observer reports."""
        path = os.fsdecode(event.src_path)
        if (
            event.is_directory
            and event.event_type == EVENT_TYPE_DELETED
            and path in self.watcher.paths
        ):
            self.watcher.report_error(
                WatchObserveError(f"Watched directory removed: {path}", path=path)
            )
            return

        change = ChangeEvent.from_watchdog(event)
        if change is None:
            return
        if change.is_directory:
            self.watcher.put(change)
            return

        # watchdog reports attribute-only changes (chmod, chown) as modifications
        if change.kind is ChangeKind.WRITE:
            if not self.watcher.content_changed(change.path):
                change = replace(change, kind=ChangeKind.CHMOD)
        elif change.kind is ChangeKind.CREATE:
            self.watcher.content_changed(change.path)
        elif change.kind is ChangeKind.REMOVE:
            self.watcher.forget(change.path)
        elif change.kind is ChangeKind.RENAME:
            self.watcher.forget(change.path)
            if change.dest_path is not None:
                self.watcher.content_changed(change.dest_path)
        self.watcher.put(change)


class ChangeWatcher:
    """Observe a fixed set of directories and expose their changes as a stream."""

    _STOP = object()

    def __init__(self, paths: Iterable[str]):
        """Initialize the watcher.

        Args:
            paths: Directories to observe, each watched non-recursively
        """
        self.paths: Set[str] = {os.path.abspath(path) for path in paths}
        self.observer: Optional[Observer] = None
        self._queue: "queue.Queue" = queue.Queue()
        self._lost: Set[str] = set()
        self._lock = threading.Lock()
        self._closed = False
        self._fingerprints: Dict[str, Optional[Tuple[int, int]]] = {}

    @staticmethod
    def _fingerprint(path: str) -> Optional[Tuple[int, int]]:
        try:
            stat = os.stat(path)
        except OSError:
            return None
        return stat.st_size, stat.st_mtime_ns

    def content_changed(self, path: str) -> bool:
        """Record a file's size and mtime and report whether they moved.

        Files that cannot be stat'ed, or were never seen, count as changed.
        """
        current = self._fingerprint(path)
        previous = self._fingerprints.get(path)
        self._fingerprints[path] = current
        return current is None or current != previous

    def forget(self, path: str) -> None:
        self._fingerprints.pop(path, None)

    def _record_files(self, directory: str) -> None:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_file():
                    self._fingerprints[entry.path] = self._fingerprint(entry.path)

    def start(self) -> None:
        """Start watching every configured directory.

        Raises:
            WatchInitError: If the observer cannot be created or started
            WatchRegisterError: If any directory cannot be watched
        """
        try:
            self.observer = Observer()
            self.observer.start()
        except Exception as e:
            self.observer = None
            raise WatchInitError(f"Cannot start file observer: {e}") from e

        event_handler = ChangeEventHandler(self)
        for path in sorted(self.paths):
            try:
                if not os.path.isdir(path):
                    raise NotADirectoryError(path)
                self._record_files(path)
                self.observer.schedule(event_handler, path, recursive=False)
            except OSError as e:
                self._stop_observer()
                raise WatchRegisterError(f"Cannot watch {path}: {e}", path=path) from e
            logger.debug("Watching %s", path)

    def put(self, event: ChangeEvent) -> None:
        """Enqueue a change event for the consumer."""
        self._queue.put(event)

    def report_error(self, error: WatchObserveError) -> None:
        """Enqueue an observation error; each lost path is reported once."""
        with self._lock:
            if error.path is not None:
                if error.path in self._lost:
                    return
                self._lost.add(error.path)
        self._queue.put(error)

    def events(self) -> Iterator[WatchItem]:
        """Yield change events and observation errors in arrival order.

        The stream ends when the watcher is closed, or when the observer
        thread dies on its own.
        """
        while True:
            try:
                item = self._queue.get(timeout=WATCH_POLL_INTERVAL)
            except queue.Empty:
                if self._closed:
                    return
                if self.observer is not None and not self.observer.is_alive():
                    logger.error("File observer stopped unexpectedly")
                    return
                continue
            if item is self._STOP:
                return
            yield item

    def close(self) -> None:
        """Stop watching and end the event stream."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._stop_observer()
        self._queue.put(self._STOP)

    def _stop_observer(self) -> None:
        if self.observer is None:
            return
        observer, self.observer = self.observer, None
        observer.stop()
        if observer.is_alive():
            observer.join()
