"""Utility functions for the API module."""

from .file_watcher import (
    ChangeEvent,
    ChangeKind,
    ChangeWatcher,
    collect_watch_paths,
)

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "ChangeWatcher",
    "collect_watch_paths",
]
