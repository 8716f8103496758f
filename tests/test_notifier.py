"""Tests for the change notifier."""

import logging
from unittest.mock import Mock

from conftest import FakeConnection
from wsproto.utilities import LocalProtocolError

from liveserve.api import LiveConnection, Notifier
from liveserve.api.errors import WatchObserveError
from liveserve.api.utils import ChangeEvent, ChangeKind


class StubWatcher:
    """Watcher whose stream is a fixed list of items."""

    def __init__(self, items):
        self.items = list(items)

    def events(self):
        yield from self.items


def write(path="/site/index.html"):
    return ChangeEvent(path=path, kind=ChangeKind.WRITE)


def test_write_event_broadcasts_once():
    registry = Mock()
    registry.broadcast.return_value = []
    notifier = Notifier(StubWatcher([write()]), registry)

    notifier.run()

    registry.broadcast.assert_called_once_with("reload")


def test_non_write_events_do_not_broadcast():
    registry = Mock()
    items = [
        ChangeEvent(path="/site/a.html", kind=ChangeKind.CREATE),
        ChangeEvent(path="/site/a.html", kind=ChangeKind.REMOVE),
        ChangeEvent(path="/site/a.html", kind=ChangeKind.RENAME, dest_path="/site/b.html"),
    ]
    notifier = Notifier(StubWatcher(items), registry)

    notifier.run()

    registry.broadcast.assert_not_called()


def test_each_write_broadcasts_in_order():
    registry = Mock()
    registry.broadcast.return_value = []
    items = [
        write("/site/a.css"),
        ChangeEvent(path="/site/new.js", kind=ChangeKind.CREATE),
        write("/site/b.js"),
    ]
    notifier = Notifier(StubWatcher(items), registry)

    notifier.run()

    assert registry.broadcast.call_count == 2


def test_watch_error_is_logged_and_loop_continues(caplog):
    registry = Mock()
    registry.broadcast.return_value = []
    items = [
        WatchObserveError("Watched directory removed: /site/old", path="/site/old"),
        write(),
    ]
    notifier = Notifier(StubWatcher(items), registry)

    with caplog.at_level(logging.INFO, logger="liveserve"):
        notifier.run()

    assert "Watched directory removed" in caplog.text
    assert "File updated: /site/index.html" in caplog.text
    registry.broadcast.assert_called_once_with("reload")


def test_handle_reports_broadcast(registry):
    notifier = Notifier(StubWatcher([]), registry)
    good = FakeConnection("good")
    bad = FakeConnection("bad", fail=True)
    registry.add(good)
    registry.add(bad)

    assert notifier.handle(write()) is True
    assert notifier.handle(ChangeEvent(path="/x", kind=ChangeKind.CREATE)) is False

    assert good.sent == ["reload"]
    assert bad not in registry


def test_custom_message(registry):
    handle = FakeConnection()
    registry.add(handle)
    notifier = Notifier(StubWatcher([write()]), registry, message="refresh")
    notifier.run()
    assert handle.sent == ["refresh"]


def test_background_thread_stops_with_stream():
    registry = Mock()
    registry.broadcast.return_value = []
    notifier = Notifier(StubWatcher([write(), write()]), registry)

    notifier.start()
    notifier.join(timeout=5)

    assert not notifier.thread.is_alive()
    assert registry.broadcast.call_count == 2


def test_closing_client_does_not_stop_the_loop(registry):
    closing_ws = Mock()
    closing_ws.send.side_effect = LocalProtocolError(
        "Event TextMessage cannot be sent in state REMOTE_CLOSING"
    )
    good_ws = Mock()
    registry.add(LiveConnection(closing_ws, remote_addr="closing"))
    registry.add(LiveConnection(good_ws, remote_addr="good"))
    notifier = Notifier(StubWatcher([write(), write()]), registry)

    notifier.run()

    assert good_ws.send.call_count == 2
    assert closing_ws.send.call_count == 1
    assert len(registry) == 1


def test_unexpected_error_is_logged_and_loop_continues(caplog):
    registry = Mock()
    registry.broadcast.side_effect = [RuntimeError("boom"), []]
    notifier = Notifier(StubWatcher([write("/site/a.css"), write("/site/b.css")]), registry)

    with caplog.at_level(logging.ERROR, logger="liveserve"):
        notifier.run()

    assert registry.broadcast.call_count == 2
    assert "boom" in caplog.text
