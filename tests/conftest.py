import os
import sys

import pytest

from liveserve.api import ClientRegistry, create_app
from liveserve.api.errors import DeliveryError

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

INDEX_HTML = b"""<!DOCTYPE html>
<html>
<head><title>Test</title></head>
<body>
<p>Hello</p>
</body>
</html>
"""


class FakeConnection:
    """Stand-in for a live connection that records what it was sent."""

    def __init__(self, name="client", fail=False):
        self.remote_addr = name
        self.fail = fail
        self.sent = []
        self.close_calls = 0

    @property
    def closed(self):
        return self.close_calls > 0

    def send(self, message):
        if self.fail or self.closed:
            raise DeliveryError(f"{self.remote_addr} is gone")
        self.sent.append(message)

    def close(self):
        self.close_calls += 1
        return self.close_calls == 1


@pytest.fixture
def site(tmp_path):
    """A small site with an index page, a stylesheet and a script."""
    (tmp_path / "index.html").write_bytes(INDEX_HTML)
    (tmp_path / "style.css").write_bytes(b"body { color: red; }\n")
    (tmp_path / "app.js").write_bytes(b"console.log('</body>');\n")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return tmp_path


@pytest.fixture
def registry():
    return ClientRegistry()


@pytest.fixture
def app(site, registry):
    app = create_app(str(site), registry)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
