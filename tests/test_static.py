"""Tests for the static file responder."""

import pytest

from liveserve.api.config import RELOAD_SNIPPET
from liveserve.api.routes.static import get_content_type, inject_reload_snippet


class TestContentType:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("index.html", "text/html"),
            ("INDEX.HTML", "text/html"),
            ("css/site.css", "text/css"),
            ("app.js", "application/javascript"),
            ("logo.png", "application/octet-stream"),
            ("README", "application/octet-stream"),
        ],
    )
    def test_mapping(self, path, expected):
        assert get_content_type(path) == expected


class TestInjection:
    def test_injects_before_first_body_close(self):
        page = b"<body>a</body><!-- </body> -->"
        result = inject_reload_snippet(page)
        assert result == b"<body>a" + RELOAD_SNIPPET + b"</body><!-- </body> -->"
        assert result.count(RELOAD_SNIPPET) == 1

    def test_page_without_body_close_is_untouched(self):
        assert inject_reload_snippet(b"<p>fragment</p>") == b"<p>fragment</p>"


class TestRoutes:
    def test_root_serves_index_with_snippet_once(self, client, site):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["Content-Type"] == "text/html"
        body = response.data
        assert body.count(RELOAD_SNIPPET) == 1
        assert b'new WebSocket("ws://" + location.host + "/ws")' in body
        assert body.index(RELOAD_SNIPPET) < body.index(b"</body>")
        assert body.replace(RELOAD_SNIPPET, b"") == (site / "index.html").read_bytes()

    def test_index_by_name_matches_root(self, client):
        response = client.get("/index.html")
        assert response.status_code == 200
        assert response.data == client.get("/").data

    def test_second_body_close_is_not_matched(self, client, site):
        (site / "page.html").write_bytes(b"<body>one</body>\n<body>two</body>")
        body = client.get("/page.html").data
        assert body.count(RELOAD_SNIPPET) == 1
        assert body.endswith(b"<body>two</body>")

    def test_css_is_served_unmodified(self, client, site):
        response = client.get("/style.css")
        assert response.status_code == 200
        assert response.headers["Content-Type"] == "text/css"
        assert response.data == (site / "style.css").read_bytes()

    def test_js_is_not_injected(self, client, site):
        response = client.get("/app.js")
        assert response.headers["Content-Type"] == "application/javascript"
        assert response.data == (site / "app.js").read_bytes()
        assert RELOAD_SNIPPET not in response.data

    def test_nested_binary_file(self, client, site):
        response = client.get("/assets/logo.png")
        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.data == (site / "assets" / "logo.png").read_bytes()

    def test_missing_file_is_404(self, client):
        response = client.get("/missing.html")
        assert response.status_code == 404
        assert response.data == b"File not found."

    def test_missing_index_is_404(self, client, site):
        (site / "index.html").unlink()
        response = client.get("/")
        assert response.status_code == 404
        assert response.data == b"File not found."

    def test_directory_is_404(self, client):
        response = client.get("/assets")
        assert response.status_code == 404
        assert response.data == b"File not found."

    def test_path_outside_root_is_404(self, client, site):
        (site.parent / "secret.txt").write_bytes(b"secret")
        response = client.get("/../secret.txt")
        assert response.status_code == 404

    def test_websocket_path_requires_upgrade(self, client, registry):
        response = client.get("/ws")
        assert response.status_code == 400
        assert len(registry) == 0
