"""Tests for application assembly in main.create_app.

Tests cover:
- handler ordering (longest prefix first, catch-all last)
- legacy and rule handlers side by side
- startup failures for bad legacy content
"""

from pathlib import Path

import pytest

from core.config import Settings
from main import build_handlers, create_app
from routes import LegacyRedirectHandler, RedirectHandler
from services.legacy_index_service import LegacyIdCollisionError, LegacyIndexError


def _rules(*prefixes: str) -> list[dict[str, str]]:
    return [{"prefix": p, "destination": f"http://example/{p}/"} for p in prefixes]


@pytest.mark.unit
class TestBuildHandlers:
    def test_longest_prefix_first(self):
        settings = Settings(redirect_rules=_rules("", "a", "a/b"))

        prefixes = [h.prefix for h in build_handlers(settings)]

        assert prefixes == ["a/b", "a", ""]

    def test_no_legacy_handler_by_default(self):
        handlers = build_handlers(Settings(redirect_rules=_rules("x")))
        assert all(isinstance(h, RedirectHandler) for h in handlers)

    def test_legacy_handler_added(self, site_dir: Path):
        settings = Settings(legacy_content_dir=str(site_dir), legacy_prefix="/b/")

        handlers = build_handlers(settings)

        assert len(handlers) == 1
        assert isinstance(handlers[0], LegacyRedirectHandler)
        assert handlers[0].prefix == "b"


@pytest.mark.unit
class TestCreateApp:
    async def test_nested_prefix_wins(self, client_for):
        client = client_for(Settings(redirect_rules=_rules("a", "a/b")))

        response = await client.get("/a/b/c")

        assert response.headers["location"] == "http://example/a/b/c"

    async def test_outer_prefix_still_matches(self, client_for):
        client = client_for(Settings(redirect_rules=_rules("a", "a/b")))

        response = await client.get("/a/c")

        assert response.headers["location"] == "http://example/a/c"

    async def test_catch_all_registered_last(self, client_for):
        rules = [
            {"prefix": "", "destination": "http://fallback/"},
            *_rules("x"),
        ]
        client = client_for(Settings(redirect_rules=rules))

        x = await client.get("/x/y")
        other = await client.get("/z")

        assert x.headers["location"] == "http://example/x/y"
        assert other.headers["location"] == "http://fallback/z"

    async def test_unmatched_path_is_404(self, client_for):
        client = client_for(Settings(redirect_rules=_rules("x")))

        response = await client.get("/y")

        assert response.status_code == 404

    async def test_legacy_and_rules_together(
        self, client_for, site_dir: Path, write_post
    ):
        write_post("2014-05-28-test.md", wordpress_id="1f")
        settings = Settings(
            redirect_rules=_rules("blog"),
            legacy_content_dir=str(site_dir),
        )
        client = client_for(settings)

        legacy = await client.get("/b/1f")
        rule = await client.get("/blog/post")

        assert legacy.headers["location"] == "/2014/05/28/test.html"
        assert rule.headers["location"] == "http://example/blog/post"

    async def test_docs_disabled_by_default(self, client_for):
        client = client_for(Settings())

        response = await client.get("/docs")

        assert response.status_code == 404

    async def test_docs_enabled(self, client_for):
        client = client_for(Settings(enable_docs=True))

        response = await client.get("/docs")

        assert response.status_code == 200

    def test_collision_aborts_startup(self, site_dir: Path, write_post):
        write_post("2014-05-28-a.md", wordpress_id="1f")
        write_post("2014-05-29-b.md", wordpress_id="1f")

        with pytest.raises(LegacyIdCollisionError):
            create_app(Settings(legacy_content_dir=str(site_dir)))

    def test_missing_content_dir_aborts_startup(self, tmp_path: Path):
        with pytest.raises(LegacyIndexError):
            create_app(Settings(legacy_content_dir=str(tmp_path / "missing")))
