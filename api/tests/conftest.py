"""Pytest configuration and shared fixtures.

This module provides:
- A pinned environment so importing ``main`` builds a bare app
- A throwaway Jekyll site builder for content/index tests
- An httpx client bound to an app built from explicit Settings
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ["REDIRECT_RULES"] = "[]"
os.environ["LEGACY_CONTENT_DIR"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.config import Settings, clear_settings_cache

# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_settings():
    """Clear the get_settings() lru_cache between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Content fixtures
# =============================================================================


PostWriter = Callable[..., Path]


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Empty Jekyll site root with a _posts directory."""
    (tmp_path / "_posts").mkdir()
    return tmp_path


@pytest.fixture
def write_post(site_dir: Path) -> PostWriter:
    """Write a post file, optionally with front matter fields.

    Example:
        write_post("2014-05-28-test.md", wordpress_id="1f")
        write_post("notes/_posts/2015-01-01-x.md", raw="no header")
    """

    def _write(name: str, raw: str | None = None, **front_matter: str) -> Path:
        path = site_dir / name if "/" in name else site_dir / "_posts" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if raw is None:
            header = "".join(f"{k}: {v}\n" for k, v in front_matter.items())
            raw = f"---\n{header}---\nBody text.\n"
        path.write_text(raw, encoding="utf-8")
        return path

    return _write


# =============================================================================
# App fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client_for() -> AsyncGenerator[Callable[[Settings], AsyncClient]]:
    """Factory fixture: an AsyncClient against ``create_app(settings)``."""
    from main import create_app

    clients: list[AsyncClient] = []

    def _make(settings: Settings) -> AsyncClient:
        client = AsyncClient(
            transport=ASGITransport(app=create_app(settings)),
            base_url="http://test",
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()
