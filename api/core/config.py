"""Application configuration using pydantic-settings."""

from functools import cached_property, lru_cache
from pathlib import Path
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from schemas import RedirectRule
from services.redirect_service import normalize_prefix


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Prefix rules, as a JSON list in REDIRECT_RULES
    # Example: '[{"prefix": "blog", "destination": "https://example.com/"}]'
    redirect_rules: list[RedirectRule] = []

    # Short links for legacy WordPress posts, e.g. /b/1f
    # Leave LEGACY_CONTENT_DIR empty to disable legacy handling
    legacy_prefix: str = "b"
    legacy_content_dir: str = ""
    legacy_id_field: str = "wordpress_id"
    legacy_posts_dir: str = "_posts"

    debug: bool = False
    enable_docs: bool = False  # Swagger UI at /docs

    @model_validator(mode="after")
    def validate_config(self) -> Self:
        seen: set[str] = set()
        for rule in self.redirect_rules:
            if rule.prefix in seen:
                raise ValueError(
                    f"Duplicate redirect prefix {rule.prefix!r} in REDIRECT_RULES."
                )
            seen.add(rule.prefix)

        if self.legacy_enabled and self.normalized_legacy_prefix in seen:
            raise ValueError(
                f"LEGACY_PREFIX {self.legacy_prefix!r} collides with a "
                "prefix in REDIRECT_RULES."
            )

        if self.legacy_enabled and not self.legacy_id_field.strip():
            raise ValueError("LEGACY_ID_FIELD must not be empty.")
        return self

    @property
    def legacy_enabled(self) -> bool:
        return bool(self.legacy_content_dir)

    @property
    def normalized_legacy_prefix(self) -> str:
        return normalize_prefix(self.legacy_prefix)

    @cached_property
    def legacy_content_path(self) -> Path | None:
        """Resolved Jekyll site root, or None when legacy handling is off."""
        if not self.legacy_content_dir:
            return None
        return Path(self.legacy_content_dir).expanduser()

    @property
    def docs_enabled(self) -> bool:
        return self.debug or self.enable_docs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("LEGACY_PREFIX", "p")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
