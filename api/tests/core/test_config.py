"""Unit tests for core.config module.

Tests cover:
- REDIRECT_RULES parsing from the environment
- Settings model_validator prefix checks
- legacy_enabled / legacy_content_path properties
- get_settings / clear_settings_cache lru_cache behavior
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import Settings, clear_settings_cache, get_settings

# ---------------------------------------------------------------------------
# Environment parsing
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestRedirectRulesFromEnv:
    def test_json_list_parsed(self, monkeypatch):
        monkeypatch.setenv(
            "REDIRECT_RULES",
            '[{"prefix": "/blog/", "destination": "https://example.com/"},'
            ' {"prefix": "old"}]',
        )

        rules = Settings().redirect_rules

        assert [(r.prefix, r.destination) for r in rules] == [
            ("blog", "https://example.com/"),
            ("old", ""),
        ]

    def test_empty_list(self, monkeypatch):
        monkeypatch.setenv("REDIRECT_RULES", "[]")
        assert Settings().redirect_rules == []

    def test_invalid_destination_in_env(self, monkeypatch):
        monkeypatch.setenv(
            "REDIRECT_RULES", '[{"prefix": "x", "destination": "http://[::1"}]'
        )
        with pytest.raises(ValidationError):
            Settings()

    def test_legacy_settings_from_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("LEGACY_CONTENT_DIR", str(tmp_path))
        monkeypatch.setenv("LEGACY_PREFIX", "p")
        monkeypatch.setenv("LEGACY_ID_FIELD", "old_id")

        settings = Settings()

        assert settings.legacy_enabled is True
        assert settings.normalized_legacy_prefix == "p"
        assert settings.legacy_id_field == "old_id"


# ---------------------------------------------------------------------------
# Settings validation
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSettingsValidation:
    def test_defaults_are_valid(self):
        settings = Settings()
        assert settings.redirect_rules == []
        assert settings.legacy_enabled is False

    def test_duplicate_prefix_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate redirect prefix"):
            Settings(
                redirect_rules=[
                    {"prefix": "x", "destination": "http://a/"},
                    {"prefix": "/x/", "destination": "http://b/"},
                ]
            )

    def test_legacy_prefix_collision_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="LEGACY_PREFIX"):
            Settings(
                redirect_rules=[{"prefix": "b", "destination": "http://a/"}],
                legacy_content_dir=str(tmp_path),
            )

    def test_padded_legacy_prefix_collision_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="LEGACY_PREFIX"):
            Settings(
                redirect_rules=[{"prefix": "b", "destination": "http://a/"}],
                legacy_prefix=" /b/ ",
                legacy_content_dir=str(tmp_path),
            )

    def test_legacy_prefix_normalized_like_rules(self):
        assert Settings(legacy_prefix=" /b/ ").normalized_legacy_prefix == "b"

    def test_legacy_prefix_ignored_when_disabled(self):
        settings = Settings(
            redirect_rules=[{"prefix": "b", "destination": "http://a/"}]
        )
        assert settings.legacy_enabled is False

    def test_empty_id_field_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="LEGACY_ID_FIELD"):
            Settings(legacy_content_dir=str(tmp_path), legacy_id_field="  ")

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.legacy_prefix = "c"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestLegacyContentPath:
    def test_none_when_disabled(self):
        assert Settings().legacy_content_path is None

    def test_path_from_setting(self, tmp_path: Path):
        settings = Settings(legacy_content_dir=str(tmp_path))
        assert settings.legacy_content_path == tmp_path

    def test_user_home_expanded(self):
        settings = Settings(legacy_content_dir="~/site")
        assert settings.legacy_content_path == Path.home() / "site"


@pytest.mark.unit
class TestDocsEnabled:
    @pytest.mark.parametrize(
        ("debug", "enable_docs", "expected"),
        [(False, False, False), (True, False, True), (False, True, True)],
    )
    def test_docs_enabled(self, debug, enable_docs, expected):
        settings = Settings(debug=debug, enable_docs=enable_docs)
        assert settings.docs_enabled is expected


# ---------------------------------------------------------------------------
# get_settings / clear_settings_cache
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestGetSettings:
    def test_returns_same_instance(self):
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_clear_cache_resets(self, monkeypatch):
        s1 = get_settings()
        monkeypatch.setenv("LEGACY_PREFIX", "p")
        clear_settings_cache()
        s2 = get_settings()
        assert s1 is not s2
        assert s2.legacy_prefix == "p"
