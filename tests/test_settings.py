"""Tests for spineconf.settings — SPINECONF_* engine settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spineconf.settings import SpineconfSettings, clear_settings_cache, get_settings


class TestSpineconfSettings:
    def test_defaults(self):
        settings = SpineconfSettings()
        assert settings.search_path == ["."]
        assert settings.sort_sources is False
        assert settings.max_workers == 1
        assert settings.extra_keys == "forbid"
        assert settings.log_format == "console"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPINECONF_SEARCH_PATH", '["config", "/etc/app"]')
        monkeypatch.setenv("SPINECONF_SORT_SOURCES", "true")
        monkeypatch.setenv("SPINECONF_MAX_WORKERS", "4")
        settings = SpineconfSettings()
        assert settings.search_path == ["config", "/etc/app"]
        assert settings.sort_sources is True
        assert settings.max_workers == 4

    def test_invalid_workers(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPINECONF_MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            SpineconfSettings()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch: pytest.MonkeyPatch):
        first = get_settings()
        monkeypatch.setenv("SPINECONF_EXTRA_KEYS", "allow")
        assert get_settings() is first
        assert get_settings(_force_reload=True).extra_keys == "allow"

    def test_clear(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
