"""
Settings for the assembly engine itself.

These settings control *how* configuration is assembled (where resources
are searched, how logs are rendered); they are not part of the assembled
configuration. All fields can be set via ``SPINECONF_*`` environment
variables, e.g. ``SPINECONF_SEARCH_PATH='["config", "/etc/app"]'``.

Tags:
    spineconf, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpineconfSettings(BaseSettings):
    """Engine settings, read from ``SPINECONF_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPINECONF_",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: Literal["json", "console"] = Field(default="console")

    # ── Resource discovery ───────────────────────────────────────
    search_path: list[str] = Field(
        default_factory=lambda: ["."],
        description="Directories searched for configuration resources, in order",
    )
    sort_sources: bool = Field(
        default=False,
        description="Sort duplicate sources for one resource name by identity",
    )
    max_workers: int = Field(default=1, ge=1, description="Concurrent resource retrieval")

    # ── Validation ───────────────────────────────────────────────
    extra_keys: Literal["forbid", "ignore", "allow"] = Field(
        default="forbid",
        description="Treatment of configuration keys absent from the schema",
    )


_settings_cache: dict[str, SpineconfSettings] = {}


def get_settings(*, _force_reload: bool = False) -> SpineconfSettings:
    """Load, validate, and cache a :class:`SpineconfSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = SpineconfSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["SpineconfSettings", "get_settings", "clear_settings_cache"]
