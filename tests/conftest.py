"""
Shared pytest fixtures for spineconf tests.

This module provides:
- Isolation of process properties and the settings cache
- Synthetic environment snapshots
- A helper writing configuration files into a temporary search path
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Ensure spineconf package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spineconf.properties import EnvironmentSnapshot, PropertyResolver, clear_process_property
from spineconf.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    """Reset process properties and cached settings around every test."""
    for key in [
        "SPINECONF_SEARCH_PATH",
        "SPINECONF_SORT_SOURCES",
        "SPINECONF_MAX_WORKERS",
        "SPINECONF_EXTRA_KEYS",
        "SPINECONF_LOG_LEVEL",
        "SPINECONF_LOG_FORMAT",
    ]:
        monkeypatch.delenv(key, raising=False)
    clear_process_property()
    clear_settings_cache()
    yield
    clear_process_property()
    clear_settings_cache()


@pytest.fixture
def snapshot() -> EnvironmentSnapshot:
    """A synthetic snapshot, independent of the real environment."""
    return EnvironmentSnapshot({"DB_HOST": "prod", "HOME": "/home/app"})


@pytest.fixture
def resolver(snapshot: EnvironmentSnapshot) -> PropertyResolver:
    return PropertyResolver(snapshot)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def write_config(config_dir: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``config_dir / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = config_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
