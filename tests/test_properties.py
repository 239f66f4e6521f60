"""Tests for spineconf.properties — snapshot precedence and resolution."""

from __future__ import annotations

from enum import Enum

import pytest

from spineconf.errors import UnresolvedPropertyError
from spineconf.properties import (
    EnvironmentSnapshot,
    PropertyResolver,
    clear_process_property,
    process_properties,
    property_key,
    set_process_property,
)


class Color(Enum):
    RED = "red"


# ── Process properties ──────────────────────────────────────────────────


class TestProcessProperties:
    def test_set_and_read(self):
        set_process_property("db.host", "localhost")
        assert process_properties() == {"db.host": "localhost"}

    def test_values_are_strings(self):
        set_process_property("port", 8080)
        assert process_properties()["port"] == "8080"

    def test_clear_one(self):
        set_process_property("a", "1")
        set_process_property("b", "2")
        clear_process_property("a")
        assert process_properties() == {"b": "2"}

    def test_clear_all(self):
        set_process_property("a", "1")
        clear_process_property()
        assert process_properties() == {}

    def test_returns_copy(self):
        set_process_property("a", "1")
        process_properties()["a"] = "changed"
        assert process_properties()["a"] == "1"


# ── property_key ────────────────────────────────────────────────────────


class TestPropertyKey:
    def test_string(self):
        assert property_key("name") == "name"

    def test_enum_uses_value(self):
        assert property_key(Color.RED) == "red"

    def test_other_uses_str(self):
        assert property_key(42) == "42"


# ── EnvironmentSnapshot ─────────────────────────────────────────────────


class TestEnvironmentSnapshot:
    def test_precedence(self):
        snap = EnvironmentSnapshot.capture(
            {"key": "explicit"},
            environ={"key": "env", "only_env": "e"},
            process={"key": "process", "only_process": "p"},
        )
        assert snap["key"] == "explicit"
        assert snap["only_env"] == "e"
        assert snap["only_process"] == "p"

    def test_process_shadows_environment(self):
        snap = EnvironmentSnapshot.capture(environ={"key": "env"}, process={"key": "process"})
        assert snap["key"] == "process"

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPINECONF_TEST_VAR", "from-env")
        snap = EnvironmentSnapshot.capture()
        assert snap["SPINECONF_TEST_VAR"] == "from-env"

    def test_reads_process_registry(self):
        set_process_property("registry.key", "value")
        snap = EnvironmentSnapshot.capture(environ={})
        assert snap["registry.key"] == "value"

    def test_explicit_keys_converted(self):
        snap = EnvironmentSnapshot.capture({Color.RED: 1}, environ={}, process={})
        assert snap["red"] == "1"

    def test_no_case_folding(self):
        snap = EnvironmentSnapshot.capture(environ={"Path": "x"}, process={})
        assert "PATH" not in snap
        assert snap["Path"] == "x"

    def test_captured_once(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SPINECONF_LATE", "before")
        snap = EnvironmentSnapshot.capture()
        monkeypatch.setenv("SPINECONF_LATE", "after")
        assert snap["SPINECONF_LATE"] == "before"

    def test_immutable(self):
        snap = EnvironmentSnapshot({"a": "1"})
        with pytest.raises(TypeError):
            snap["a"] = "2"  # type: ignore[index]

    def test_mapping_protocol(self):
        snap = EnvironmentSnapshot({"a": "1", "b": "2"})
        assert len(snap) == 2
        assert set(snap) == {"a", "b"}
        assert snap.get("missing") is None


# ── PropertyResolver ────────────────────────────────────────────────────


class TestPropertyResolver:
    def test_resolves_present(self, resolver: PropertyResolver):
        assert resolver.resolve("DB_HOST") == "prod"

    def test_present_value_beats_default(self, resolver: PropertyResolver):
        assert resolver.resolve("DB_HOST", "fallback") == "prod"

    def test_default_when_missing(self, resolver: PropertyResolver):
        assert resolver.resolve("DB_PORT", "5432") == "5432"

    def test_empty_default_is_legal(self, resolver: PropertyResolver):
        assert resolver.resolve("DB_PORT", "") == ""

    def test_missing_without_default_raises(self, resolver: PropertyResolver):
        with pytest.raises(UnresolvedPropertyError) as exc_info:
            resolver.resolve("MISSING", source_text="x: ${MISSING}")
        error = exc_info.value
        assert error.name == "MISSING"
        assert error.known_keys == ["DB_HOST", "HOME"]
        assert error.source_text == "x: ${MISSING}"

    def test_contains(self, resolver: PropertyResolver):
        assert "DB_HOST" in resolver
        assert "NOPE" not in resolver
