"""Tests for spineconf.expansion — ${NAME} and ${NAME:default} references."""

from __future__ import annotations

import pytest

from spineconf.errors import UnresolvedPropertyError
from spineconf.expansion import expand, split_reference
from spineconf.properties import EnvironmentSnapshot, PropertyResolver


def _resolver(**values: str) -> PropertyResolver:
    return PropertyResolver(EnvironmentSnapshot(values))


class TestSplitReference:
    def test_name_only(self):
        assert split_reference("DB_HOST") == ("DB_HOST", None)

    def test_name_and_default(self):
        assert split_reference("DB_PORT:5432") == ("DB_PORT", "5432")

    def test_splits_on_first_colon(self):
        assert split_reference("URL:http://localhost:80") == ("URL", "http://localhost:80")

    def test_empty_default(self):
        assert split_reference("NAME:") == ("NAME", "")

    def test_leading_colon_is_part_of_name(self):
        assert split_reference(":odd") == (":odd", None)


class TestExpand:
    def test_round_trip(self):
        text = "jdbc://${DB_HOST}:${DB_PORT:5432}"
        assert expand(text, _resolver(DB_HOST="prod")) == "jdbc://prod:5432"

    def test_present_value_overrides_default(self):
        assert expand("${PORT:80}", _resolver(PORT="8080")) == "8080"

    def test_no_references(self):
        assert expand("plain: text", _resolver()) == "plain: text"

    def test_unresolved_raises(self):
        with pytest.raises(UnresolvedPropertyError) as exc_info:
            expand("${MISSING}", _resolver(OTHER="x"), logical_name="app-configuration.yaml")
        error = exc_info.value
        assert error.name == "MISSING"
        assert error.expansion == "${MISSING}"
        assert error.known_keys == ["OTHER"]
        assert error.source_text == "${MISSING}"
        assert error.context.logical_name == "app-configuration.yaml"
        assert "Unable to find expansion for `${MISSING}'" in str(error)

    def test_empty_default_never_fails(self):
        assert expand("a${MISSING:}b", _resolver()) == "ab"

    def test_multiple_on_one_line(self):
        resolver = _resolver(A="1", B="2")
        assert expand("${A}-${B}-${C:3}", resolver) == "1-2-3"

    def test_in_mapping_key(self):
        assert expand("${KEY}: value", _resolver(KEY="name")) == "name: value"

    def test_not_nested(self):
        # the inner reference is expanded; the outer braces stay literal
        assert expand("${A${B}}", _resolver(B="x")) == "${Ax}"

    def test_value_with_special_characters(self):
        assert expand("${P}", _resolver(P=r"a\1$b")) == r"a\1$b"

    def test_expanded_values_are_not_rescanned(self):
        assert expand("${A}", _resolver(A="${B}")) == "${B}"


class _RecordingResolver(PropertyResolver):
    def __init__(self):
        super().__init__(EnvironmentSnapshot({}))
        self.calls: list[dict] = []

    def resolve(self, name, default=None, **context):
        self.calls.append({"name": name, "default": default, **context})
        return default or ""


class TestResolverContext:
    def test_context_passed_with_and_without_default(self):
        resolver = _RecordingResolver()
        expand("a: ${A}\nb: ${B:2}\n", resolver, logical_name="app.yaml")
        first, second = resolver.calls
        assert first["expansion"] == "${A}"
        assert second["expansion"] == "${B:2}"
        assert second["default"] == "2"
        assert {first["logical_name"], second["logical_name"]} == {"app.yaml"}
        assert first["source_text"] == second["source_text"] == "a: ${A}\nb: ${B:2}\n"
