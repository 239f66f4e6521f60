"""Tests for spineconf.locators — resource discovery."""

from __future__ import annotations

from pathlib import Path

from spineconf.locators import (
    ChainLocator,
    DictLocator,
    DocumentSource,
    PackageLocator,
    SearchPathLocator,
)


class TestDocumentSource:
    def test_from_text(self):
        source = DocumentSource.from_text("memory:x", "a: 1")
        assert source.identity == "memory:x"
        assert source.read_text() == "a: 1"

    def test_from_path(self, tmp_path: Path):
        path = tmp_path / "x.yaml"
        path.write_text("a: 1")
        source = DocumentSource.from_path(path)
        assert source.identity == str(path)
        assert source.read_text() == "a: 1"

    def test_equality_by_identity(self):
        assert DocumentSource.from_text("id", "a") == DocumentSource.from_text("id", "b")


class TestSearchPathLocator:
    def test_missing_resource(self, tmp_path: Path):
        assert SearchPathLocator([tmp_path]).locate("nope.yaml") == []

    def test_finds_in_every_directory(self, tmp_path: Path):
        first, second, third = tmp_path / "a", tmp_path / "b", tmp_path / "c"
        for directory in (first, second, third):
            directory.mkdir()
        (first / "app-configuration.yaml").write_text("x: 1")
        (third / "app-configuration.yaml").write_text("x: 3")

        sources = SearchPathLocator([first, second, third]).locate("app-configuration.yaml")
        assert [s.read_text() for s in sources] == ["x: 1", "x: 3"]

    def test_ignores_directories(self, tmp_path: Path):
        (tmp_path / "app-configuration.yaml").mkdir()
        assert SearchPathLocator([tmp_path]).locate("app-configuration.yaml") == []

    def test_accepts_strings(self, tmp_path: Path):
        (tmp_path / "a.yaml").write_text("")
        assert len(SearchPathLocator([str(tmp_path)]).locate("a.yaml")) == 1


class TestPackageLocator:
    def test_finds_package_resource(self):
        sources = PackageLocator(["spineconf"]).locate("__init__.py")
        assert len(sources) == 1
        assert sources[0].identity == "spineconf:__init__.py"
        assert "Layered configuration assembly" in sources[0].read_text()

    def test_missing_resource(self):
        assert PackageLocator(["spineconf"]).locate("nope-configuration.yaml") == []


class TestDictLocator:
    def test_single_and_multiple(self):
        locator = DictLocator({"a.yaml": "x: 1", "b.yaml": ["y: 1", "y: 2"]})
        assert len(locator.locate("a.yaml")) == 1
        assert [s.read_text() for s in locator.locate("b.yaml")] == ["y: 1", "y: 2"]
        assert locator.locate("c.yaml") == []

    def test_add(self):
        locator = DictLocator()
        locator.add("a.yaml", "x: 1")
        locator.add("a.yaml", "x: 2")
        assert [s.identity for s in locator.locate("a.yaml")] == ["memory:a.yaml#0", "memory:a.yaml#1"]


class TestChainLocator:
    def test_concatenates_in_order(self):
        chain = ChainLocator([DictLocator({"a.yaml": "first"}), DictLocator({"a.yaml": "second"})])
        assert [s.read_text() for s in chain.locate("a.yaml")] == ["first", "second"]
