"""Locate the raw sources behind a logical resource name.

A locator turns a logical name such as ``app-web-configuration.yaml`` into
zero or more :class:`DocumentSource` objects. Several roots may hold a
resource with the same name; every one of them is returned. The relative
order of such duplicates is not part of the contract (callers may ask the
loader to sort them by identity).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path


@dataclass(frozen=True)
class DocumentSource:
    """A named, readable blob of configuration text."""

    identity: str
    reader: Callable[[], str] = field(repr=False, compare=False)

    def read_text(self) -> str:
        return self.reader()

    @classmethod
    def from_path(cls, path: Path) -> DocumentSource:
        return cls(str(path), lambda: path.read_text(encoding="utf-8"))

    @classmethod
    def from_text(cls, identity: str, text: str) -> DocumentSource:
        return cls(identity, lambda: text)


class ResourceLocator(ABC):
    """Abstract base for resource discovery.

    Implement this to load configuration from somewhere other than the file
    system, e.g. a remote store.
    """

    @abstractmethod
    def locate(self, name: str) -> list[DocumentSource]:
        """Return every source for *name*; an empty list when there is none."""
        ...


class SearchPathLocator(ResourceLocator):
    """Look a name up in each directory of a search path.

    Every directory containing the name contributes a source, the way a
    classpath with several archives can.
    """

    def __init__(self, directories: Iterable[str | Path]):
        self.directories = [Path(d) for d in directories]

    def locate(self, name: str) -> list[DocumentSource]:
        return [
            DocumentSource.from_path(directory / name)
            for directory in self.directories
            if (directory / name).is_file()
        ]

    def __repr__(self) -> str:
        return f"SearchPathLocator({[str(d) for d in self.directories]})"


class PackageLocator(ResourceLocator):
    """Look a name up among the resources of installed packages."""

    def __init__(self, packages: Iterable[str]):
        self.packages = list(packages)

    def locate(self, name: str) -> list[DocumentSource]:
        found: list[DocumentSource] = []
        for package in self.packages:
            resource = resources.files(package).joinpath(name)
            if resource.is_file():
                found.append(
                    DocumentSource(
                        f"{package}:{name}",
                        lambda r=resource: r.read_text(encoding="utf-8"),
                    )
                )
        return found


class DictLocator(ResourceLocator):
    """In-memory locator mapping names to one or more texts.

    NOT for production use, intended for tests and embedding.
    """

    def __init__(self, documents: Mapping[str, str | Sequence[str]] | None = None):
        self._documents: dict[str, list[str]] = {}
        for name, texts in (documents or {}).items():
            self._documents[name] = [texts] if isinstance(texts, str) else list(texts)

    def add(self, name: str, text: str) -> None:
        self._documents.setdefault(name, []).append(text)

    def locate(self, name: str) -> list[DocumentSource]:
        return [
            DocumentSource.from_text(f"memory:{name}#{i}", text)
            for i, text in enumerate(self._documents.get(name, []))
        ]


class ChainLocator(ResourceLocator):
    """Concatenate the sources found by several locators, in order."""

    def __init__(self, locators: Iterable[ResourceLocator]):
        self.locators = list(locators)

    def locate(self, name: str) -> list[DocumentSource]:
        return [source for locator in self.locators for source in locator.locate(name)]


__all__ = [
    "DocumentSource",
    "ResourceLocator",
    "SearchPathLocator",
    "PackageLocator",
    "DictLocator",
    "ChainLocator",
]
