"""
Read, expand and parse configuration documents.

For each logical name the loader asks its locator for sources, expands
``${...}`` references in each source's raw text, and parses the result. A
logical name without sources is not an error: it yields no documents, which
is what makes profile and variant files optional. Everything else (unreadable
source, parse failure, unresolved reference) is fatal.

Documents may be retrieved in parallel (``max_workers > 1``); they are always
returned in enumeration order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from .errors import ConfigError, DocumentParseError, ResourceReadError
from .expansion import expand
from .locators import DocumentSource, ResourceLocator
from .logging import get_logger
from .parsers import Parser, get_parser
from .properties import PropertyResolver
from .resources import ResourceEntry

logger = get_logger(__name__)


class DocumentLoader:
    """Load parsed documents for logical resource names.

    Parameters
    ----------
    locator:
        Finds the sources for a logical name.
    resolver:
        Resolves ``${...}`` references.
    sort_sources:
        Sort duplicate sources for one name by identity, for reproducible
        ordering across machines.
    max_workers:
        Upper bound on concurrent retrieval in :meth:`load_entries`.
    """

    def __init__(
        self,
        locator: ResourceLocator,
        resolver: PropertyResolver,
        *,
        sort_sources: bool = False,
        max_workers: int = 1,
    ):
        self.locator = locator
        self.resolver = resolver
        self.sort_sources = sort_sources
        self.max_workers = max(1, max_workers)

    def read_source(self, logical_name: str, source: DocumentSource, parser: Parser) -> dict[str, Any]:
        """Expand and parse a single source."""
        try:
            raw = source.read_text()
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceReadError(logical_name, source.identity, exc) from exc

        text = expand(raw, self.resolver, logical_name=logical_name)

        try:
            document = parser(text)
        except ConfigError:
            raise
        except Exception as exc:
            raise DocumentParseError(logical_name, source.identity, exc) from exc

        if document is None:
            document = {}
        if not isinstance(document, Mapping):
            raise DocumentParseError(
                logical_name,
                source.identity,
                message=f"expected a mapping at the top level, got {type(document).__name__}",
            )

        logger.debug("config.document.read", logical_name=logical_name, source=source.identity)
        return dict(document)

    def load(self, logical_name: str, parser: Parser) -> list[dict[str, Any]]:
        """Load every document found for *logical_name* (possibly none)."""
        sources = self.locator.locate(logical_name)
        if not sources:
            logger.debug("config.resource.missing", logical_name=logical_name)
            return []
        if self.sort_sources:
            sources = sorted(sources, key=lambda s: s.identity)
        return [self.read_source(logical_name, source, parser) for source in sources]

    def load_entries(self, entries: Sequence[ResourceEntry]) -> list[dict[str, Any]]:
        """Load the documents for *entries*, flattened, in entry order."""
        if self.max_workers == 1 or len(entries) < 2:
            batches = [self.load(entry.path, entry.parser) for entry in entries]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields in submission order, whatever the completion order
                batches = list(pool.map(lambda e: self.load(e.path, e.parser), entries))
        return [document for batch in batches for document in batch]

    def load_file(self, path: str | Path, extensions: Mapping[str, Parser]) -> list[dict[str, Any]]:
        """Load an additional file from the file system, if it exists."""
        file_path = Path(path)
        parser = get_parser(str(file_path), extensions)
        if not file_path.is_file():
            logger.warning("config.additional_file.missing", path=str(file_path))
            return []
        return [self.read_source(str(file_path), DocumentSource.from_path(file_path), parser)]


__all__ = ["DocumentLoader"]
