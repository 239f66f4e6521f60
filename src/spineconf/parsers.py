"""
Parsers for configuration documents, keyed by file extension.

A parser is any ``Callable[[str], Any]`` taking expanded text and returning a
tree of mappings, sequences and scalars. Callers may pass their own table to
register more formats.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Callable, Mapping
from pathlib import PurePath
from types import MappingProxyType
from typing import Any

import yaml

from .errors import UnsupportedFormatError

Parser = Callable[[str], Any]


def parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def parse_json(text: str) -> Any:
    if not text.strip():
        return None
    return json.loads(text)


def parse_toml(text: str) -> Any:
    return tomllib.loads(text)


DEFAULT_EXTENSIONS: Mapping[str, Parser] = MappingProxyType(
    {
        "yaml": parse_yaml,
        "yml": parse_yaml,
        "json": parse_json,
        "toml": parse_toml,
    }
)


def extension_of(path: str) -> str:
    """Return the extension of *path* without the dot (``"a/b.yaml"`` -> ``"yaml"``)."""
    return PurePath(path).suffix.lstrip(".")


def get_parser(path: str, extensions: Mapping[str, Parser]) -> Parser:
    """Pick the parser for *path* by its extension.

    Raises:
        UnsupportedFormatError: No parser is registered for the extension.
    """
    parser = extensions.get(extension_of(path))
    if parser is None:
        raise UnsupportedFormatError(path, extensions.keys())
    return parser


__all__ = [
    "Parser",
    "DEFAULT_EXTENSIONS",
    "parse_yaml",
    "parse_json",
    "parse_toml",
    "extension_of",
    "get_parser",
]
