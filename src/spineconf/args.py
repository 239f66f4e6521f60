"""
Command-line overrides.

Two token grammars are accepted:

* ``--load <path>``: an additional configuration file, loaded after all
  resources, in encounter order.
* ``<path>=<value>``: an override, where the path is split at slashes.
  ``web-server/port=8080`` is equivalent to
  ``overrides["web-server"]["port"] = "8080"``.

Values stay raw strings; the schema coerces them later. When two tokens set
the same path the last one wins.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidArgumentError

LOAD_FLAG = "--load"

_ARG_RE = re.compile(r"([^=]+)=(.*)", re.DOTALL)


@dataclass
class ParsedArgs:
    """Result of :func:`parse_args`."""

    additional_files: list[str] = field(default_factory=list)
    overrides: dict[str, Any] = field(default_factory=dict)


def assoc_in(mapping: Mapping[str, Any], keys: list[str], value: Any) -> dict[str, Any]:
    """Return a copy of *mapping* with *value* stored at the nested *keys*.

    A non-mapping value met along the way is replaced by a new mapping.
    """
    result = dict(mapping)
    head, *rest = keys
    if not rest:
        result[head] = value
        return result
    child = result.get(head)
    result[head] = assoc_in(child if isinstance(child, Mapping) else {}, rest, value)
    return result


def merge_value(mapping: Mapping[str, Any], arg: str) -> dict[str, Any]:
    """Merge one ``path=value`` argument into *mapping*.

    Raises:
        InvalidArgumentError: *arg* is not of the form ``path=value``.
    """
    match = _ARG_RE.fullmatch(arg)
    if match is None:
        raise InvalidArgumentError(arg)
    path, value = match.groups()
    return assoc_in(mapping, path.split("/"), value)


def parse_args(args: Iterable[str] | None) -> ParsedArgs:
    """Split *args* into additional files and an overrides mapping."""
    parsed = ParsedArgs()
    remaining = list(args or ())
    index = 0
    while index < len(remaining):
        arg = remaining[index]
        if arg == LOAD_FLAG:
            if index + 1 >= len(remaining):
                raise InvalidArgumentError(arg, f"Missing file name after `{LOAD_FLAG}'.")
            parsed.additional_files.append(remaining[index + 1])
            index += 2
            continue
        parsed.overrides = merge_value(parsed.overrides, arg)
        index += 1
    return parsed


__all__ = ["ParsedArgs", "parse_args", "merge_value", "assoc_in", "LOAD_FLAG"]
