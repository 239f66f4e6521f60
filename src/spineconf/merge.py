"""
Deep merge of configuration documents.

Documents are folded left to right; later documents take precedence. The
rules, applied recursively and dispatched on the *existing* value:

1. Mapping: merge key-wise. Keys present on both sides are merged
   recursively; keys present on one side pass through unchanged.
2. Aggregate (list, tuple, set, frozenset): accumulate, existing first.
3. Anything else: the incoming value replaces the existing one.

So scalars obey "last write wins", list-valued keys accumulate (an overlay
file can append plugin entries), and mappings merge to any depth::

    merge_all([{"db": {"host": "x", "port": 1}, "plugins": ["a"]},
               {"db": {"port": 2}, "plugins": ["b"]}])
    # {"db": {"host": "x", "port": 2}, "plugins": ["a", "b"]}

Merging a non-mapping into a mapping, or a non-aggregate into an aggregate,
raises :class:`~spineconf.errors.MergeConflictError`. An incoming ``None``
replaces a scalar but leaves a mapping or an aggregate unchanged, so an
overlay section whose children are all commented out deletes nothing.

Inputs are never modified; every merge returns fresh containers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .errors import MergeConflictError

_AGGREGATES = (list, tuple, set, frozenset)


def is_aggregate(value: Any) -> bool:
    """True for non-mapping collections that accumulate when merged."""
    return isinstance(value, _AGGREGATES)


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value


def _concat(existing: Any, incoming: Any) -> Any:
    if isinstance(existing, (set, frozenset)):
        return type(existing)(existing) | type(existing)(incoming)
    if isinstance(existing, tuple):
        return tuple(existing) + tuple(incoming)
    return [_copy(v) for v in existing] + [_copy(v) for v in incoming]


def deep_merge(existing: Any, incoming: Any, path: tuple[Any, ...] = ()) -> Any:
    """Merge *incoming* onto *existing* and return the result.

    Raises:
        MergeConflictError: The two values have incompatible shapes at *path*.
    """
    if incoming is None:
        # an empty overlay section keeps the base section
        if isinstance(existing, Mapping) or is_aggregate(existing):
            return _copy(existing)
        return None

    if isinstance(existing, Mapping):
        if not isinstance(incoming, Mapping):
            raise MergeConflictError(path, existing, incoming)
        merged = {k: _copy(v) for k, v in existing.items()}
        for key, value in incoming.items():
            if key in merged:
                merged[key] = deep_merge(merged[key], value, (*path, key))
            else:
                merged[key] = _copy(value)
        return merged

    if is_aggregate(existing):
        if not is_aggregate(incoming):
            raise MergeConflictError(path, existing, incoming)
        return _concat(existing, incoming)

    return _copy(incoming)


def merge_all(documents: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Left-fold :func:`deep_merge` over *documents*, starting from ``{}``."""
    merged: dict[str, Any] = {}
    for document in documents:
        merged = deep_merge(merged, document)
    return merged


__all__ = ["deep_merge", "merge_all", "is_aggregate"]
