"""
Property snapshot and resolution for ``${NAME}`` expansions.

Values that may be substituted into configuration documents come from three
places, lowest precedence first:

1. Environment variables
2. Process properties (a process-wide registry, see :func:`set_process_property`)
3. Explicit properties passed to the assembly call

The three are captured once per assembly into an immutable
:class:`EnvironmentSnapshot` and threaded explicitly through the expander, so
tests can build synthetic snapshots and assembly never re-reads process state
half-way through.

Example::

    snapshot = EnvironmentSnapshot.capture(properties={"db_host": "localhost"})
    resolver = PropertyResolver(snapshot)
    resolver.resolve("db_host")           # "localhost"
    resolver.resolve("DB_PORT", "5432")   # "5432" unless DB_PORT is set

Tags:
    spineconf, configuration, properties, environment, expansion
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from .errors import UnresolvedPropertyError

# Sentinel for distinguishing "no default" from a default of None or ""
_MISSING = object()

# ---------------------------------------------------------------------------
# Process properties
# ---------------------------------------------------------------------------

_process_properties: dict[str, str] = {}
_lock = threading.Lock()


def set_process_property(name: str, value: Any) -> None:
    """Set a process-wide property, visible to every later assembly."""
    with _lock:
        _process_properties[str(name)] = str(value)


def clear_process_property(name: str | None = None) -> None:
    """Remove one process property, or all of them when *name* is None."""
    with _lock:
        if name is None:
            _process_properties.clear()
        else:
            _process_properties.pop(name, None)


def process_properties() -> dict[str, str]:
    """Return a copy of the process-wide properties."""
    with _lock:
        return dict(_process_properties)


def property_key(key: Any) -> str:
    """Convert an explicit property key to its string name."""
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class EnvironmentSnapshot(Mapping[str, str]):
    """Immutable, precedence-ordered ``str -> str`` table.

    Keys are compared exactly; there is no case folding.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values: Mapping[str, str] = MappingProxyType(dict(values or {}))

    @classmethod
    def capture(
        cls,
        properties: Mapping[Any, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        process: Mapping[str, str] | None = None,
    ) -> EnvironmentSnapshot:
        """Read environment variables and process properties exactly once.

        Parameters
        ----------
        properties:
            Explicit properties; highest precedence. Keys may be strings or
            enums and are converted with :func:`property_key`.
        environ:
            Replaces ``os.environ`` (for tests).
        process:
            Replaces the process-property registry (for tests).
        """
        values: dict[str, str] = {}
        values.update(os.environ if environ is None else environ)
        values.update(process_properties() if process is None else process)
        if properties:
            values.update({property_key(k): str(v) for k, v in properties.items()})
        return cls(values)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EnvironmentSnapshot({len(self._values)} keys)"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class PropertyResolver:
    """Resolve property names against an :class:`EnvironmentSnapshot`."""

    def __init__(self, snapshot: EnvironmentSnapshot):
        self.snapshot = snapshot

    def resolve(
        self,
        name: str,
        default: Any = _MISSING,
        *,
        expansion: str | None = None,
        source_text: str | None = None,
        logical_name: str | None = None,
    ) -> str:
        """Return the value of *name*, or *default* when absent.

        Raises:
            UnresolvedPropertyError: If *name* is absent and no default is given.
                A default of ``""`` is a legal fallback and never fails.
        """
        value = self.snapshot.get(name)
        if value is not None:
            return value
        if default is not _MISSING:
            return default
        raise UnresolvedPropertyError(
            name,
            expansion=expansion,
            known_keys=self.snapshot.keys(),
            source_text=source_text,
            logical_name=logical_name,
        )

    def __contains__(self, name: object) -> bool:
        return name in self.snapshot


__all__ = [
    "EnvironmentSnapshot",
    "PropertyResolver",
    "set_process_property",
    "clear_process_property",
    "process_properties",
    "property_key",
]
