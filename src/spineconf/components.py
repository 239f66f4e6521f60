"""
Integration with component systems.

A *system map* is a mapping from component names to component objects, as
kept by a lifecycle / dependency-injection framework. Components declare the
slice of configuration they need with :func:`with_config_schema`;
:func:`extend_system_map` assembles configuration against the union of those
schemas and adds it to the map, and :func:`apply_configuration` hands each
:class:`Configurable` component its slice.

Example::

    system = {
        "web": with_config_schema(WebServer(), {"web": {"port": PositiveInt}}),
        "db": with_config_schema(Database(), {"db": {"url": str}}),
    }
    system = extend_system_map(system, AssemblyOptions(prefix="app", profiles=["web", "db"]))
    apply_configuration(system, system["configuration"])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any, Protocol, TypeVar, runtime_checkable

from .assembly import AssemblyOptions, assemble_configuration
from .logging import log_step

SCHEMA_ATTRIBUTE = "__config_schema__"

C = TypeVar("C")


@runtime_checkable
class Configurable(Protocol):
    """A component that accepts its slice of the configuration."""

    def configure(self, config: Mapping[str, Any]) -> None: ...


def with_config_schema(component: C, schema: Mapping[str, Any]) -> C:
    """Attach a configuration schema fragment to *component* and return it."""
    setattr(component, SCHEMA_ATTRIBUTE, schema)
    return component


def extract_schemas(components: Iterable[Any]) -> list[Mapping[str, Any]]:
    """Return the schema fragments attached to *components*, in order."""
    return [
        schema
        for component in components
        if (schema := getattr(component, SCHEMA_ATTRIBUTE, None)) is not None
    ]


def extend_system_map(
    system_map: Mapping[str, Any],
    options: AssemblyOptions,
    configuration_key: str = "configuration",
) -> dict[str, Any]:
    """Assemble configuration for *system_map* and return a new map including it.

    The schemas attached to the components replace ``options.schemas``.
    """
    schemas = extract_schemas(system_map.values())
    with log_step("config.system_map", components=len(system_map)):
        configuration = assemble_configuration(replace(options, schemas=schemas))
    return {**system_map, configuration_key: configuration}


def apply_configuration(system_map: Mapping[str, Any], configuration: Mapping[str, Any]) -> list[str]:
    """Call ``configure`` on every :class:`Configurable` component.

    Each component receives ``configuration[name]`` (an empty mapping when
    absent). Returns the names of the configured components.
    """
    configured: list[str] = []
    for name, component in system_map.items():
        if isinstance(component, Configurable):
            component.configure(configuration.get(name, {}))
            configured.append(name)
    return configured


__all__ = [
    "Configurable",
    "with_config_schema",
    "extract_schemas",
    "extend_system_map",
    "apply_configuration",
    "SCHEMA_ATTRIBUTE",
]
