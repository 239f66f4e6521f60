"""
Enumeration of logical configuration resource names.

Configuration is read from a set of resources that follow a naming
convention::

    <prefix>-<profile>-<variant>-configuration.<extension>

Segments that are ``None`` are omitted along with their dash, so the global
defaults for an application with prefix ``app`` live in
``app-configuration.yaml``.

Load order::

    for profile in [*profiles, None]:          # null profile always last
        for variant in variants:               # null variant always included
            for extension in extensions:       # table order, not guaranteed
                yield <resource path>

Example::

    entries = enumerate_resources("app", ["web"], [None, "local"], DEFAULT_EXTENSIONS)
    [e.path for e in entries][:2]
    # ["app-web-configuration.yaml", "app-web-configuration.yml"]

Guardrails:
    ❌ DON'T: Rely on extension order when two formats exist for one name
    ✅ DO: Keep one format per profile/variant pair

Tags:
    spineconf, configuration, resources, load-order
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from .parsers import Parser

ResourcePath = Callable[[str | None, str | None, str | None, str], str]

DEFAULT_VARIANTS: tuple[str | None, ...] = (None, "local")
"""Default variants: ``None`` provides the defaults, ``"local"`` the local overrides."""

CONFIGURATION_SUFFIX = "configuration"


@dataclass(frozen=True)
class ResourceEntry:
    """One (profile, variant, extension) triple and its logical name."""

    profile: str | None
    variant: str | None
    extension: str
    path: str
    parser: Parser

    def describe(self) -> str:
        return f"{self.profile or '-'}/{self.variant or '-'}/{self.extension}"


def default_resource_path(
    prefix: str | None,
    profile: str | None,
    variant: str | None,
    extension: str,
) -> str:
    """Build ``prefix-profile-variant-configuration.extension``.

    >>> default_resource_path("app", "web", None, "yaml")
    'app-web-configuration.yaml'
    >>> default_resource_path("app", None, "local", "toml")
    'app-local-configuration.toml'
    """
    segments = [s for s in (prefix, profile, variant, CONFIGURATION_SUFFIX) if s is not None]
    return "-".join(str(s) for s in segments) + "." + extension


def effective_profiles(profiles: Iterable[str | None]) -> list[str | None]:
    """Caller profiles in order, followed by the null profile exactly once."""
    ordered = [p for p in profiles if p is not None]
    ordered.append(None)
    return ordered


def effective_variants(variants: Iterable[str | None]) -> list[str | None]:
    """Caller variants in order; the null variant is prepended when missing."""
    ordered = list(variants)
    if None not in ordered:
        ordered.insert(0, None)
    return ordered


def enumerate_resources(
    prefix: str | None,
    profiles: Sequence[str | None],
    variants: Sequence[str | None],
    extensions: Mapping[str, Parser],
    resource_path: ResourcePath = default_resource_path,
) -> list[ResourceEntry]:
    """Return every candidate resource in load order.

    One entry is produced per (profile, variant, extension) triple, whether or
    not a resource with that name exists.
    """
    return [
        ResourceEntry(
            profile=profile,
            variant=variant,
            extension=extension,
            path=resource_path(prefix, profile, variant, extension),
            parser=parser,
        )
        for profile in effective_profiles(profiles)
        for variant in effective_variants(variants)
        for extension, parser in extensions.items()
    ]


__all__ = [
    "ResourceEntry",
    "ResourcePath",
    "DEFAULT_VARIANTS",
    "default_resource_path",
    "effective_profiles",
    "effective_variants",
    "enumerate_resources",
]
