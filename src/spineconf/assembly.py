"""
Assemble the application configuration from layered sources.

Manifesto:
    Configuration layering must be predictable and debuggable. The load
    order is strict, every layer is deep-merged onto the previous ones, and
    the result is validated as a whole before anything is returned.

Layers, lowest precedence first::

    1. resources        for profile in [*profiles, None]
                          for variant in variants
                            for extension in extensions
                              <prefix>-<profile>-<variant>-configuration.<ext>
    2. additional files  options.additional_files, in order
    3. --load files      from options.args, in encounter order
    4. overrides         options.overrides
    5. arg overrides     path=value tokens from options.args

Inside every document, ``${NAME}`` and ``${NAME:default}`` are expanded from
the explicit properties, the process properties and the environment
variables (highest precedence first) before the document is parsed.

Example::

    config = assemble_configuration(
        prefix="app",
        profiles=["web"],
        schemas=[{"web": {"port": PositiveInt}}],
        args=sys.argv[1:],
    )

Tags:
    spineconf, configuration, layering, overrides, assembly

Doc-Types:
    api-reference, architecture-map
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .args import parse_args
from .loader import DocumentLoader
from .locators import ResourceLocator, SearchPathLocator
from .logging import log_step
from .merge import merge_all
from .parsers import DEFAULT_EXTENSIONS, Parser
from .properties import EnvironmentSnapshot, PropertyResolver
from .resources import DEFAULT_VARIANTS, ResourcePath, default_resource_path, enumerate_resources
from .schema import Coercer, PydanticCoercer, merge_schemas, validate_configuration
from .settings import get_settings


@dataclass
class AssemblyOptions:
    """Options recognized by :func:`assemble_configuration`.

    Attributes:
        prefix: Placed at the start of every resource name.
        schemas: Schema fragments, deep-merged into the effective schema.
        overrides: Mapping deep-merged over the documents, before arg overrides.
        profiles: Profiles to load, in order; the null profile is appended.
        variants: Variants searched for each profile.
        resource_path: Builds a resource name from prefix/profile/variant/extension.
        extensions: Maps a file extension to its parser.
        additional_files: Files loaded after all resources, if they exist.
        args: Command-line tokens: ``--load <path>`` and ``path=value``.
        properties: Explicit properties for expansion; highest precedence.
        locator: Resource discovery; defaults to the configured search path.
        coercer: Validation strategy; defaults to :class:`PydanticCoercer`.
        sort_sources: Sort duplicate sources by identity (default from settings).
        max_workers: Concurrent retrieval bound (default from settings).
    """

    prefix: str
    schemas: Sequence[Mapping[str, Any]] = ()
    overrides: Mapping[str, Any] = field(default_factory=dict)
    profiles: Sequence[str | None] = ()
    variants: Sequence[str | None] = DEFAULT_VARIANTS
    resource_path: ResourcePath = default_resource_path
    extensions: Mapping[str, Parser] = field(default_factory=lambda: DEFAULT_EXTENSIONS)
    additional_files: Sequence[str | Path] = ()
    args: Sequence[str] = ()
    properties: Mapping[Any, Any] = field(default_factory=dict)
    locator: ResourceLocator | None = None
    coercer: Coercer | None = None
    sort_sources: bool | None = None
    max_workers: int | None = None


def _options(options: AssemblyOptions | None, overrides: dict[str, Any]) -> AssemblyOptions:
    if options is None:
        return AssemblyOptions(**overrides)
    if overrides:
        return replace(options, **overrides)
    return options


def _loader(options: AssemblyOptions, resolver: PropertyResolver) -> DocumentLoader:
    settings = get_settings()
    locator = options.locator or SearchPathLocator(settings.search_path)
    return DocumentLoader(
        locator,
        resolver,
        sort_sources=settings.sort_sources if options.sort_sources is None else options.sort_sources,
        max_workers=settings.max_workers if options.max_workers is None else options.max_workers,
    )


def collect_layers(options: AssemblyOptions) -> list[dict[str, Any]]:
    """Return every layer in precedence order, lowest first."""
    resolver = PropertyResolver(EnvironmentSnapshot.capture(options.properties))
    parsed_args = parse_args(options.args)
    loader = _loader(options, resolver)

    entries = enumerate_resources(
        options.prefix,
        options.profiles,
        options.variants,
        options.extensions,
        options.resource_path,
    )
    layers = loader.load_entries(entries)

    for path in [*options.additional_files, *parsed_args.additional_files]:
        layers.extend(loader.load_file(path, options.extensions))

    layers.append(dict(options.overrides or {}))
    layers.append(parsed_args.overrides)
    return layers


def merge_configuration(options: AssemblyOptions | None = None, **kwargs: Any) -> dict[str, Any]:
    """Load and merge every layer, without validation."""
    return merge_all(collect_layers(_options(options, kwargs)))


def assemble_configuration(options: AssemblyOptions | None = None, **kwargs: Any) -> dict[str, Any]:
    """Read, merge, validate and coerce the configuration.

    Accepts an :class:`AssemblyOptions`, keyword arguments naming its
    fields, or both (keywords replace fields of *options*).

    When no schema fragments are given the merged mapping is returned
    without validation.

    Raises:
        UnresolvedPropertyError: An expansion has no value and no default.
        DocumentParseError: A document is malformed.
        InvalidArgumentError: A command-line token is malformed.
        MergeConflictError: Layers disagree on the shape of a key.
        ConfigurationInvalidError: The merged configuration fails the schema.
    """
    opts = _options(options, kwargs)

    with log_step("config.assemble", prefix=opts.prefix, profiles=list(opts.profiles)) as timer:
        layers = collect_layers(opts)
        merged = merge_all(layers)
        timer.add_metric("layers", len(layers))

        if not opts.schemas:
            return merged

        schema = merge_schemas(opts.schemas)
        coercer = opts.coercer or PydanticCoercer(get_settings().extra_keys)
        return validate_configuration(merged, schema, coercer)


__all__ = [
    "AssemblyOptions",
    "assemble_configuration",
    "merge_configuration",
    "collect_layers",
]
