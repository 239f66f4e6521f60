"""Layered configuration assembly.

Manifesto:
    A multi-component application should start from one validated
    configuration, assembled the same way every time from bundled defaults,
    environment overlays, explicit overrides and command-line overrides.

Quick start::

    from spineconf import assemble_configuration

    config = assemble_configuration(
        prefix="app",
        profiles=["web", "db"],
        schemas=[{"web": {"port": int}}, {"db": {"url": str}}],
        args=sys.argv[1:],
    )

Architecture::

    properties.py    EnvironmentSnapshot + PropertyResolver
    expansion.py     ${NAME} / ${NAME:default} expansion of raw text
    resources.py     resource name enumeration (profile → variant → extension)
    locators.py      resource discovery (search path, packages, memory)
    parsers.py       extension → parser table (yaml, json, toml)
    loader.py        locate + expand + parse
    merge.py         deep merge (mappings merge, aggregates accumulate)
    args.py          --load <path> and path=value overrides
    schema.py        schema fragments + pydantic coercion
    assembly.py      override layering + assemble_configuration()
    components.py    Configurable components and system maps

Tags:
    spineconf, configuration, layering, deep-merge, expansion, pydantic

Doc-Types:
    package-overview, architecture-map, module-index
"""

from .args import ParsedArgs, merge_value, parse_args
from .assembly import (
    AssemblyOptions,
    assemble_configuration,
    collect_layers,
    merge_configuration,
)
from .components import (
    Configurable,
    apply_configuration,
    extend_system_map,
    extract_schemas,
    with_config_schema,
)
from .errors import (
    ConfigError,
    ConfigurationInvalidError,
    DocumentParseError,
    FieldError,
    InvalidArgumentError,
    MergeConflictError,
    ResourceReadError,
    UnresolvedPropertyError,
    UnsupportedFormatError,
)
from .expansion import expand
from .loader import DocumentLoader
from .locators import (
    ChainLocator,
    DictLocator,
    DocumentSource,
    PackageLocator,
    ResourceLocator,
    SearchPathLocator,
)
from .merge import deep_merge, merge_all
from .parsers import DEFAULT_EXTENSIONS
from .properties import (
    EnvironmentSnapshot,
    PropertyResolver,
    clear_process_property,
    set_process_property,
)
from .resources import (
    DEFAULT_VARIANTS,
    ResourceEntry,
    default_resource_path,
    enumerate_resources,
)
from .schema import Coercer, PydanticCoercer, Setting, merge_schemas, validate_configuration

__all__ = [
    # Assembly
    "AssemblyOptions",
    "assemble_configuration",
    "merge_configuration",
    "collect_layers",
    # Properties & expansion
    "EnvironmentSnapshot",
    "PropertyResolver",
    "set_process_property",
    "clear_process_property",
    "expand",
    # Resources
    "DEFAULT_VARIANTS",
    "DEFAULT_EXTENSIONS",
    "ResourceEntry",
    "default_resource_path",
    "enumerate_resources",
    "DocumentSource",
    "ResourceLocator",
    "SearchPathLocator",
    "PackageLocator",
    "DictLocator",
    "ChainLocator",
    "DocumentLoader",
    # Merge & args
    "deep_merge",
    "merge_all",
    "ParsedArgs",
    "parse_args",
    "merge_value",
    # Schema
    "Setting",
    "Coercer",
    "PydanticCoercer",
    "merge_schemas",
    "validate_configuration",
    # Components
    "Configurable",
    "with_config_schema",
    "extract_schemas",
    "extend_system_map",
    "apply_configuration",
    # Errors
    "ConfigError",
    "UnresolvedPropertyError",
    "DocumentParseError",
    "ResourceReadError",
    "UnsupportedFormatError",
    "InvalidArgumentError",
    "MergeConflictError",
    "FieldError",
    "ConfigurationInvalidError",
]
