"""
Schema validation and coercion of the merged configuration.

Manifesto:
    Validation catches simple typos early; coercion turns the strings that
    came from expansions and command-line overrides into the types the
    application consumes. Either the whole configuration is coerced, or the
    call fails with every violated field listed.

A schema is a mapping. Each value is one of:

* a type annotation (``int``, ``PositiveInt``, ``list[str]``, an ``Enum``...),
  describing a required leaf;
* a :class:`Setting`, describing a leaf with a default;
* a nested mapping, describing a section;
* a pydantic model class, describing a section validated by that model.

Components contribute schema *fragments*; :func:`merge_schemas` deep-merges
them into the effective schema. The coercion strategy is injected: anything
implementing :class:`Coercer` can replace the default :class:`PydanticCoercer`.

Example::

    schema = merge_schemas([
        {"web": {"port": PositiveInt}},
        {"web": {"host": Setting(str, "localhost")}},
    ])
    validate_configuration({"web": {"port": "9090"}}, schema)
    # {"web": {"port": 9090, "host": "localhost"}}

Tags:
    spineconf, configuration, schema, validation, coercion, pydantic

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from .errors import ConfigurationInvalidError, FieldError
from .logging import get_logger
from .merge import merge_all
from .result import Err, Ok, Result

logger = get_logger(__name__)

ExtraKeys = Literal["forbid", "ignore", "allow"]

_UNSAFE_CHARS = re.compile(r"\W")


@dataclass(frozen=True)
class Setting:
    """A schema leaf with an optional default.

    ``Setting(int)`` is required; ``Setting(int, 8080)`` defaults to 8080.
    """

    annotation: Any
    default: Any = ...
    description: str | None = None

    @property
    def required(self) -> bool:
        return self.default is ...


@runtime_checkable
class Coercer(Protocol):
    """Strategy validating and coercing a configuration against a schema."""

    def validate(
        self, config: Mapping[str, Any], schema: Mapping[str, Any]
    ) -> Result[dict[str, Any], list[FieldError]]: ...


def merge_schemas(fragments: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Deep-merge schema fragments into the effective schema."""
    return merge_all(fragments)


# ── Pydantic strategy ────────────────────────────────────────────────────


def _is_model(spec: Any) -> bool:
    return isinstance(spec, type) and issubclass(spec, BaseModel)


def _field_name(index: int, key: Any) -> str:
    return f"f{index}_{_UNSAFE_CHARS.sub('_', str(key))}"


def build_model(
    schema: Mapping[str, Any],
    *,
    name: str = "Configuration",
    extra: ExtraKeys = "forbid",
) -> type[BaseModel]:
    """Build a pydantic model for *schema*.

    Schema keys become field aliases, so keys that are not Python
    identifiers (``web-server``) or that shadow model attributes work.
    """
    fields: dict[str, Any] = {}
    for index, (key, spec) in enumerate(schema.items()):
        alias = str(key)
        if isinstance(spec, Mapping):
            section = build_model(
                spec, name=f"{name}_{_UNSAFE_CHARS.sub('_', alias)}", extra=extra
            )
            if any(f.is_required() for f in section.model_fields.values()):
                fields[_field_name(index, key)] = (section, Field(..., alias=alias))
            else:
                fields[_field_name(index, key)] = (
                    section,
                    Field(default_factory=section, alias=alias),
                )
        elif isinstance(spec, Setting):
            fields[_field_name(index, key)] = (
                spec.annotation,
                Field(spec.default, alias=alias, description=spec.description),
            )
        else:
            fields[_field_name(index, key)] = (spec, Field(..., alias=alias))

    return create_model(name, __config__=ConfigDict(extra=extra), **fields)


def _with_sections(config: Mapping[str, Any], schema: Mapping[str, Any]) -> dict[str, Any]:
    """Fill absent or empty sections with ``{}`` so their fields are reported one by one."""
    result = dict(config)
    for key, spec in schema.items():
        if not isinstance(spec, Mapping):
            continue
        value = result.get(key)
        if value is None:
            value = {}
        if isinstance(value, Mapping):
            result[key] = _with_sections(value, spec)
    return result


def _field_errors(exc: ValidationError) -> list[FieldError]:
    return [
        FieldError(
            path=tuple(error["loc"]),
            message=error["msg"],
            type=error["type"],
            input=error.get("input"),
        )
        for error in exc.errors()
    ]


class PydanticCoercer:
    """Default strategy: pydantic lax-mode validation.

    Lax mode coerces numeric strings to numbers, ``"true"``/``"false"`` to
    booleans and enum values to members.

    Parameters
    ----------
    extra:
        How keys absent from the schema are treated: ``"forbid"`` reports
        them as errors, ``"ignore"`` drops them, ``"allow"`` keeps them.
    """

    def __init__(self, extra: ExtraKeys = "forbid"):
        self.extra = extra

    def validate(
        self, config: Mapping[str, Any], schema: Mapping[str, Any]
    ) -> Result[dict[str, Any], list[FieldError]]:
        model = build_model(schema, extra=self.extra)
        try:
            instance = model.model_validate(_with_sections(config, schema))
        except ValidationError as exc:
            return Err(_field_errors(exc))
        return Ok(instance.model_dump(by_alias=True))

    def __repr__(self) -> str:
        return f"PydanticCoercer(extra={self.extra!r})"


def validate_configuration(
    config: Mapping[str, Any],
    schema: Mapping[str, Any],
    coercer: Coercer | None = None,
) -> dict[str, Any]:
    """Validate and coerce *config*; all or nothing.

    Raises:
        ConfigurationInvalidError: With the schema, the pre-coercion
            configuration and every field failure.
    """
    strategy = coercer or PydanticCoercer()
    result = strategy.validate(config, schema)
    if result.is_err():
        logger.error(
            "config.invalid",
            failures=[f.to_dict() for f in result.error],
        )
        raise ConfigurationInvalidError(schema, config, result.error)
    return result.value


__all__ = [
    "Setting",
    "Coercer",
    "PydanticCoercer",
    "merge_schemas",
    "build_model",
    "validate_configuration",
]
