"""
Structured error types for configuration assembly.

Every failure raised while assembling configuration is a :class:`ConfigError`.
Each error carries a category, a structured context for logging, and an
optional chained cause. None of them is retryable: configuration is read once
at process start, and a half-assembled configuration is never returned.

Manifesto:
    - **Typed Error Hierarchy:** One subclass per failure mode of the pipeline
    - **Fail Fast:** Every error is fatal to the assembly call
    - **Rich Context:** Errors carry the data needed to diagnose without a re-run
    - **Error Chaining:** Parser and I/O exceptions are preserved as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         ConfigError                           │
        │           (category, context, cause, to_dict())               │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  UnresolvedPropertyError    DocumentParseError                │
        │  (EXPANSION)                (PARSE)                           │
        │                                                               │
        │  ResourceReadError          UnsupportedFormatError            │
        │  (SOURCE)                   (SOURCE)                          │
        │                                                               │
        │  InvalidArgumentError       MergeConflictError                │
        │  (ARGUMENT)                 (MERGE)                           │
        │                                                               │
        │  ConfigurationInvalidError                                    │
        │  (VALIDATION)                                                 │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidArgumentError("port")
    >>> error.category
    <ErrorCategory.ARGUMENT: 'ARGUMENT'>
    >>> error.to_dict()["token"]
    'port'

Guardrails:
    ❌ DON'T: Raise bare ValueError from pipeline stages
    ✅ DO: Raise the ConfigError subclass for the failing stage

    ❌ DON'T: Swallow parser exceptions
    ✅ DO: Pass them as cause= so the traceback is preserved

Tags:
    error-handling, exception-hierarchy, configuration, spineconf

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories used to classify configuration failures."""

    EXPANSION = "EXPANSION"      # ${...} reference without value or default
    SOURCE = "SOURCE"            # Unreadable or unsupported source
    PARSE = "PARSE"              # Malformed document
    ARGUMENT = "ARGUMENT"        # Malformed command-line token
    MERGE = "MERGE"              # Incompatible shapes during deep merge
    VALIDATION = "VALIDATION"    # Schema validation / coercion failure
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to a :class:`ConfigError`.

    Only non-empty fields are serialized by :meth:`to_dict`.
    """

    logical_name: str | None = None
    source: str | None = None
    path: tuple[Any, ...] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.logical_name:
            result["logical_name"] = self.logical_name
        if self.source:
            result["source"] = self.source
        if self.path:
            result["path"] = "/".join(str(p) for p in self.path)
        if self.metadata:
            result.update(self.metadata)
        return result


class ConfigError(Exception):
    """
    Base exception for all configuration assembly errors.

    Subclasses set ``default_category``. The optional ``cause`` is chained as
    ``__cause__`` so the original traceback survives.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @property
    def retryable(self) -> bool:
        return False

    def with_context(self, **kwargs: Any) -> ConfigError:
        """
        Add context to this error (fluent API).

        Usage:
            raise DocumentParseError(...).with_context(profile="web")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# EXPANSION ERRORS
# =============================================================================


class UnresolvedPropertyError(ConfigError):
    """A ``${NAME}`` reference had no value and no default."""

    default_category = ErrorCategory.EXPANSION

    def __init__(
        self,
        name: str,
        *,
        expansion: str | None = None,
        known_keys: Iterable[str] = (),
        source_text: str | None = None,
        logical_name: str | None = None,
    ):
        self.name = name
        self.expansion = expansion or f"${{{name}}}"
        self.known_keys = sorted(known_keys)
        self.source_text = source_text
        super().__init__(
            f"Unable to find expansion for `{self.expansion}'.",
            context=ErrorContext(logical_name=logical_name),
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["property"] = self.name
        result["expansion"] = self.expansion
        result["known_keys"] = len(self.known_keys)
        return result


# =============================================================================
# SOURCE / PARSE ERRORS
# =============================================================================


class DocumentParseError(ConfigError):
    """A document could not be parsed after expansion."""

    default_category = ErrorCategory.PARSE

    def __init__(
        self,
        logical_name: str,
        source: str,
        cause: BaseException | None = None,
        *,
        message: str | None = None,
    ):
        self.logical_name = logical_name
        self.source = source
        detail = message or (str(cause) if cause is not None else "invalid document")
        super().__init__(
            f"Unable to parse configuration `{logical_name}' from {source}: {detail}",
            context=ErrorContext(logical_name=logical_name, source=source),
            cause=cause,
        )


class ResourceReadError(ConfigError):
    """A located source could not be read."""

    default_category = ErrorCategory.SOURCE

    def __init__(self, logical_name: str, source: str, cause: BaseException):
        self.logical_name = logical_name
        self.source = source
        super().__init__(
            f"Unable to read configuration `{logical_name}' from {source}: {cause}",
            context=ErrorContext(logical_name=logical_name, source=source),
            cause=cause,
        )


class UnsupportedFormatError(ConfigError):
    """No parser is registered for a file's extension."""

    default_category = ErrorCategory.SOURCE

    def __init__(self, path: str, extensions: Iterable[str]):
        self.path = path
        self.extensions = sorted(extensions)
        super().__init__(
            f"Unknown extension for configuration file `{path}' "
            f"(supported: {', '.join(self.extensions) or 'none'}).",
            context=ErrorContext(source=path),
        )


# =============================================================================
# ARGUMENT / MERGE ERRORS
# =============================================================================


class InvalidArgumentError(ConfigError):
    """A command-line token is neither ``--load <path>`` nor ``path=value``."""

    default_category = ErrorCategory.ARGUMENT

    def __init__(self, token: str, message: str | None = None):
        self.token = token
        super().__init__(message or f"Unable to parse argument `{token}'.")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["token"] = self.token
        return result


class MergeConflictError(ConfigError):
    """Two layers disagree on whether a key holds a mapping, an aggregate, or a scalar."""

    default_category = ErrorCategory.MERGE

    def __init__(self, path: Sequence[Any], existing: Any, incoming: Any):
        self.path = tuple(path)
        self.existing = existing
        self.incoming = incoming
        where = "/".join(str(p) for p in self.path) or "<root>"
        super().__init__(
            f"Cannot merge {type(incoming).__name__} into {type(existing).__name__} at `{where}'.",
            context=ErrorContext(path=self.path),
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


@dataclass(frozen=True)
class FieldError:
    """One violated field reported by schema validation."""

    path: tuple[str | int, ...]
    message: str
    type: str
    input: Any = None

    @property
    def location(self) -> str:
        return "/".join(str(p) for p in self.path) or "<root>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.location,
            "message": self.message,
            "type": self.type,
            "input": repr(self.input),
        }


class ConfigurationInvalidError(ConfigError):
    """
    The merged configuration does not satisfy the schema.

    Carries the effective schema, the merged (pre-coercion) configuration,
    and every field failure, not just the first.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        schema: Mapping[str, Any],
        config: Mapping[str, Any],
        failures: Sequence[FieldError],
    ):
        self.schema = schema
        self.config = config
        self.failures = list(failures)
        summary = "; ".join(f"{f.location}: {f.message}" for f in self.failures)
        super().__init__(f"The configuration is not valid: {summary}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["failures"] = [f.to_dict() for f in self.failures]
        return result


__all__ = [
    "ErrorCategory",
    "ErrorContext",
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
