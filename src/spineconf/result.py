"""
Result type for operations that report failures as values.

The coercion strategy returns ``Ok(coerced)`` or ``Err(failures)`` rather than
raising, so alternative strategies can be plugged in without knowing the
error hierarchy. The assembler turns an ``Err`` into
:class:`~spineconf.errors.ConfigurationInvalidError`.

Usage::

    match coercer.validate(config, schema):
        case Ok(value):
            use(value)
        case Err(failures):
            report(failures)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result containing an error value."""

    error: E

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise. Use only when you're sure it's Ok."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap() on Err({self.error!r})")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[E]


__all__ = ["Ok", "Err", "Result"]
