"""
``${NAME}`` / ``${NAME:default}`` expansion of raw document text.

Expansion runs once on the raw text of a document, before it is parsed, so
references may appear anywhere the document grammar allows text: inside
string literals, in numeric positions, or as mapping keys.

Nested references are not expanded: the inner text of a match never contains
``${``. The inner text is split at the first ``:`` into name and default; a
leading ``:`` is part of the name.
"""

from __future__ import annotations

import re

from .properties import PropertyResolver

_EXPANSION_RE = re.compile(r"\$\{((?:(?!\$\{).)*?)\}")


def split_reference(reference: str) -> tuple[str, str | None]:
    """Split ``NAME:default`` into ``("NAME", "default")``.

    >>> split_reference("DB_PORT:5432")
    ('DB_PORT', '5432')
    >>> split_reference("DB_HOST")
    ('DB_HOST', None)
    """
    index = reference.find(":")
    if index > 0:
        return reference[:index], reference[index + 1 :]
    return reference, None


def expand(text: str, resolver: PropertyResolver, *, logical_name: str | None = None) -> str:
    """Replace every expansion in *text* with its resolved value.

    Raises:
        UnresolvedPropertyError: A reference has no value and no default.
    """

    def _replace(match: re.Match[str]) -> str:
        name, default = split_reference(match.group(1))
        context = {
            "expansion": match.group(0),
            "source_text": text,
            "logical_name": logical_name,
        }
        if default is None:
            return resolver.resolve(name, **context)
        return resolver.resolve(name, default, **context)

    return _EXPANSION_RE.sub(_replace, text)


__all__ = ["expand", "split_reference"]
