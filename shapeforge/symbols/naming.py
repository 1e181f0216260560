# shapeforge/symbols/naming.py
"""
Identifier casing and reserved-word escaping for the generated Rust code.
"""

from __future__ import annotations

import re

# Keywords that can be used as raw identifiers (``r#type``).
RESERVED_WORDS = frozenset(
    {
        "as", "async", "await", "break", "const", "continue", "dyn", "else",
        "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let",
        "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "static", "struct", "trait", "true", "type", "unsafe", "use", "where",
        "while", "abstract", "become", "box", "do", "final", "macro",
        "override", "priv", "try", "typeof", "unsized", "virtual", "yield",
    }
)

# Keywords that cannot be raw identifiers; they get a trailing underscore.
NON_RAW_RESERVED_WORDS = frozenset({"self", "Self", "crate", "super"})

# Type names that would shadow prelude types in generated modules.
RESERVED_TYPE_NAMES = frozenset({"Self", "Option", "Result", "Box", "Vec", "String", "Some", "None"})

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_NON_WORD = re.compile(r"[^A-Za-z0-9]+")


def to_snake_case(name: str) -> str:
    """
    Convert a shape name to snake_case.

    Examples:
        >>> to_snake_case("GetHTTPResponse")
        'get_http_response'
        >>> to_snake_case("ListItems2")
        'list_items2'
    """
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _CAMEL_BOUNDARY.sub(r"\1_\2", s)
    s = _NON_WORD.sub("_", s)
    return s.strip("_").lower()


def to_pascal_case(name: str) -> str:
    """
    Convert a name to PascalCase.

    Examples:
        >>> to_pascal_case("get_http_response")
        'GetHttpResponse'
        >>> to_pascal_case("GetHTTPResponse")
        'GetHttpResponse'
    """
    return "".join(part.capitalize() for part in to_snake_case(name).split("_") if part)


def escape_if_needed(identifier: str) -> str:
    """Escape an identifier that collides with a Rust keyword."""
    if identifier in NON_RAW_RESERVED_WORDS:
        return f"{identifier}_"
    if identifier in RESERVED_WORDS:
        return f"r#{identifier}"
    return identifier


def escape_type_name(name: str) -> str:
    """Rename a generated type whose name would shadow a prelude type."""
    if name in RESERVED_TYPE_NAMES:
        return f"{name}Value"
    return name


def member_name(name: str) -> str:
    """Field name for a structure member."""
    return escape_if_needed(to_snake_case(name))


__all__ = [
    "RESERVED_WORDS",
    "NON_RAW_RESERVED_WORDS",
    "RESERVED_TYPE_NAMES",
    "to_snake_case",
    "to_pascal_case",
    "escape_if_needed",
    "escape_type_name",
    "member_name",
]
