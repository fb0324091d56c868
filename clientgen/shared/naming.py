"""Naming utilities for code generation."""

from __future__ import annotations

import re
from functools import lru_cache

TS_KEYWORDS: frozenset[str] = frozenset({
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
})

CSHARP_KEYWORDS: frozenset[str] = frozenset({
    "base",
    "bool",
    "class",
    "decimal",
    "default",
    "double",
    "event",
    "fixed",
    "float",
    "int",
    "internal",
    "lock",
    "long",
    "namespace",
    "new",
    "object",
    "operator",
    "out",
    "params",
    "private",
    "public",
    "ref",
    "string",
    "this",
    "using",
    "virtual",
})

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[^a-zA-Z0-9]+")


@lru_cache(maxsize=1024)
def split_words(value: str) -> tuple[str, ...]:
    """Split an identifier-ish string into its words.

    Examples:
        >>> split_words("getUserById")
        ('get', 'User', 'By', 'Id')
        >>> split_words("user-management_api")
        ('user', 'management', 'api')
    """
    value = _ACRONYM_BOUNDARY.sub(r"\1_\2", value)
    value = _WORD_BOUNDARY.sub(r"\1_\2", value)
    return tuple(part for part in _SEPARATORS.split(value) if part)


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Only the first letter of each word changes case, so acronyms survive.

    Examples:
        >>> to_pascal_case("hello_world")
        'HelloWorld'
        >>> to_pascal_case("getHTTPStatus")
        'GetHTTPStatus'
    """
    return "".join(word[0].upper() + word[1:] for word in split_words(value))


@lru_cache(maxsize=1024)
def to_camel_case(value: str) -> str:
    """Convert a string to camelCase.

    Examples:
        >>> to_camel_case("GetItem")
        'getItem'
        >>> to_camel_case("user_name")
        'userName'
    """
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


@lru_cache(maxsize=1024)
def to_hyphen_case(value: str) -> str:
    """Convert a string to kebab-case for file names.

    Examples:
        >>> to_hyphen_case("ItemDto")
        'item-dto'
        >>> to_hyphen_case("User Management")
        'user-management'
    """
    return "-".join(word.lower() for word in split_words(value))


@lru_cache(maxsize=1024)
def slugify(value: str, *, fallback: str = "operation") -> str:
    """Convert a string to a snake_case slug suitable for function names."""
    cleaned = "_".join(word.lower() for word in split_words(value))
    return cleaned or fallback


@lru_cache(maxsize=1024)
def sanitize_identifier(value: str, keywords: frozenset[str] = TS_KEYWORDS) -> str:
    """Make a schema name usable as a parameter or member identifier."""
    sanitized = re.sub(r"[^a-zA-Z0-9_$]", "_", value)
    if not sanitized or sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    if sanitized in keywords:
        return f"{sanitized}_"
    return sanitized
