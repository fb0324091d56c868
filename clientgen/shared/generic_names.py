"""Parsing and rendering of generic schema keys.

Schema documents produced by .NET backends encode closed generic types in
their keys using the runtime's reflection syntax::

    Name `N [ [Arg] (, [Arg])* ]

where ``N`` is the generic arity and every ``Arg`` is a type name that may be
followed by assembly qualifiers (``, Assembly, Version=...``) and may itself
be generic. For example::

    Core.Models.PageList`1[[Shop.Models.ItemDto, Shop, Version=1.0.0.0]]

This module is the only place that slices such strings. Everything else
works with :class:`GenericName` or the short display forms rendered here
(``PageList<ItemDto>``, ``PageList<T>``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Final, Iterator

from .errors import GenericNameError

ARITY_MARKER: Final[str] = "`"

# Matches a bracketed list made only of placeholders: <T>, <T1,T2>
_PLACEHOLDER_LIST: Final[re.Pattern[str]] = re.compile(r"<\s*(T\d*(?:\s*,\s*T\d*)*)\s*>")
_PLACEHOLDER: Final[re.Pattern[str]] = re.compile(r"T\d*")

# Runtime type names that show up as generic arguments -> source descriptors
CLR_SOURCE_TYPES: Final[dict[str, str]] = {
    "System.String": "string",
    "System.Char": "char",
    "System.Boolean": "bool",
    "System.Byte": "int",
    "System.SByte": "int",
    "System.Int16": "short",
    "System.UInt16": "int",
    "System.Int32": "int",
    "System.UInt32": "long",
    "System.Int64": "long",
    "System.UInt64": "long",
    "System.Single": "float",
    "System.Double": "double",
    "System.Decimal": "decimal",
    "System.Guid": "Guid",
    "System.DateTime": "DateTime",
    "System.DateTimeOffset": "DateTimeOffset",
    "System.DateOnly": "DateOnly",
    "System.TimeOnly": "TimeOnly",
    "System.TimeSpan": "TimeSpan",
    "System.Object": "object",
}

CLR_NULLABLE: Final[str] = "System.Nullable"

CLR_LIST_TYPES: Final[frozenset[str]] = frozenset({
    "System.Collections.Generic.List",
    "System.Collections.Generic.IList",
    "System.Collections.Generic.ICollection",
    "System.Collections.Generic.IEnumerable",
    "System.Collections.Generic.IReadOnlyList",
    "System.Collections.Generic.IReadOnlyCollection",
    "System.Collections.Generic.HashSet",
    "System.Collections.Generic.ISet",
})

CLR_DICTIONARY_TYPES: Final[frozenset[str]] = frozenset({
    "System.Collections.Generic.Dictionary",
    "System.Collections.Generic.IDictionary",
    "System.Collections.Generic.IReadOnlyDictionary",
})


@dataclass(frozen=True, slots=True)
class GenericName:
    """A parsed schema key."""

    base_name: str
    arity: int = 0
    args: tuple[str, ...] = ()

    @property
    def is_generic(self) -> bool:
        return self.arity > 0 or bool(self.args)

    @property
    def parameter_count(self) -> int:
        return len(self.args) or self.arity


def normalize_key(text: str) -> str:
    """Undo escaping some serializers apply to generic keys."""
    return text.replace("\\u0060", ARITY_MARKER).replace("«", "").replace("»", "").strip()


def _split_groups(inner: str, source: str) -> list[str]:
    """Split ``[a],[b]`` into ``['a', 'b']`` honoring nested brackets."""
    groups: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(inner):
        if char == "[":
            depth += 1
            if depth == 1:
                start = index + 1
        elif char == "]":
            depth -= 1
            if depth < 0:
                raise GenericNameError(source, "unbalanced ']'")
            if depth == 0:
                groups.append(inner[start:index])
        elif depth == 0 and char not in ", ":
            raise GenericNameError(source, f"unexpected '{char}' between arguments")
    if depth != 0:
        raise GenericNameError(source, "unbalanced '['")
    return groups


def _strip_qualifiers(arg: str) -> str:
    """Drop the assembly qualifiers that follow a type name."""
    depth = 0
    for index, char in enumerate(arg):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            return arg[:index].strip()
    return arg.strip()


@lru_cache(maxsize=1024)
def parse_generic_name(text: str) -> GenericName:
    """Parse a schema key into its base name, arity and argument keys.

    Examples:
        >>> parse_generic_name("NS.PageList`1[[NS.Item, Asm]]")
        GenericName(base_name='NS.PageList', arity=1, args=('NS.Item',))
        >>> parse_generic_name("NS.Item")
        GenericName(base_name='NS.Item', arity=0, args=())

    Raises:
        GenericNameError: If the arity or argument list is malformed.
    """
    text = normalize_key(text)
    tick = text.find(ARITY_MARKER)
    if tick < 0:
        return GenericName(base_name=text)

    base_name = text[:tick]
    rest = text[tick + 1:]
    match = re.match(r"\d+", rest)
    if not base_name or match is None:
        raise GenericNameError(text, "missing arity after '`'")
    arity = int(match.group())
    rest = rest[match.end():].strip()
    if not rest:
        return GenericName(base_name=base_name, arity=arity)
    if not (rest.startswith("[") and rest.endswith("]")):
        raise GenericNameError(text, "argument list must be enclosed in '[...]'")

    inner = rest[1:-1].strip()
    # Some serializers drop the inner brackets for a single argument
    groups = _split_groups(inner, text) if inner.startswith("[") else [inner]
    args = tuple(_strip_qualifiers(group) for group in groups if group.strip())
    return GenericName(base_name=base_name, arity=arity, args=args)


@lru_cache(maxsize=1024)
def short_name(key: str) -> str:
    """Strip namespace and generic arity from a key.

    Already rendered generic forms keep their argument list.

    Examples:
        >>> short_name("Shop.Models.ItemDto")
        'ItemDto'
        >>> short_name("Core.PageList`1[[Shop.ItemDto]]")
        'PageList'
        >>> short_name("PageList<T>")
        'PageList<T>'
    """
    key = normalize_key(key)
    tick = key.find(ARITY_MARKER)
    if tick >= 0:
        key = key[:tick]
    elif "<" in key:
        head, _, tail = key.partition("<")
        return short_name(head) + "<" + tail
    return key.rsplit(".", 1)[-1]


def namespace_of(key: str) -> str:
    """Return the dotted prefix of a key, or an empty string."""
    base = parse_generic_name(key).base_name
    return base.rsplit(".", 1)[0] if "." in base else ""


def namespace_bucket(namespace: str) -> str:
    """First namespace segment, used to group generated files."""
    return namespace.split(".", 1)[0] if namespace else ""


def placeholder_names(count: int) -> list[str]:
    """Placeholder names for an open generic: ``T`` alone, else ``T1..Tn``."""
    if count <= 0:
        return []
    if count == 1:
        return ["T"]
    return [f"T{index}" for index in range(1, count + 1)]


def render_generic_name(base: str, args: list[str] | tuple[str, ...]) -> str:
    """Render ``Base<A,B>`` with short names; nested generic args are rendered too."""
    name = short_name(base)
    if not args:
        return name
    return f"{name}<{','.join(display_name(arg) for arg in args)}>"


def display_name(key: str) -> str:
    """Short, materialized name of a key as a source descriptor.

    Runtime types become the descriptors the schema parser produces, so
    ``System.Int32`` is ``int`` and a generic ``List`1`` of ``Shop.ItemDto``
    is ``List<ItemDto>``.

    Examples:
        >>> display_name("Core.PageList`1[[Shop.ItemDto, Shop]]")
        'PageList<ItemDto>'
        >>> display_name("System.Collections.Generic.Dictionary`2[[System.String],[System.Int64]]")
        'Dictionary<string, long>'
    """
    parsed = parse_generic_name(key)
    base = parsed.base_name
    if not parsed.args:
        return CLR_SOURCE_TYPES.get(base) or short_name(base)
    if base == CLR_NULLABLE:
        return display_name(parsed.args[0])
    if base in CLR_LIST_TYPES:
        return f"List<{display_name(parsed.args[0])}>"
    if base in CLR_DICTIONARY_TYPES and len(parsed.args) == 2:
        return f"Dictionary<string, {display_name(parsed.args[1])}>"
    return render_generic_name(base, parsed.args)


def placeholder_full_name(key: str) -> str:
    """Open generic form of a key: ``PageList<T>`` or ``Pair<T1,T2>``."""
    parsed = parse_generic_name(key)
    names = placeholder_names(parsed.parameter_count)
    if not names:
        return short_name(parsed.base_name)
    return f"{short_name(parsed.base_name)}<{','.join(names)}>"


def extract_type_names(key: str) -> list[str]:
    """Outer container name followed by the source descriptors of its arguments."""
    parsed = parse_generic_name(key)
    return [short_name(parsed.base_name), *(display_name(arg) for arg in parsed.args)]


def iter_referenced_keys(key: str) -> Iterator[str]:
    """Yield a key and, recursively, every generic argument key inside it."""
    key = normalize_key(key)
    yield key
    for arg in parse_generic_name(key).args:
        yield from iter_referenced_keys(arg)


def is_placeholder(name: str) -> bool:
    return _PLACEHOLDER.fullmatch(name) is not None


def materialize(
    type_text: str,
    ref_name: str | None,
    render_arg: Callable[[str], str] | None = None,
) -> str:
    """Replace placeholder lists in ``type_text`` with the arguments of ``ref_name``.

    ``PageList<T> | null`` materialized against
    ``PageList`1[[NS.ItemDto]]`` becomes ``PageList<ItemDto> | null``.
    The first name extracted from the key is the container itself and is
    skipped; placeholders are paired with real arguments in encounter order.

    Arguments are source descriptors; ``render_arg`` translates each one
    into target syntax when ``type_text`` is already rendered.
    """
    if not type_text or not ref_name or ARITY_MARKER not in normalize_key(ref_name):
        return type_text
    real_types = extract_type_names(ref_name)[1:]
    if not real_types:
        return type_text
    if render_arg is not None:
        real_types = [render_arg(name) for name in real_types]

    def _replace(match: re.Match[str]) -> str:
        placeholders = [token.strip() for token in match.group(1).split(",")]
        mapping = dict(zip(placeholders, real_types))
        return "<" + ",".join(mapping.get(token, token) for token in placeholders) + ">"

    return _PLACEHOLDER_LIST.sub(_replace, type_text)
