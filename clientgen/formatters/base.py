"""Shared behaviour of the target type formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Mapping

from ..schema.types import GenFile, PropertyInfo, TypeMeta, TypeTable
from ..shared.generic_names import (
    ARITY_MARKER,
    display_name,
    is_placeholder,
    iter_referenced_keys,
    materialize,
    parse_generic_name,
    placeholder_names,
    short_name,
)
from ..templating import GeneratorContext


def strip_generic_arity(name: str) -> str:
    """``PageList`1[[X]]`` -> ``PageList``."""
    tick = name.find(ARITY_MARKER)
    return name[:tick] if tick > 0 else name


def is_list_type(text: str) -> bool:
    return text.startswith("List<") or text.endswith("[]")


def is_dictionary_type(text: str) -> bool:
    return text.startswith("Dictionary<")


def split_arguments(inner: str) -> list[str]:
    """Split a generic argument list on top-level commas."""
    parts: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(inner):
        if char in "<[":
            depth += 1
        elif char in ">]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(inner[start:index].strip())
            start = index + 1
    parts.append(inner[start:].strip())
    return [part for part in parts if part]


def generic_arguments(text: str) -> list[str]:
    """Arguments between the outermost angle brackets, or an empty list."""
    lt = text.find("<")
    gt = text.rfind(">")
    if lt <= 0 or gt <= lt:
        return []
    return split_arguments(text[lt + 1:gt])


def extract_generic_argument(text: str) -> str | None:
    """First generic argument (``List<X>`` -> ``X``); ``X[]`` -> ``X``."""
    args = generic_arguments(text)
    if args:
        return args[0]
    if text.endswith("[]"):
        return text[:-2]
    return None


def extract_dictionary_value_type(text: str) -> str | None:
    if not is_dictionary_type(text):
        return None
    args = generic_arguments(text)
    return args[1] if len(args) == 2 else None


class LanguageFormatter(ABC):
    """Formats source descriptors and renders model declarations for one target.

    Instances are per generation run: the type table is only used for
    model rendering (import routing), never by :meth:`format_type`.
    """

    name: ClassVar[str]
    untyped: ClassVar[str]
    primitive_map: ClassVar[Mapping[str, str]]

    def __init__(self, types: TypeTable | None = None, context: GeneratorContext | None = None) -> None:
        self.types = types if types is not None else TypeTable()
        self.context = context or GeneratorContext()

    @abstractmethod
    def normalize(self, text: str) -> str:
        """Translate a source descriptor, without nullability, into target syntax."""

    @abstractmethod
    def format_type(
        self,
        source_type: str,
        is_enum: bool = False,
        is_list: bool = False,
        is_nullable: bool = False,
    ) -> str:
        """Translate a source descriptor into target syntax."""

    @abstractmethod
    def generate_model(self, meta: TypeMeta) -> str:
        """Render the declaration of one model class or enum."""

    @abstractmethod
    def model_path(self, meta: TypeMeta) -> tuple[str, str]:
        """Directory and file name of the model declaration."""

    def model_file(self, meta: TypeMeta) -> GenFile:
        directory, file_name = self.model_path(meta)
        return GenFile(directory, file_name, self.generate_model(meta))

    def is_primitive(self, source_type: str) -> bool:
        base = strip_generic_arity(source_type.strip())
        return base in self.primitive_map or is_placeholder(base)

    @staticmethod
    def generic_map(meta: TypeMeta) -> dict[str, str]:
        """Source descriptor of each generic argument -> its placeholder."""
        names = placeholder_names(len(meta.generic_params))
        return {
            display_name(param.schema_key): placeholder
            for param, placeholder in zip(meta.generic_params, names)
        }

    @staticmethod
    def declaration_name(meta: TypeMeta) -> str:
        names = placeholder_names(len(meta.generic_params))
        if not names:
            return meta.name
        return f"{meta.name}<{','.join(names)}>"

    @staticmethod
    def is_self_reference(meta: TypeMeta, prop: PropertyInfo) -> bool:
        if not prop.navigation_name or prop.is_enum:
            return False
        return short_name(parse_generic_name(prop.navigation_name).base_name) == meta.name

    def property_type(
        self,
        meta: TypeMeta,
        prop: PropertyInfo,
        mapping: Mapping[str, str],
    ) -> tuple[str, bool]:
        """Source descriptor of a property and whether a placeholder replaced it.

        Generic references are materialized first; inside a generic model a
        type equal to one of the model's arguments becomes that argument's
        placeholder, whether it is the whole type (``List<ItemDto>`` for
        ``List`1[[ItemDto]]``), a list element or a dictionary value. Self
        references are left untouched.
        """
        text = materialize(prop.source_type, prop.navigation_name)
        if not mapping or self.is_self_reference(meta, prop):
            return text, False
        if text in mapping:
            return mapping[text], True
        if is_dictionary_type(text):
            value = extract_dictionary_value_type(text)
            if value in mapping:
                return f"Dictionary<string, {mapping[value]}>", True
            return text, False
        if is_list_type(text):
            element = extract_generic_argument(text)
            if element in mapping:
                return f"List<{mapping[element]}>", True
        return text, False

    def model_references(self, meta: TypeMeta) -> list[TypeMeta]:
        """Types a model declaration depends on, deduplicated by full name.

        Self references, placeholder-substituted properties and references
        missing from the type table are skipped.
        """
        mapping = self.generic_map(meta)
        keys: list[str] = []
        if meta.alias_type and meta.reference_name:
            keys.extend(iter_referenced_keys(meta.reference_name))
        for prop in meta.properties:
            if not prop.navigation_name or self.is_self_reference(meta, prop):
                continue
            _, substituted = self.property_type(meta, prop, mapping)
            if not substituted:
                keys.extend(iter_referenced_keys(prop.navigation_name))

        seen: dict[str, TypeMeta] = {}
        for key in keys:
            target = self.types.get(key)
            if target is None or target.full_name == meta.full_name:
                continue
            seen.setdefault(target.full_name, target)
        return list(seen.values())

    def alias_source(self, meta: TypeMeta) -> str | None:
        """Materialized descriptor of a non-object model, if it is one."""
        if meta.properties or not meta.alias_type:
            return None
        return materialize(meta.alias_type, meta.reference_name)
