"""TypeScript formatting and model declarations."""

from __future__ import annotations

import posixpath
import re
from typing import Final

from ..schema.types import FILE_TYPE, TypeMeta
from ..shared.naming import to_hyphen_case
from .base import (
    LanguageFormatter,
    extract_dictionary_value_type,
    extract_generic_argument,
    generic_arguments,
    is_dictionary_type,
    is_list_type,
    strip_generic_arity,
)

TS_PRIMITIVES: Final[dict[str, str]] = {
    "string": "string",
    "char": "string",
    "int": "number",
    "long": "number",
    "short": "number",
    "double": "number",
    "float": "number",
    "decimal": "number",
    "bool": "boolean",
    "Guid": "string",
    "DateTime": "string",
    "DateTimeOffset": "string",
    "DateOnly": "string",
    "TimeOnly": "string",
    "TimeSpan": "string",
    "object": "any",
    FILE_TYPE: "FormData",
}

MODELS_DIR: Final[str] = "models"
ENUM_DIR: Final[str] = "models/enum"

# Models whose fields may all be omitted by the caller
PARTIAL_MODEL_SUFFIXES: Final[tuple[str, ...]] = ("filterdto", "updatedto")

_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def module_path(directory: str, file_name: str) -> str:
    """Import specifier of a ``.ts`` file, without extension."""
    return posixpath.join(directory, file_name.removesuffix(".ts"))


def relative_import(from_directory: str, target: str) -> str:
    """Relative import specifier from one output directory to a module."""
    path = posixpath.relpath(target, from_directory or ".")
    return path if path.startswith(".") else f"./{path}"


def is_partial_model(meta: TypeMeta) -> bool:
    """Filter and update DTOs render every property optional and nullable."""
    return meta.name.lower().endswith(PARTIAL_MODEL_SUFFIXES)


def quote_literal(value: int | str | None) -> str:
    if isinstance(value, str):
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    return str(value if value is not None else 0)


class TypeScriptFormatter(LanguageFormatter):
    """Formatter for the structurally typed frontend targets."""

    name = "typescript"
    untyped = "any"
    primitive_map = TS_PRIMITIVES

    def normalize(self, text: str) -> str:
        """Map a source descriptor (without nullability) onto TypeScript syntax."""
        text = text.strip()
        if not text:
            return self.untyped
        if text.endswith("[]"):
            return self.normalize(text[:-2]) + "[]"
        if text.startswith("List<"):
            return self.normalize(extract_generic_argument(text) or self.untyped) + "[]"
        if is_dictionary_type(text):
            value = extract_dictionary_value_type(text) or self.untyped
            return f"Record<string, {self.normalize(value)}>"

        cleaned = strip_generic_arity(text)
        args = generic_arguments(cleaned)
        if args:
            head = cleaned[:cleaned.find("<")].rsplit(".", 1)[-1]
            return f"{head}<{','.join(self.normalize(arg) for arg in args)}>"
        cleaned = cleaned.rsplit(".", 1)[-1]
        return self.primitive_map.get(cleaned, cleaned)

    def format_type(
        self,
        source_type: str,
        is_enum: bool = False,
        is_list: bool = False,
        is_nullable: bool = False,
    ) -> str:
        if not source_type or not source_type.strip():
            return self.untyped
        ts_type = self.normalize(source_type)
        if is_enum:
            ts_type = strip_generic_arity(ts_type)
        if is_list and not ts_type.endswith("[]"):
            ts_type += "[]"
        if is_nullable and "| null" not in ts_type:
            ts_type += " | null"
        return ts_type

    def model_path(self, meta: TypeMeta) -> tuple[str, str]:
        if meta.is_enum:
            directory = ENUM_DIR
        elif meta.bucket:
            directory = posixpath.join(MODELS_DIR, to_hyphen_case(meta.bucket))
        else:
            directory = MODELS_DIR
        return directory, f"{to_hyphen_case(meta.name)}.model.ts"

    def import_line(self, from_directory: str, meta: TypeMeta) -> str:
        target = module_path(*self.model_path(meta))
        return f"import {{ {meta.name} }} from '{relative_import(from_directory, target)}';"

    def generate_model(self, meta: TypeMeta) -> str:
        if meta.is_enum:
            members = [
                {
                    "name": member.name if _IDENTIFIER.fullmatch(member.name) else quote_literal(member.name),
                    "value": quote_literal(member.enum_value),
                    "comment": member.comment_summary or member.name,
                }
                for member in meta.properties
            ]
            return self.context.render("typescript/enum.ts.j2", meta=meta, members=members)

        directory, _ = self.model_path(meta)
        imports = [self.import_line(directory, ref) for ref in self.model_references(meta)]
        mapping = self.generic_map(meta)
        partial = is_partial_model(meta)
        properties = []
        for prop in meta.properties:
            source_type, _ = self.property_type(meta, prop, mapping)
            optional = partial or prop.renders_nullable
            is_list = prop.is_list and is_list_type(source_type)
            name = prop.name if _IDENTIFIER.fullmatch(prop.name) else f"'{prop.name}'"
            properties.append({
                "name": name,
                "optional": optional,
                "type": self.format_type(source_type, prop.is_enum, is_list, optional),
                "comment": prop.comment_summary or prop.name,
            })
        alias_source = self.alias_source(meta)
        alias = self.format_type(alias_source, is_list=meta.is_list) if alias_source else None
        return self.context.render(
            "typescript/interface.ts.j2",
            meta=meta,
            imports=imports,
            declaration=self.declaration_name(meta),
            properties=properties,
            alias=alias,
        )
