"""C# formatting and model declarations."""

from __future__ import annotations

from typing import Final

from ..schema.types import FILE_TYPE, TypeMeta, TypeTable
from ..shared.naming import CSHARP_KEYWORDS, sanitize_identifier, to_pascal_case
from ..templating import GeneratorContext
from .base import (
    LanguageFormatter,
    extract_dictionary_value_type,
    extract_generic_argument,
    generic_arguments,
    is_dictionary_type,
    is_list_type,
    strip_generic_arity,
)

CSHARP_PRIMITIVES: Final[dict[str, str]] = {
    "string": "string",
    "char": "char",
    "int": "int",
    "long": "long",
    "short": "short",
    "double": "double",
    "float": "float",
    "decimal": "decimal",
    "bool": "bool",
    "Guid": "Guid",
    "DateTime": "DateTime",
    "DateTimeOffset": "DateTimeOffset",
    "DateOnly": "DateOnly",
    "TimeOnly": "TimeOnly",
    "TimeSpan": "TimeSpan",
    "object": "object",
    FILE_TYPE: "Stream",
}

MODELS_DIR: Final[str] = "Models"
ENUMS_BUCKET: Final[str] = "Enums"


class CSharpFormatter(LanguageFormatter):
    """Formatter for the object-language client target."""

    name = "csharp"
    untyped = "object"
    primitive_map = CSHARP_PRIMITIVES

    def __init__(
        self,
        types: TypeTable | None = None,
        context: GeneratorContext | None = None,
        *,
        project_name: str = "ApiClient",
    ) -> None:
        super().__init__(types, context)
        self.project_name = project_name

    def normalize(self, text: str) -> str:
        text = text.strip()
        if not text:
            return self.untyped
        if text.endswith("[]"):
            return f"List<{self.normalize(text[:-2])}>"
        if text.startswith("List<"):
            return f"List<{self.normalize(extract_generic_argument(text) or self.untyped)}>"
        if is_dictionary_type(text):
            value = extract_dictionary_value_type(text) or self.untyped
            return f"Dictionary<string, {self.normalize(value)}>"

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
        cs_type = self.normalize(source_type)
        if is_list and not cs_type.startswith("List<"):
            cs_type = f"List<{cs_type}>"
        if is_nullable and not cs_type.endswith("?"):
            cs_type += "?"
        return cs_type

    def namespace_for(self, meta: TypeMeta) -> str:
        if meta.is_enum:
            return f"{self.project_name}.{MODELS_DIR}.{ENUMS_BUCKET}"
        if meta.bucket:
            return f"{self.project_name}.{MODELS_DIR}.{to_pascal_case(meta.bucket)}"
        return f"{self.project_name}.{MODELS_DIR}"

    def model_path(self, meta: TypeMeta) -> tuple[str, str]:
        if meta.is_enum:
            directory = f"{MODELS_DIR}/{ENUMS_BUCKET}"
        elif meta.bucket:
            directory = f"{MODELS_DIR}/{to_pascal_case(meta.bucket)}"
        else:
            directory = MODELS_DIR
        return directory, f"{meta.name}.cs"

    def generate_model(self, meta: TypeMeta) -> str:
        if meta.is_enum:
            members = [
                {
                    "name": sanitize_identifier(member.name, CSHARP_KEYWORDS),
                    "value": member.enum_value if isinstance(member.enum_value, int) else None,
                    "description": member.comment_summary or member.name,
                }
                for member in meta.properties
            ]
            return self.context.render(
                "csharp/enum.cs.j2",
                meta=meta,
                model_namespace=self.namespace_for(meta),
                members=members,
            )

        mapping = self.generic_map(meta)
        properties = []
        for prop in meta.properties:
            source_type, _ = self.property_type(meta, prop, mapping)
            nullable = prop.renders_nullable
            is_list = prop.is_list and is_list_type(source_type)
            cs_type = self.format_type(source_type, prop.is_enum, is_list, nullable)
            if is_list:
                default = " = [];"
            elif not nullable and not prop.is_enum:
                default = " = default!;"
            else:
                default = ""
            properties.append({
                "name": sanitize_identifier(to_pascal_case(prop.name) or prop.name, CSHARP_KEYWORDS),
                "type": cs_type,
                "default": default,
                "comment": prop.comment_summary,
            })

        base_type = None
        alias_source = self.alias_source(meta)
        if alias_source and (meta.is_list or is_dictionary_type(alias_source) or meta.reference_name):
            base_type = self.format_type(alias_source, is_list=meta.is_list)
        return self.context.render(
            "csharp/class.cs.j2",
            meta=meta,
            model_namespace=self.namespace_for(meta),
            declaration=self.declaration_name(meta),
            base_type=base_type,
            properties=properties,
        )
