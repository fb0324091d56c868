"""Pieces shared by the two TypeScript client variants."""

from __future__ import annotations

from typing import Any, Final

from ..formatters.typescript import TypeScriptFormatter, quote_literal
from ..schema.types import GenFile, RequestFunction
from .base import ClientEmitter, ServiceGroup
from .function_builder import FunctionBuildResult, TypeScriptSyntax
from .imports import referenced_types

SERVICES_DIR: Final[str] = "services"
ENUM_TO_STRING_FILE: Final[str] = "enum-to-string.ts"


class TypeScriptClientEmitter(ClientEmitter):
    """Base for the reactive and promise variants."""

    formatter_class = TypeScriptFormatter
    syntax = TypeScriptSyntax()
    formatter: TypeScriptFormatter

    def service_imports(self, group: ServiceGroup) -> list[str]:
        return [
            self.formatter.import_line(SERVICES_DIR, meta)
            for meta in referenced_types(group.functions, self.types)
        ]

    def response_type(self, built: FunctionBuildResult) -> str:
        return built.response_type or self.formatter.untyped

    def call(self, helper: str, response_type: str | None, function: RequestFunction, built: FunctionBuildResult) -> str:
        generics = f"<{response_type}>" if response_type else ""
        return f"this.{helper}{generics}('{function.method}', _url{built.data_arg_suffix})"

    def function_data(self, built: FunctionBuildResult, return_type: str, call: str) -> dict[str, Any]:
        return {
            "comment": built.comment,
            "name": built.name,
            "signature": built.params_signature,
            "return_type": return_type,
            "path": built.path,
            "call": call,
        }

    def enum_entries(self) -> list[dict[str, Any]]:
        """Enum names with their member values and display labels."""
        return [
            {
                "name": meta.name,
                "members": [
                    {
                        "value": quote_literal(member.enum_value),
                        "label": quote_literal(member.comment_summary or member.name),
                    }
                    for member in meta.properties
                ],
            }
            for meta in self.enums()
        ]

    def enum_to_string_file(self) -> GenFile:
        return self._file("", ENUM_TO_STRING_FILE, "typescript/enum-to-string.ts.j2", enums=self.enum_entries())
