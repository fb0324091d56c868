"""Object-language (C# HttpClient) client variant."""

from __future__ import annotations

from typing import Any, Final

from ..formatters.csharp import CSharpFormatter
from ..formatters.base import LanguageFormatter
from ..schema.types import GenFile, OverwritePolicy, RequestFunction, TypeTable
from ..shared.naming import CSHARP_KEYWORDS, sanitize_identifier, to_pascal_case
from ..templating import GeneratorContext
from .base import ClientEmitter, ServiceGroup
from .function_builder import CSharpSyntax, FunctionBuildResult

SERVICES_DIR: Final[str] = "Services"
TARGET_FRAMEWORK: Final[str] = "net8.0"


def project_namespace(project_name: str) -> str:
    """Dotted namespace from a project name; each segment PascalCased."""
    segments = [to_pascal_case(part) for part in project_name.split(".")]
    return ".".join(sanitize_identifier(s, CSHARP_KEYWORDS) for s in segments if s) or "ApiClient"


class CSharpEmitter(ClientEmitter):
    """``<Tag>RestService`` classes, an aggregating client and project files."""

    variant = "csharp"
    formatter_class = CSharpFormatter
    syntax = CSharpSyntax()
    formatter: CSharpFormatter

    @classmethod
    def create_formatter(
        cls,
        types: TypeTable,
        context: GeneratorContext,
        project_name: str,
    ) -> LanguageFormatter:
        return CSharpFormatter(types, context, project_name=project_namespace(project_name))

    @property
    def namespace(self) -> str:
        return project_namespace(self.project_name)

    def render_function(self, function: RequestFunction, built: FunctionBuildResult) -> dict[str, Any]:
        method = function.method.capitalize()
        response_type = built.response_type or self.formatter.untyped
        if function.downloads_file:
            return_type = "Task<Stream?>"
            call = f"DownloadFileAsync(HttpMethod.{method}, url{built.data_arg_suffix})"
        else:
            return_type = f"Task<{response_type.rstrip('?')}?>"
            if function.uploads_file:
                stream = built.file_param or "data"
                call = f"UploadFileAsync<{response_type}>(url, new StreamContent({stream}))"
            else:
                call = f"{method}JsonAsync<{response_type}>(url{built.data_arg_suffix})"
        return {
            "comment": built.comment,
            "name": built.name,
            "signature": built.params_signature,
            "return_type": return_type,
            "path": built.path,
            "call": call,
        }

    def service_files(self, group: ServiceGroup) -> list[GenFile]:
        return [
            self._file(
                SERVICES_DIR,
                f"{group.class_name}RestService.cs",
                "csharp/rest-service.cs.j2",
                root_namespace=self.namespace,
                group=group,
                functions=self.build_functions(group),
            ),
        ]

    def model_namespaces(self) -> list[str]:
        return sorted({self.formatter.namespace_for(meta) for meta in self.types})

    def support_files(self, groups: list[ServiceGroup]) -> list[GenFile]:
        client_name = self.namespace.rsplit(".", 1)[-1]
        common = {"root_namespace": self.namespace, "client_name": client_name, "groups": groups}
        return [
            self._file(SERVICES_DIR, "BaseService.cs", "csharp/base-service.cs.j2", **common),
            self._file("", f"{client_name}Client.cs", "csharp/client.cs.j2", **common),
            self._file("", "Extension.cs", "csharp/extension.cs.j2", OverwritePolicy.WRITE_ONCE, **common),
            self._file(
                "",
                "GlobalUsings.cs",
                "csharp/global-usings.cs.j2",
                OverwritePolicy.MERGE,
                model_namespaces=self.model_namespaces(),
                **common,
            ),
            self._file(
                "",
                f"{client_name}.csproj",
                "csharp/project.csproj.j2",
                OverwritePolicy.WRITE_ONCE,
                target_framework=TARGET_FRAMEWORK,
                **common,
            ),
        ]
