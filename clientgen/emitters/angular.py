"""Reactive-stream (Angular HttpClient) client variant."""

from __future__ import annotations

from typing import Any, Final

from ..schema.types import GenFile, OverwritePolicy, RequestFunction
from ..shared.naming import to_hyphen_case, to_pascal_case
from .base import ServiceGroup
from .function_builder import FunctionBuildResult
from .typescript import SERVICES_DIR, TypeScriptClientEmitter

PIPE_DIR: Final[str] = "pipe"
ENUM_PIPE_FILE: Final[str] = "enum-text.pipe.ts"


class AngularEmitter(TypeScriptClientEmitter):
    """Generated ``<Tag>BaseService`` classes plus hand-editable ``<Tag>Service`` subclasses."""

    variant = "angular"
    include_ext_options = False

    def render_function(self, function: RequestFunction, built: FunctionBuildResult) -> dict[str, Any]:
        if function.downloads_file:
            call = self.call("downloadFile", None, function, built)
            return self.function_data(built, "Observable<Blob>", call)
        response_type = self.response_type(built)
        call = self.call("request", response_type, function, built)
        return self.function_data(built, f"Observable<{response_type}>", call)

    def service_files(self, group: ServiceGroup) -> list[GenFile]:
        functions = self.build_functions(group)
        return [
            self._file(
                SERVICES_DIR,
                f"{group.file_stem}-base.service.ts",
                "angular/tag-base.service.ts.j2",
                group=group,
                imports=self.service_imports(group),
                functions=functions,
            ),
            self._file(
                SERVICES_DIR,
                f"{group.file_stem}.service.ts",
                "angular/tag.service.ts.j2",
                OverwritePolicy.WRITE_ONCE,
                group=group,
            ),
        ]

    def support_files(self, groups: list[ServiceGroup]) -> list[GenFile]:
        return [
            self._file(SERVICES_DIR, "base.service.ts", "angular/base.service.ts.j2", OverwritePolicy.WRITE_ONCE),
            self._file(
                "",
                f"{to_hyphen_case(self.project_name)}-client.ts",
                "angular/client.ts.j2",
                groups=groups,
                client_name=to_pascal_case(self.project_name),
            ),
            self.enum_to_string_file(),
            self._file(PIPE_DIR, ENUM_PIPE_FILE, "angular/enum-text.pipe.ts.j2", enums=self.enum_entries()),
        ]
