"""Promise-based (axios) client variant."""

from __future__ import annotations

from typing import Any

from ..schema.types import GenFile, OverwritePolicy, RequestFunction
from .base import ServiceGroup
from .function_builder import FunctionBuildResult
from .typescript import SERVICES_DIR, TypeScriptClientEmitter


class AxiosEmitter(TypeScriptClientEmitter):
    """One ``<Tag>Service`` per tag; every function takes ``extOptions``."""

    variant = "axios"
    include_ext_options = True

    def render_function(self, function: RequestFunction, built: FunctionBuildResult) -> dict[str, Any]:
        if function.downloads_file:
            call = self.call("downloadFile", None, function, built)
            return self.function_data(built, "Promise<Blob>", call)
        response_type = self.response_type(built)
        call = self.call("request", response_type, function, built)
        return self.function_data(built, f"Promise<{response_type}>", call)

    def service_files(self, group: ServiceGroup) -> list[GenFile]:
        return [
            self._file(
                SERVICES_DIR,
                f"{group.file_stem}.service.ts",
                "axios/service.ts.j2",
                group=group,
                imports=self.service_imports(group),
                functions=self.build_functions(group),
            ),
        ]

    def support_files(self, groups: list[ServiceGroup]) -> list[GenFile]:
        return [
            self._file(SERVICES_DIR, "base.service.ts", "axios/base.service.ts.j2", OverwritePolicy.WRITE_ONCE),
            self.enum_to_string_file(),
        ]
