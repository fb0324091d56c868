"""Common driver for the client variants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping

from ..formatters.base import LanguageFormatter
from ..schema.types import GenFile, OverwritePolicy, RequestFunction, TypeMeta, TypeTable
from ..shared.errors import SchemaError
from ..shared.log import get_logger
from ..shared.naming import to_hyphen_case, to_pascal_case
from ..templating import GeneratorContext
from .function_builder import FunctionBuildResult, TargetSyntax, build_function_common

logger = get_logger("emitters")

UNTAGGED: str = "Untagged"

# Failures isolated to a single model or function
RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (
    SchemaError,
    KeyError,
    TypeError,
    ValueError,
    AttributeError,
)


class ServiceGroup:
    """Functions sharing one tag, rendered into one service."""

    __slots__ = ("tag", "description", "functions")

    def __init__(self, tag: str, description: str | None, functions: list[RequestFunction]) -> None:
        self.tag = tag
        self.description = description or tag
        self.functions = functions

    @property
    def class_name(self) -> str:
        return to_pascal_case(self.tag) or UNTAGGED

    @property
    def file_stem(self) -> str:
        return to_hyphen_case(self.tag) or to_hyphen_case(UNTAGGED)


class ClientEmitter(ABC):
    """Renders models and per-tag services for one variant."""

    variant: ClassVar[str]
    formatter_class: ClassVar[type[LanguageFormatter]]
    syntax: ClassVar[TargetSyntax]
    include_ext_options: ClassVar[bool] = False

    def __init__(
        self,
        types: TypeTable,
        functions: list[RequestFunction],
        *,
        formatter: LanguageFormatter,
        context: GeneratorContext,
        project_name: str,
        tag_descriptions: Mapping[str, str] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        self.types = types
        self.functions = functions
        self.formatter = formatter
        self.context = context
        self.project_name = project_name
        self.tag_descriptions = dict(tag_descriptions or {})
        self.warnings = warnings if warnings is not None else []

    @classmethod
    def create_formatter(
        cls,
        types: TypeTable,
        context: GeneratorContext,
        project_name: str,
    ) -> LanguageFormatter:
        return cls.formatter_class(types, context)

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def groups(self) -> list[ServiceGroup]:
        """Functions bucketed by tag, in first-seen order."""
        buckets: dict[str, list[RequestFunction]] = {}
        for function in self.functions:
            buckets.setdefault(function.tag or UNTAGGED, []).append(function)
        return [
            ServiceGroup(tag, self.tag_descriptions.get(tag), functions)
            for tag, functions in buckets.items()
        ]

    def model_files(self) -> list[GenFile]:
        files: list[GenFile] = []
        for meta in self.types:
            try:
                files.append(self.formatter.model_file(meta))
            except RECOVERABLE_ERRORS as e:
                self._warn(f"Skipped model '{meta.schema_key}': {e}")
        return files

    @abstractmethod
    def render_function(self, function: RequestFunction, built: FunctionBuildResult) -> dict[str, Any]:
        """Template data for one function body."""

    def build_functions(self, group: ServiceGroup) -> list[dict[str, Any]]:
        rendered: list[dict[str, Any]] = []
        for function in group.functions:
            try:
                built = build_function_common(
                    function,
                    self.syntax,
                    include_ext_options=self.include_ext_options,
                    render_type=self.formatter.normalize,
                )
                for message in built.warnings:
                    self._warn(f"{function.method.upper()} {function.path}: {message}")
                rendered.append(self.render_function(function, built))
            except RECOVERABLE_ERRORS as e:
                self._warn(f"Skipped function '{function.name}': {e}")
        return rendered

    @abstractmethod
    def service_files(self, group: ServiceGroup) -> list[GenFile]:
        """Files rendered for one tag."""

    def support_files(self, groups: list[ServiceGroup]) -> list[GenFile]:
        """Runtime and aggregation files shared by all tags."""
        return []

    def enums(self) -> list[TypeMeta]:
        return [meta for meta in self.types if meta.is_enum]

    def emit(self) -> list[GenFile]:
        groups = self.groups()
        files = self.model_files()
        for group in groups:
            files.extend(self.service_files(group))
        files.extend(self.support_files(groups))
        logger.info(
            "%s: %d files (%d services, %d models)",
            self.variant,
            len(files),
            len(groups),
            len(self.types),
        )
        return files

    def _file(
        self,
        directory: str,
        file_name: str,
        template: str,
        policy: OverwritePolicy = OverwritePolicy.ALWAYS,
        **context: Any,
    ) -> GenFile:
        return GenFile(directory, file_name, self.context.render(template, **context), policy)
