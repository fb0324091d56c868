"""
Shared function builder.

Turns one RequestFunction into the pieces every client variant renders:
call-site name, parameter signature, doc comment, URL template and the
trailing data arguments of the runtime call. Variants only differ in the
TargetSyntax they pass in.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Final

from ..schema.types import FunctionParam, RequestFunction
from ..shared.errors import PathParameterError
from ..shared.generic_names import materialize
from ..shared.naming import (
    CSHARP_KEYWORDS,
    TS_KEYWORDS,
    sanitize_identifier,
    to_camel_case,
    to_pascal_case,
)

_PATH_TOKEN: Final[re.Pattern[str]] = re.compile(r"\{([^{}]+)\}")
_NO_KEYWORDS: Final[frozenset[str]] = frozenset()


@dataclass(frozen=True, slots=True)
class FunctionBuildResult:
    """Rendered pieces of one client function."""

    name: str
    params_signature: str
    comment: tuple[str, ...]
    data_arg_suffix: str
    path: str
    request_type: str = ""
    response_type: str = ""
    file_param: str | None = None
    warnings: tuple[str, ...] = ()


class TargetSyntax(ABC):
    """Syntax differences between the structural and the object targets."""

    keywords: ClassVar[frozenset[str]] = _NO_KEYWORDS
    no_data: ClassVar[str] = "null"
    ext_options_param: ClassVar[str | None] = None
    ext_options_arg: ClassVar[str | None] = None

    @abstractmethod
    def function_name(self, raw: str) -> str:
        """Call-site name of an operation."""

    def identifier(self, name: str) -> str:
        return sanitize_identifier(name, self.keywords)

    @abstractmethod
    def param(self, name: str, type_text: str, required: bool) -> str:
        """One entry of the parameter signature."""

    @abstractmethod
    def data_param(self, type_text: str) -> str:
        """Signature entry of the request payload."""

    @abstractmethod
    def interpolate(self, name: str) -> str:
        """Expression splicing a variable into the URL template."""

    def query_value(self, name: str, required: bool) -> str:
        return self.interpolate(name)

    def literal_token(self, token: str) -> str:
        return "{" + token + "}"

    @abstractmethod
    def comment(self, summary: str, params: list[tuple[str, str]]) -> tuple[str, ...]:
        """Doc comment lines above the function."""


class TypeScriptSyntax(TargetSyntax):
    keywords = TS_KEYWORDS
    ext_options_param = "extOptions?: ExtOptions"
    ext_options_arg = "extOptions"

    def function_name(self, raw: str) -> str:
        return sanitize_identifier(to_camel_case(raw) or raw, _NO_KEYWORDS)

    def param(self, name: str, type_text: str, required: bool) -> str:
        if required or type_text.endswith("| null"):
            return f"{name}: {type_text}"
        return f"{name}: {type_text} | null"

    def data_param(self, type_text: str) -> str:
        return f"data: {type_text}"

    def interpolate(self, name: str) -> str:
        return "${" + name + "}"

    def query_value(self, name: str, required: bool) -> str:
        if required:
            return self.interpolate(name)
        return "${" + name + " ?? ''}"

    def comment(self, summary: str, params: list[tuple[str, str]]) -> tuple[str, ...]:
        lines = ["/**", f" * {summary}"]
        lines.extend(f" * @param {name} {text}" for name, text in params)
        lines.append(" */")
        return tuple(lines)


class CSharpSyntax(TargetSyntax):
    keywords = CSHARP_KEYWORDS

    def function_name(self, raw: str) -> str:
        name = to_pascal_case(raw) or raw
        return sanitize_identifier(f"{name}Async", _NO_KEYWORDS)

    def param(self, name: str, type_text: str, required: bool) -> str:
        if required or type_text.endswith("?"):
            return f"{type_text} {name}"
        return f"{type_text}? {name}"

    def data_param(self, type_text: str) -> str:
        return f"{type_text} data"

    def interpolate(self, name: str) -> str:
        return "{" + name + "}"

    def literal_token(self, token: str) -> str:
        return "{{" + token + "}}"

    def comment(self, summary: str, params: list[tuple[str, str]]) -> tuple[str, ...]:
        lines = ["/// <summary>", f"/// {summary}", "/// </summary>"]
        lines.extend(f'/// <param name="{name}">{text}</param>' for name, text in params)
        lines.append("/// <returns></returns>")
        return tuple(lines)


def strip_tag_prefix(name: str, tag: str | None) -> str:
    if tag and name.startswith(f"{tag}_") and len(name) > len(tag) + 1:
        return name[len(tag) + 1:]
    return name


def materialized_type(param: FunctionParam, render_type: Callable[[str], str] | None = None) -> str:
    return materialize(param.type_text, param.ref_name, render_type)


@dataclass(slots=True)
class _PathBuilder:
    syntax: TargetSyntax
    path: str
    path_params: dict[str, str]
    warnings: list[str] = field(default_factory=list)

    def resolve(self, token: str) -> str:
        """URL expression of a path placeholder.

        Raises:
            PathParameterError: If no path parameter declares ``token``.
        """
        if token not in self.path_params:
            raise PathParameterError(self.path, token)
        return self.syntax.interpolate(self.path_params[token])

    def _replace(self, match: re.Match[str]) -> str:
        token = match.group(1)
        try:
            return self.resolve(token)
        except PathParameterError as e:
            self.warnings.append(str(e))
            return self.syntax.literal_token(token)

    def build(self) -> str:
        return _PATH_TOKEN.sub(self._replace, self.path)


def build_function_common(
    function: RequestFunction,
    syntax: TargetSyntax,
    *,
    include_ext_options: bool = False,
    render_type: Callable[[str], str] | None = None,
) -> FunctionBuildResult:
    """Build the variant-independent pieces of one client function.

    Generic placeholders in request, response and parameter types are
    materialized against their raw reference names before anything is
    rendered. A ``{token}`` without a matching path parameter stays in
    the path literally and is reported in ``warnings``.

    ``render_type`` translates the source descriptors substituted for
    placeholders into target syntax (``List<ItemDto>`` -> ``ItemDto[]``).
    """
    name = syntax.function_name(strip_tag_prefix(function.name, function.tag))
    request_type = materialize(function.request_type, function.request_ref_name, render_type)
    response_type = materialize(function.response_type, function.response_ref_name, render_type)

    identifiers = {param.name: syntax.identifier(param.name) for param in function.params}

    # Stable sort: required parameters first
    ordered = sorted(function.params, key=lambda p: not p.is_required)
    signature = [
        syntax.param(identifiers[p.name], materialized_type(p, render_type), p.is_required)
        for p in ordered
    ]
    docs = [
        (identifiers[p.name], p.description or materialized_type(p, render_type))
        for p in function.params
    ]

    data_arg_suffix = ""
    if request_type:
        signature.append(syntax.data_param(request_type))
        docs.append(("data", request_type))
        data_arg_suffix = ", data"

    path_builder = _PathBuilder(
        syntax,
        function.path,
        {p.name: identifiers[p.name] for p in function.params if p.in_path},
    )
    path = path_builder.build()

    query = [
        f"{p.name}={syntax.query_value(identifiers[p.name], p.is_required)}"
        for p in function.params
        if not p.in_path and not p.is_file
    ]
    if query:
        path += ("&" if "?" in path else "?") + "&".join(query)

    file_param = next((identifiers[p.name] for p in function.params if p.is_file), None)
    if file_param is not None:
        data_arg_suffix = f", {file_param}"

    if include_ext_options and syntax.ext_options_param:
        signature.append(syntax.ext_options_param)
        if not data_arg_suffix:
            data_arg_suffix = f", {syntax.no_data}"
        data_arg_suffix += f", {syntax.ext_options_arg}"

    return FunctionBuildResult(
        name=name,
        params_signature=", ".join(signature),
        comment=syntax.comment(" ".join((function.description or name).split()), docs),
        data_arg_suffix=data_arg_suffix,
        path=path,
        request_type=request_type,
        response_type=response_type,
        file_param=file_param,
        warnings=tuple(path_builder.warnings),
    )
