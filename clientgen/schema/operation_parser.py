"""
Operation Parser - walks the endpoint table of a schema document and
produces one RequestFunction per declared operation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Final, Mapping
from urllib.parse import unquote

from ..shared.errors import SchemaError, SchemaValidationError
from ..shared.log import get_logger
from ..shared.naming import slugify
from .schema_parser import SchemaParser, SchemaType, document_schemas
from .types import FILE_TYPE, FunctionParam, RequestFunction

if TYPE_CHECKING:
    from ..formatters.base import LanguageFormatter

logger = get_logger("operations")

# HTTP methods supported in OpenAPI
HTTP_METHODS: Final[frozenset[str]] = frozenset({
    "get", "post", "put", "patch", "delete", "options", "head", "trace"
})

# Parameter locations that never reach a generated signature
SKIPPED_LOCATIONS: Final[frozenset[str]] = frozenset({"header", "cookie"})

BINARY_MEDIA_TYPES: Final[frozenset[str]] = frozenset({"application/octet-stream"})

# Component references that are inlined; schema references stay named types
_INLINED_REF_PREFIXES: Final[tuple[str, ...]] = (
    "#/components/parameters/",
    "#/components/requestBodies/",
    "#/components/responses/",
    "#/parameters/",
    "#/responses/",
)
_MAX_REF_DEPTH: Final[int] = 16


def resolve_local_ref(document: Mapping[str, Any], ref: str) -> Mapping[str, Any] | None:
    """Follow a local JSON pointer (``#/a/b``) inside the document."""
    if not ref.startswith("#/"):
        return None
    node: Any = document
    for part in ref[2:].split("/"):
        part = unquote(part).replace("~1", "/").replace("~0", "~")
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, Mapping) else None


def dereference(document: Mapping[str, Any], node: Any) -> Any:
    """Inline parameter, request body and response references.

    Raises:
        SchemaError: If a reference cannot be resolved or loops.
    """
    depth = 0
    while isinstance(node, Mapping) and isinstance(node.get("$ref"), str):
        ref = node["$ref"]
        if not ref.startswith(_INLINED_REF_PREFIXES):
            return node
        target = resolve_local_ref(document, ref)
        if target is None:
            raise SchemaError(f"Unresolvable reference '{ref}'")
        depth += 1
        if depth > _MAX_REF_DEPTH:
            raise SchemaError(f"Reference chain too deep at '{ref}'")
        node = target
    return node


def last_path_segment(path: str) -> str:
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "root"
    return segments[-1].strip("{}")


def select_response(responses: Mapping[Any, Any]) -> Any:
    """The success response: ``200``, else the first 2xx, else the first declared."""
    if not responses:
        return None
    by_code = {str(code): value for code, value in responses.items()}
    if "200" in by_code:
        return by_code["200"]
    for code, value in by_code.items():
        if code.startswith("2"):
            return value
    return next(iter(by_code.values()))


class OperationParser:
    """Builds RequestFunctions for one document, mapping types through a formatter."""

    def __init__(
        self,
        document: Mapping[str, Any],
        formatter: LanguageFormatter,
        *,
        warnings: list[str] | None = None,
        schema_parser: SchemaParser | None = None,
    ) -> None:
        self.document = document
        self.formatter = formatter
        self.warnings = warnings if warnings is not None else []
        self.schema_parser = schema_parser or SchemaParser(
            document_schemas(document), warnings=self.warnings
        )

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def format(self, mapped: SchemaType) -> str:
        return self.formatter.format_type(mapped.text, mapped.is_enum, mapped.is_list)

    def media_schema(self, content: Any) -> tuple[str | None, Any]:
        """Media type and schema of the first declared content entry."""
        if not isinstance(content, Mapping) or not content:
            return None, None
        media_type, media = next(iter(content.items()))
        schema = media.get("schema") if isinstance(media, Mapping) else None
        return str(media_type), schema

    def map_payload(self, media_type: str | None, schema: Any) -> SchemaType:
        if media_type in BINARY_MEDIA_TYPES and not (isinstance(schema, Mapping) and "$ref" in schema):
            return SchemaType(FILE_TYPE)
        return self.schema_parser.map_type(schema)

    def parse_params(
        self,
        shared: list[Any],
        own: list[Any],
    ) -> tuple[list[FunctionParam], Any]:
        """Merge path-level and operation-level parameters.

        Returns the signature parameters plus a Swagger 2 ``in: body`` schema,
        if one was declared.
        """
        merged: dict[tuple[str, str], Mapping[str, Any]] = {}
        for raw in [*shared, *own]:
            param = dereference(self.document, raw)
            if not isinstance(param, Mapping) or "name" not in param:
                raise SchemaValidationError("parameter must declare a name")
            location = str(param.get("in", "query")).lower()
            merged[(str(param["name"]), location)] = param

        params: list[FunctionParam] = []
        body_schema = None
        for (name, location), param in merged.items():
            if location in SKIPPED_LOCATIONS:
                logger.debug("Skipping %s parameter '%s'", location, name)
                continue
            if location == "body":
                body_schema = param.get("schema") or {}
                continue
            schema = param.get("schema", param)
            mapped = self.schema_parser.map_type(schema)
            params.append(FunctionParam(
                name=name,
                source_type=mapped.text,
                type_text=self.format(mapped),
                is_required=bool(param.get("required")) or location == "path",
                in_path=location == "path",
                location=location,
                description=param.get("description"),
                ref_name=mapped.ref_name,
            ))
        return params, body_schema

    def parse_request_body(self, operation: Mapping[str, Any], body_schema: Any) -> SchemaType | None:
        if body_schema is not None:
            return self.schema_parser.map_type(body_schema)
        body = dereference(self.document, operation.get("requestBody"))
        if not isinstance(body, Mapping):
            return None
        media_type, schema = self.media_schema(body.get("content"))
        if media_type is None:
            return None
        return self.map_payload(media_type, schema)

    def parse_response(self, operation: Mapping[str, Any]) -> SchemaType | None:
        response = dereference(self.document, select_response(operation.get("responses") or {}))
        if not isinstance(response, Mapping):
            return None
        if "schema" in response:
            return self.schema_parser.map_type(response["schema"])
        media_type, schema = self.media_schema(response.get("content"))
        if media_type is None:
            return None
        return self.map_payload(media_type, schema)

    def parse_operation(
        self,
        path: str,
        method: str,
        operation: Mapping[str, Any],
        shared_params: list[Any],
    ) -> RequestFunction:
        name = operation.get("operationId") or f"{method}_{slugify(last_path_segment(path), fallback='root')}"
        tags = operation.get("tags") or []
        params, body_schema = self.parse_params(shared_params, operation.get("parameters") or [])
        request = self.parse_request_body(operation, body_schema)
        response = self.parse_response(operation)
        return RequestFunction(
            name=str(name),
            method=method,
            path=path,
            tag=str(tags[0]) if tags else None,
            description=operation.get("summary") or operation.get("description"),
            request_type=self.format(request) if request else "",
            response_type=self.format(response) if response else "",
            request_source_type=request.text if request else "",
            response_source_type=response.text if response else "",
            request_ref_name=request.ref_name if request else None,
            response_ref_name=response.ref_name if response else None,
            params=tuple(params),
        )

    def parse(self) -> list[RequestFunction]:
        """Parse every (path, method) pair; a malformed operation is skipped with a warning."""
        paths = self.document.get("paths") or {}
        if not isinstance(paths, Mapping):
            raise SchemaValidationError("'paths' must be a mapping")

        functions: list[RequestFunction] = []
        used_names: set[str] = set()
        for path, path_item in paths.items():
            if not isinstance(path_item, Mapping):
                continue
            shared_params = path_item.get("parameters") or []
            for method, operation in path_item.items():
                method = str(method).lower()
                if method not in HTTP_METHODS or not isinstance(operation, Mapping):
                    continue
                try:
                    function = self.parse_operation(str(path), method, operation, shared_params)
                except (SchemaError, KeyError, TypeError, ValueError, AttributeError) as e:
                    self._warn(f"Skipped operation {method.upper()} {path}: {e}")
                    continue
                if function.name in used_names:
                    function = replace(function, name=f"{function.name}_{method}")
                used_names.add(function.name)
                functions.append(function)

        logger.info("Parsed %d operations across %d paths", len(functions), len(paths))
        return functions


def parse_operations(
    document: Mapping[str, Any],
    formatter: LanguageFormatter,
    *,
    warnings: list[str] | None = None,
    schema_parser: SchemaParser | None = None,
) -> list[RequestFunction]:
    """Parse the endpoint table of a document into RequestFunctions."""
    return OperationParser(
        document,
        formatter,
        warnings=warnings,
        schema_parser=schema_parser,
    ).parse()
