"""
Schema Parser - converts schema document type declarations into TypeMeta.

Every schema node is mapped onto a small "source descriptor" vocabulary
(``int``, ``long``, ``DateTimeOffset``, ``List<X>``,
``Dictionary<string, X>``, a referenced type name, ...) that the target
formatters translate further. The parser never renders target syntax.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Final, Mapping
from urllib.parse import unquote

from ..shared.errors import SchemaError, SchemaValidationError, TypeMappingError
from ..shared.generic_names import (
    namespace_of,
    normalize_key,
    parse_generic_name,
    placeholder_full_name,
    short_name,
)
from ..shared.log import get_logger
from ..shared.naming import to_pascal_case
from .types import FILE_TYPE, UNTYPED, PropertyInfo, TypeMeta, TypeTable

logger = get_logger("schema")

SCHEMA_REF_PREFIXES: Final[tuple[str, ...]] = ("#/components/schemas/", "#/definitions/")

# (type, format) -> source descriptor; format None is the fallback for the type
PRIMITIVE_SOURCE_TYPES: Final[dict[tuple[str, str | None], str]] = {
    ("integer", None): "int",
    ("integer", "int32"): "int",
    ("integer", "int64"): "long",
    ("number", None): "double",
    ("number", "float"): "float",
    ("number", "double"): "double",
    ("number", "decimal"): "decimal",
    ("boolean", None): "bool",
    ("string", None): "string",
    ("string", "byte"): "string",
    ("string", "date-time"): "DateTimeOffset",
    ("string", "date"): "DateOnly",
    ("string", "time"): "TimeOnly",
    ("string", "duration"): "TimeSpan",
    ("string", "uuid"): "Guid",
    ("string", "binary"): FILE_TYPE,
    ("file", None): FILE_TYPE,
}

ENUM_EXTENSION: Final[str] = "x-enumData"
ENUM_NAME_EXTENSIONS: Final[tuple[str, ...]] = ("x-enumNames", "x-enum-varnames")


@dataclass(frozen=True, slots=True)
class SchemaType:
    """A schema node mapped to a source descriptor."""

    text: str
    ref_name: str | None = None
    is_enum: bool = False
    is_list: bool = False
    is_nullable: bool = False
    is_dictionary: bool = False

    @property
    def is_navigation(self) -> bool:
        return self.ref_name is not None


def ref_key(ref: str) -> str | None:
    """Schema key of a local schema reference, or None for anything else."""
    for prefix in SCHEMA_REF_PREFIXES:
        if ref.startswith(prefix):
            pointer = unquote(ref[len(prefix):])
            return normalize_key(pointer.replace("~1", "/").replace("~0", "~"))
    return None


def primitive_source_type(kind: str, fmt: Any = None) -> str:
    """Source descriptor of a primitive schema type, falling back to the bare type.

    Raises:
        TypeMappingError: If the type has no source descriptor.
    """
    mapped = PRIMITIVE_SOURCE_TYPES.get((kind, fmt)) or PRIMITIVE_SOURCE_TYPES.get((kind, None))
    if mapped is None:
        raise TypeMappingError(str(kind), "schema node")
    return mapped


def node_type(node: Mapping[str, Any]) -> str | None:
    """Structural type of a node with any ``null`` member removed."""
    kind = node.get("type")
    if isinstance(kind, list):
        kinds = [k for k in kind if k != "null"]
        return kinds[0] if kinds else None
    return kind


def is_nullable_node(node: Mapping[str, Any]) -> bool:
    kind = node.get("type")
    if isinstance(kind, list) and "null" in kind:
        return True
    return node.get("nullable") is True or node.get("x-nullable") is True


def is_enum_node(node: Any) -> bool:
    if not isinstance(node, Mapping):
        return False
    return bool(node.get("enum")) or isinstance(node.get(ENUM_EXTENSION), list)


def _is_null_part(node: Mapping[str, Any]) -> bool:
    return node.get("type") == "null" or node.get("nullable") is True and len(node) == 1


def _member_name(value: Any) -> str:
    if isinstance(value, str):
        name = to_pascal_case(value)
    else:
        name = f"Value{value}".replace("-", "Minus")
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


class SchemaParser:
    """Maps schema nodes of one document onto TypeMeta and source descriptors."""

    def __init__(
        self,
        schemas: Mapping[str, Any],
        *,
        warnings: list[str] | None = None,
    ) -> None:
        self.schemas: dict[str, Any] = {normalize_key(k): v for k, v in schemas.items()}
        self.warnings = warnings if warnings is not None else []

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)
            logger.warning(message)

    def is_enum_key(self, key: str) -> bool:
        return is_enum_node(self.schemas.get(normalize_key(key)))

    def reference_text(self, key: str) -> str:
        """Descriptor text for a referenced type; generic keys become ``Name<T>``."""
        if "`" in key:
            return placeholder_full_name(key)
        return short_name(key)

    def map_type(self, node: Any) -> SchemaType:
        """Map a schema node onto a source descriptor.

        Missing or malformed nodes map to the untyped descriptor.
        """
        if not isinstance(node, Mapping) or not node:
            return SchemaType(UNTYPED)
        nullable = is_nullable_node(node)

        if "$ref" in node:
            ref = str(node["$ref"])
            key = ref_key(ref)
            if key is None or key not in self.schemas:
                self._warn(f"Unresolvable reference '{ref}'; using untyped placeholder")
                return SchemaType(UNTYPED, is_nullable=nullable)
            return SchemaType(
                self.reference_text(key),
                ref_name=key,
                is_enum=self.is_enum_key(key),
                is_nullable=nullable,
            )

        for combinator in ("allOf", "oneOf", "anyOf"):
            parts = [p for p in node.get(combinator) or [] if isinstance(p, Mapping)]
            if not parts:
                continue
            non_null = [p for p in parts if not _is_null_part(p)]
            if len(non_null) == 1:
                inner = self.map_type(non_null[0])
                wrapped_null = len(non_null) < len(parts)
                return replace(inner, is_nullable=inner.is_nullable or nullable or wrapped_null)

        kind = node_type(node)
        if is_enum_node(node):
            return SchemaType(
                "string" if kind == "string" else "int",
                is_enum=True,
                is_nullable=nullable,
            )

        if kind == "array":
            item = self.map_type(node.get("items"))
            return SchemaType(
                f"List<{item.text}>",
                ref_name=item.ref_name,
                is_enum=item.is_enum,
                is_list=True,
                is_nullable=nullable,
            )

        if kind == "object" or (kind is None and ("properties" in node or "additionalProperties" in node)):
            properties = node.get("properties") or {}
            first = next(iter(properties.values()), None) if isinstance(properties, Mapping) else None
            if isinstance(first, Mapping) and first.get("format") == "binary":
                return SchemaType(FILE_TYPE, is_nullable=nullable)
            extra = node.get("additionalProperties")
            if extra is not None and extra is not False:
                value = self.map_type(extra if isinstance(extra, Mapping) else {})
                return SchemaType(
                    f"Dictionary<string, {value.text}>",
                    ref_name=value.ref_name,
                    is_enum=value.is_enum,
                    is_nullable=nullable,
                    is_dictionary=True,
                )
            return SchemaType(UNTYPED, is_nullable=nullable)

        if kind is None:
            return SchemaType(UNTYPED, is_nullable=nullable)

        try:
            return SchemaType(primitive_source_type(kind, node.get("format")), is_nullable=nullable)
        except TypeMappingError as e:
            self._warn(f"{e}; using untyped placeholder")
            return SchemaType(UNTYPED, is_nullable=nullable)

    def enum_members(self, node: Mapping[str, Any]) -> list[PropertyInfo]:
        """Members of an enum, from ``x-enumData`` or a native ``enum`` list."""
        members: list[PropertyInfo] = []
        extension = node.get(ENUM_EXTENSION)
        if isinstance(extension, list):
            for item in extension:
                if not isinstance(item, Mapping):
                    continue
                try:
                    value = int(item.get("value", 0))
                except (TypeError, ValueError):
                    self._warn(f"Enum member '{item.get('name')}' has a non-numeric value")
                    continue
                members.append(PropertyInfo(
                    name=str(item.get("name") or _member_name(value)),
                    source_type="int",
                    is_enum=True,
                    comment_summary=item.get("description"),
                    enum_value=value,
                ))
            return members

        names: list[Any] = []
        for extension_name in ENUM_NAME_EXTENSIONS:
            if isinstance(node.get(extension_name), list):
                names = node[extension_name]
                break
        descriptions = node.get("x-enum-descriptions")
        for index, value in enumerate(node.get("enum") or []):
            if value is None:
                continue
            name = str(names[index]) if index < len(names) else _member_name(value)
            description = None
            if isinstance(descriptions, list) and index < len(descriptions):
                description = descriptions[index]
            members.append(PropertyInfo(
                name=name,
                source_type="string" if isinstance(value, str) else "int",
                is_enum=True,
                comment_summary=description,
                enum_value=value,
            ))
        return members

    def parse_property(self, name: str, node: Any, required: bool) -> PropertyInfo:
        mapped = self.map_type(node)
        description = node.get("description") if isinstance(node, Mapping) else None
        return PropertyInfo(
            name=name,
            source_type=mapped.text,
            is_nullable=mapped.is_nullable,
            is_required=required,
            is_enum=mapped.is_enum,
            is_list=mapped.is_list,
            is_navigation=mapped.is_navigation,
            navigation_name=mapped.ref_name,
            comment_summary=description,
        )

    def _parent_properties(self, parent: Mapping[str, Any], seen: frozenset[str]) -> list[PropertyInfo]:
        if "$ref" not in parent:
            return self.parse_properties(parent, seen)
        key = ref_key(str(parent["$ref"]))
        if key is None or key not in self.schemas:
            self._warn(f"Unresolvable parent reference '{parent['$ref']}'")
            return []
        if key in seen:
            self._warn(f"Inheritance cycle through '{key}'")
            return []
        return self.parse_properties(self.schemas[key], seen | {key})

    def parse_properties(
        self,
        node: Mapping[str, Any],
        seen: frozenset[str] = frozenset(),
    ) -> list[PropertyInfo]:
        """Properties of a node, parent properties first.

        The first ``allOf`` element is the parent; the second holds the
        type's own properties. A property redeclared later replaces the
        earlier one in place.
        """
        collected: dict[str, PropertyInfo] = {}

        all_of = [p for p in node.get("allOf") or [] if isinstance(p, Mapping)]
        if all_of:
            for prop in self._parent_properties(all_of[0], seen):
                collected[prop.name] = prop
            if len(all_of) > 1:
                for prop in self.parse_properties(all_of[1], seen):
                    collected[prop.name] = prop

        required = set(node.get("required") or [])
        properties = node.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise SchemaValidationError("'properties' must be a mapping")
        for prop_name, prop_node in properties.items():
            collected[str(prop_name)] = self.parse_property(str(prop_name), prop_node, prop_name in required)
        return list(collected.values())

    def _stand_in(self, key: str) -> TypeMeta:
        parsed = parse_generic_name(key)
        return TypeMeta(
            name=short_name(parsed.base_name),
            full_name=placeholder_full_name(key) if parsed.is_generic else normalize_key(key),
            schema_key=normalize_key(key),
            namespace=namespace_of(key),
            is_enum=self.is_enum_key(key),
            generic_params=tuple(self._stand_in(arg) for arg in parsed.args),
        )

    def parse(self, raw_key: str, node: Any) -> TypeMeta:
        """Parse one schema declaration into a TypeMeta.

        Raises:
            SchemaValidationError: If the node is not a mapping.
            GenericNameError: If the key's generic encoding is malformed.
        """
        key = normalize_key(raw_key)
        if not isinstance(node, Mapping):
            raise SchemaValidationError("schema declaration must be a mapping", field=key)

        parsed = parse_generic_name(key)
        name = short_name(parsed.base_name)
        namespace = namespace_of(key)
        comment = node.get("description") or node.get("title")

        if is_enum_node(node):
            return TypeMeta(
                name=name,
                full_name=key,
                schema_key=key,
                namespace=namespace,
                comment=comment,
                is_enum=True,
                is_nullable=is_nullable_node(node),
                properties=tuple(self.enum_members(node)),
            )

        is_reference = "$ref" in node
        mapped = self.map_type(node)
        properties = tuple(self.parse_properties(node, frozenset({key})))

        # Non-object shapes (arrays, dictionaries, aliases) keep their descriptor
        alias_type = None
        if not properties and mapped.text != UNTYPED:
            alias_type = mapped.text

        return TypeMeta(
            name=name,
            full_name=placeholder_full_name(key) if parsed.is_generic else key,
            schema_key=key,
            namespace=namespace,
            comment=comment,
            is_list=mapped.is_list,
            is_reference=is_reference,
            reference_name=mapped.ref_name,
            is_nullable=mapped.is_nullable,
            properties=properties,
            generic_params=tuple(self._stand_in(arg) for arg in parsed.args),
            alias_type=alias_type,
        )


def document_schemas(document: Mapping[str, Any]) -> Mapping[str, Any]:
    """The type table of a document (OpenAPI 3 components or Swagger 2 definitions)."""
    components = document.get("components") or {}
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if not schemas:
        schemas = document.get("definitions")
    return schemas if isinstance(schemas, Mapping) else {}


def parse_schemas(
    document: Mapping[str, Any],
    *,
    warnings: list[str] | None = None,
    parser: SchemaParser | None = None,
) -> TypeTable:
    """Parse every declared type of a document into a fresh TypeTable.

    Closed generic instantiations are memoized by their open full name, so
    each generic type is parsed once. A malformed declaration is reported
    in ``warnings`` and skipped.
    """
    warnings = warnings if warnings is not None else []
    schemas = document_schemas(document)
    parser = parser or SchemaParser(schemas, warnings=warnings)
    table = TypeTable()

    for raw_key, node in schemas.items():
        try:
            full_name = placeholder_full_name(raw_key) if "`" in normalize_key(raw_key) else normalize_key(raw_key)
            existing = table.by_full_name(full_name)
            if existing is not None:
                table.add(raw_key, existing)
                continue
            table.add(raw_key, parser.parse(raw_key, node))
        except SchemaError as e:
            message = f"Skipped type '{raw_key}': {e}"
            warnings.append(message)
            logger.warning(message)

    logger.info(
        "Parsed %d types (%d enums) from %d schema keys",
        len(table),
        len(table.enums),
        len(schemas),
    )
    return table
