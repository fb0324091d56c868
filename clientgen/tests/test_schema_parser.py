import pytest

from clientgen.schema.schema_parser import (
    SchemaParser,
    document_schemas,
    parse_schemas,
    primitive_source_type,
    ref_key,
)
from clientgen.schema.types import FILE_TYPE, UNTYPED, TypeMeta
from clientgen.shared.errors import SchemaValidationError, TypeMappingError

PAGE_LIST_KEY = "Shop.PageList`1[[Shop.ItemDto, Shop, Version=1.0.0.0]]"


def make_parser(schemas=None, warnings=None):
    return SchemaParser(schemas or {}, warnings=warnings)


class TestRefKey:
    def test_components_ref(self):
        assert ref_key("#/components/schemas/Item") == "Item"

    def test_definitions_ref(self):
        assert ref_key("#/definitions/Shop.Item") == "Shop.Item"

    def test_escaped_ref(self):
        assert ref_key("#/components/schemas/PageList%601%5B%5BItem%5D%5D") == "PageList`1[[Item]]"

    def test_other_ref(self):
        assert ref_key("#/components/parameters/Page") is None


class TestPrimitiveSourceType:
    @pytest.mark.parametrize(
        "kind,fmt,expected",
        [
            ("integer", "int64", "long"),
            ("integer", "unknown", "int"),
            ("string", "uuid", "Guid"),
            ("string", None, "string"),
        ],
    )
    def test_known(self, kind, fmt, expected):
        assert primitive_source_type(kind, fmt) == expected

    def test_unknown_raises(self):
        with pytest.raises(TypeMappingError) as exc_info:
            primitive_source_type("tuple")
        assert exc_info.value.type_name == "tuple"


class TestMapType:
    @pytest.mark.parametrize(
        "node,expected",
        [
            ({"type": "integer"}, "int"),
            ({"type": "integer", "format": "int64"}, "long"),
            ({"type": "number"}, "double"),
            ({"type": "number", "format": "decimal"}, "decimal"),
            ({"type": "boolean"}, "bool"),
            ({"type": "string"}, "string"),
            ({"type": "string", "format": "date-time"}, "DateTimeOffset"),
            ({"type": "string", "format": "date"}, "DateOnly"),
            ({"type": "string", "format": "uuid"}, "Guid"),
            ({"type": "string", "format": "binary"}, FILE_TYPE),
            ({"type": "string", "format": "unknown"}, "string"),
            ({"type": "file"}, FILE_TYPE),
            ({}, UNTYPED),
            (None, UNTYPED),
        ],
    )
    def test_primitives(self, node, expected):
        assert make_parser().map_type(node).text == expected

    def test_reference(self):
        parser = make_parser({"Item": {"type": "object"}})
        mapped = parser.map_type({"$ref": "#/components/schemas/Item"})
        assert mapped.text == "Item"
        assert mapped.ref_name == "Item"
        assert mapped.is_navigation
        assert not mapped.is_enum

    def test_namespaced_reference_uses_short_name(self):
        parser = make_parser({"Shop.Models.ItemDto": {"type": "object"}})
        mapped = parser.map_type({"$ref": "#/components/schemas/Shop.Models.ItemDto"})
        assert mapped.text == "ItemDto"
        assert mapped.ref_name == "Shop.Models.ItemDto"

    def test_generic_reference_uses_placeholders(self):
        parser = make_parser({PAGE_LIST_KEY: {"type": "object"}})
        mapped = parser.map_type({"$ref": f"#/components/schemas/{PAGE_LIST_KEY}"})
        assert mapped.text == "PageList<T>"
        assert mapped.ref_name == PAGE_LIST_KEY

    def test_enum_reference(self):
        parser = make_parser({"Status": {"type": "integer", "enum": [0, 1]}})
        assert parser.map_type({"$ref": "#/components/schemas/Status"}).is_enum

    def test_unresolvable_reference_warns(self):
        warnings = []
        parser = make_parser(warnings=warnings)
        mapped = parser.map_type({"$ref": "#/components/schemas/Missing"})
        assert mapped.text == UNTYPED
        assert mapped.ref_name is None
        assert warnings == ["Unresolvable reference '#/components/schemas/Missing'; using untyped placeholder"]

    def test_repeated_warning_recorded_once(self):
        warnings = []
        parser = make_parser(warnings=warnings)
        parser.map_type({"$ref": "#/components/schemas/Missing"})
        parser.map_type({"$ref": "#/components/schemas/Missing"})
        assert len(warnings) == 1

    def test_unknown_type_warns(self):
        warnings = []
        mapped = make_parser(warnings=warnings).map_type({"type": "tuple"})
        assert mapped.text == UNTYPED
        assert warnings == ["No type mapping for 'tuple' (schema node); using untyped placeholder"]

    def test_array_of_references(self):
        parser = make_parser({"Item": {"type": "object"}})
        mapped = parser.map_type({"type": "array", "items": {"$ref": "#/components/schemas/Item"}})
        assert mapped.text == "List<Item>"
        assert mapped.ref_name == "Item"
        assert mapped.is_list

    def test_nested_array(self):
        mapped = make_parser().map_type({"type": "array", "items": {"type": "array", "items": {"type": "integer"}}})
        assert mapped.text == "List<List<int>>"

    def test_dictionary(self):
        mapped = make_parser().map_type({"type": "object", "additionalProperties": {"type": "integer"}})
        assert mapped.text == "Dictionary<string, int>"
        assert mapped.is_dictionary
        assert not mapped.is_list

    def test_untyped_dictionary(self):
        mapped = make_parser().map_type({"type": "object", "additionalProperties": True})
        assert mapped.text == f"Dictionary<string, {UNTYPED}>"

    def test_inline_object_with_binary_property(self):
        node = {"type": "object", "properties": {"file": {"type": "string", "format": "binary"}}}
        assert make_parser().map_type(node).text == FILE_TYPE

    def test_inline_object_is_untyped(self):
        node = {"type": "object", "properties": {"a": {"type": "string"}}}
        assert make_parser().map_type(node).text == UNTYPED

    def test_inline_enum(self):
        mapped = make_parser().map_type({"type": "string", "enum": ["a", "b"]})
        assert mapped.text == "string"
        assert mapped.is_enum

    @pytest.mark.parametrize(
        "node",
        [
            {"type": "string", "nullable": True},
            {"type": ["string", "null"]},
            {"type": "string", "x-nullable": True},
        ],
    )
    def test_nullable(self, node):
        mapped = make_parser().map_type(node)
        assert mapped.text == "string"
        assert mapped.is_nullable

    def test_all_of_wrapper(self):
        parser = make_parser({"Item": {"type": "object"}})
        mapped = parser.map_type({"allOf": [{"$ref": "#/components/schemas/Item"}], "nullable": True})
        assert mapped.text == "Item"
        assert mapped.ref_name == "Item"
        assert mapped.is_nullable

    def test_one_of_with_null(self):
        parser = make_parser({"Item": {"type": "object"}})
        mapped = parser.map_type({"oneOf": [{"$ref": "#/components/schemas/Item"}, {"type": "null"}]})
        assert mapped.text == "Item"
        assert mapped.is_nullable


class TestEnumMembers:
    def test_enum_data_extension(self):
        node = {
            "type": "integer",
            "x-enumData": [
                {"name": "Low", "value": 1, "description": "Low priority"},
                {"name": "High", "value": 2},
            ],
        }
        members = make_parser().enum_members(node)
        assert [(m.name, m.enum_value, m.comment_summary) for m in members] == [
            ("Low", 1, "Low priority"),
            ("High", 2, None),
        ]
        assert all(m.is_enum for m in members)

    def test_enum_data_non_numeric_value_warns(self):
        warnings = []
        members = make_parser(warnings=warnings).enum_members(
            {"x-enumData": [{"name": "Bad", "value": "x"}]}
        )
        assert members == []
        assert warnings == ["Enum member 'Bad' has a non-numeric value"]

    def test_native_enum_with_names(self):
        node = {
            "type": "integer",
            "enum": [0, 1],
            "x-enumNames": ["Active", "Archived"],
            "x-enum-descriptions": ["In use", "Kept for history"],
        }
        members = make_parser().enum_members(node)
        assert [(m.name, m.enum_value, m.comment_summary) for m in members] == [
            ("Active", 0, "In use"),
            ("Archived", 1, "Kept for history"),
        ]

    def test_native_string_enum(self):
        members = make_parser().enum_members({"type": "string", "enum": ["new", "in-progress", None]})
        assert [(m.name, m.enum_value, m.source_type) for m in members] == [
            ("New", "new", "string"),
            ("InProgress", "in-progress", "string"),
        ]

    def test_native_integer_enum_without_names(self):
        members = make_parser().enum_members({"type": "integer", "enum": [1, -1]})
        assert [m.name for m in members] == ["Value1", "ValueMinus1"]


class TestParse:
    def test_object(self):
        parser = make_parser({"Status": {"type": "integer", "enum": [0]}})
        meta = parser.parse(
            "Shop.Models.Item",
            {
                "type": "object",
                "description": "An item",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "nullable": True},
                    "status": {"$ref": "#/components/schemas/Status"},
                },
            },
        )
        assert meta.name == "Item"
        assert meta.full_name == "Shop.Models.Item"
        assert meta.namespace == "Shop.Models"
        assert meta.bucket == "Shop"
        assert meta.comment == "An item"
        assert not meta.is_generic
        assert meta.alias_type is None

        id_prop, status_prop = meta.properties
        assert id_prop.is_required and id_prop.is_nullable
        assert not id_prop.renders_nullable
        assert status_prop.is_enum
        assert status_prop.navigation_name == "Status"

    def test_enum(self):
        meta = make_parser().parse("Status", {"type": "integer", "enum": [0, 1]})
        assert meta.is_enum
        assert [p.enum_value for p in meta.properties] == [0, 1]

    def test_generic(self):
        parser = make_parser({"Shop.ItemDto": {"type": "object"}})
        meta = parser.parse(PAGE_LIST_KEY, {"type": "object", "properties": {}})
        assert meta.name == "PageList"
        assert meta.full_name == "PageList<T>"
        assert meta.schema_key == PAGE_LIST_KEY
        assert meta.is_generic
        assert [p.schema_key for p in meta.generic_params] == ["Shop.ItemDto"]

    def test_array_alias(self):
        parser = make_parser({"Item": {"type": "object"}})
        meta = parser.parse("ItemList", {"type": "array", "items": {"$ref": "#/components/schemas/Item"}})
        assert meta.is_list
        assert meta.alias_type == "List<Item>"
        assert meta.reference_name == "Item"
        assert meta.properties == ()

    def test_reference_alias(self):
        parser = make_parser({"Item": {"type": "object"}})
        meta = parser.parse("ItemAlias", {"$ref": "#/components/schemas/Item"})
        assert meta.is_reference
        assert meta.alias_type == "Item"

    def test_non_mapping_raises(self):
        with pytest.raises(SchemaValidationError, match="must be a mapping"):
            make_parser().parse("Broken", ["not", "a", "mapping"])

    def test_inheritance(self):
        schemas = {
            "Base": {"type": "object", "properties": {"id": {"type": "integer"}, "name": {"type": "string"}}},
            "Derived": {
                "allOf": [
                    {"$ref": "#/components/schemas/Base"},
                    {"type": "object", "properties": {"name": {"type": "string", "nullable": True}, "extra": {"type": "boolean"}}},
                ],
            },
        }
        meta = make_parser(schemas).parse("Derived", schemas["Derived"])
        assert [p.name for p in meta.properties] == ["id", "name", "extra"]
        assert meta.properties[1].is_nullable

    def test_inheritance_cycle_warns(self):
        warnings = []
        schemas = {
            "A": {"allOf": [{"$ref": "#/components/schemas/B"}]},
            "B": {"allOf": [{"$ref": "#/components/schemas/A"}], "properties": {"b": {"type": "string"}}},
        }
        meta = make_parser(schemas, warnings).parse("A", schemas["A"])
        assert [p.name for p in meta.properties] == ["b"]
        assert "Inheritance cycle through 'A'" in warnings


class TestTypeMeta:
    def test_enum_with_generic_params_rejected(self):
        param = TypeMeta(name="Item", full_name="Item", schema_key="Item")
        with pytest.raises(SchemaValidationError, match="enums cannot declare generic parameters"):
            TypeMeta(name="Status", full_name="Status", schema_key="Status", is_enum=True, generic_params=(param,))


class TestParseSchemas:
    def test_document_schemas(self, shop_document, swagger_document):
        assert "Item" in document_schemas(shop_document)
        assert "Item" in document_schemas(swagger_document)
        assert document_schemas({}) == {}

    def test_shop_document(self, shop_document):
        warnings = []
        table = parse_schemas(shop_document, warnings=warnings)
        assert warnings == []
        assert len(table) == 4
        assert [meta.name for meta in table.enums] == ["Status"]
        assert table.get(PAGE_LIST_KEY).full_name == "PageList<T>"
        assert table.get("PageList<T>") is table.get(PAGE_LIST_KEY)
        assert "Shop.ItemDto" in table
        assert table.get("Status").is_enum

    def test_closed_generics_share_one_model(self):
        other_key = "Shop.PageList`1[[Shop.OrderDto, Shop, Version=1.0.0.0]]"
        document = {
            "components": {
                "schemas": {
                    PAGE_LIST_KEY: {"type": "object", "properties": {"total": {"type": "integer"}}},
                    other_key: {"type": "object", "properties": {"total": {"type": "integer"}}},
                },
            },
        }
        table = parse_schemas(document)
        assert len(table) == 1
        assert table.get(PAGE_LIST_KEY) is table.get(other_key)

    def test_bad_declarations_are_skipped(self):
        warnings = []
        document = {
            "definitions": {
                "Good": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "Bad": "not a mapping",
                "Broken`x": {"type": "object"},
            },
        }
        table = parse_schemas(document, warnings=warnings)
        assert [meta.name for meta in table] == ["Good"]
        assert len(warnings) == 2
        assert warnings[0].startswith("Skipped type 'Bad'")
        assert warnings[1].startswith("Skipped type 'Broken`x'")
