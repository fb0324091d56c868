import pytest

from clientgen.emitters.function_builder import (
    CSharpSyntax,
    TargetSyntax,
    TypeScriptSyntax,
    build_function_common,
    strip_tag_prefix,
)
from clientgen.formatters import CSharpFormatter, TypeScriptFormatter
from clientgen.schema.types import FILE_TYPE, FunctionParam, RequestFunction

PAGE_LIST_KEY = "Shop.PageList`1[[Shop.ItemDto, Shop, Version=1.0.0.0]]"
INT_RESULT_KEY = "Core.Result`1[[System.Int32, System.Private.CoreLib]]"
LIST_RESULT_KEY = (
    "Core.Result`1[[System.Collections.Generic.List`1[[Shop.ItemDto, Shop]], System.Private.CoreLib]]"
)


def param(name, type_text="string", required=False, in_path=False, **kwargs):
    return FunctionParam(
        name=name,
        source_type=kwargs.pop("source_type", "string"),
        type_text=type_text,
        is_required=required or in_path,
        in_path=in_path,
        location="path" if in_path else kwargs.pop("location", "query"),
        **kwargs,
    )


def get_item():
    return RequestFunction(
        name="getItem",
        method="get",
        path="/items/{id}",
        tag="Items",
        description="Get one item",
        response_type="Item",
        response_source_type="Item",
        response_ref_name="Item",
        params=(param("id", in_path=True),),
    )


class TestStripTagPrefix:
    @pytest.mark.parametrize(
        "name,tag,expected",
        [
            ("Items_getItem", "Items", "getItem"),
            ("getItem", "Items", "getItem"),
            ("Items_", "Items", "Items_"),
            ("Items_getItem", None, "Items_getItem"),
        ],
    )
    def test_strip_tag_prefix(self, name, tag, expected):
        assert strip_tag_prefix(name, tag) == expected


class TestTypeScriptBuild:
    def test_simple_get(self):
        built = build_function_common(get_item(), TypeScriptSyntax())
        assert built.name == "getItem"
        assert built.params_signature == "id: string"
        assert built.path == "/items/${id}"
        assert built.data_arg_suffix == ""
        assert built.response_type == "Item"
        assert built.comment == ("/**", " * Get one item", " * @param id string", " */")
        assert built.warnings == ()

    def test_required_parameters_first(self):
        function = RequestFunction(
            name="search",
            method="get",
            path="/search",
            params=(param("a"), param("b", required=True), param("c")),
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.params_signature == "b: string, a: string | null, c: string | null"

    def test_query_string(self):
        function = RequestFunction(
            name="list",
            method="get",
            path="/items",
            params=(param("page", "number"), param("q", required=True)),
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.path == "/items?page=${page ?? ''}&q=${q}"

    def test_query_appends_to_existing_query(self):
        function = RequestFunction(name="list", method="get", path="/items?all=true", params=(param("q", required=True),))
        built = build_function_common(function, TypeScriptSyntax())
        assert built.path == "/items?all=true&q=${q}"

    def test_request_body(self):
        function = RequestFunction(
            name="createItem",
            method="post",
            path="/items",
            request_type="Item",
            request_ref_name="Item",
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.params_signature == "data: Item"
        assert built.data_arg_suffix == ", data"
        assert " * @param data Item" in built.comment

    def test_generic_types_materialized(self):
        function = RequestFunction(
            name="listItems",
            method="get",
            path="/items",
            response_type="PageList<T>",
            response_ref_name=PAGE_LIST_KEY,
            request_type="PageList<T> | null",
            request_ref_name=PAGE_LIST_KEY,
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.response_type == "PageList<ItemDto>"
        assert built.request_type == "PageList<ItemDto> | null"
        assert "`" not in built.params_signature

    @pytest.mark.parametrize(
        "key,expected",
        [
            (INT_RESULT_KEY, "Result<number>"),
            (LIST_RESULT_KEY, "Result<ItemDto[]>"),
        ],
    )
    def test_runtime_type_arguments_rendered(self, key, expected):
        function = RequestFunction(
            name="count",
            method="get",
            path="/count",
            response_type="Result<T>",
            response_ref_name=key,
            params=(param("filter", "Result<T>", ref_name=key),),
        )
        built = build_function_common(function, TypeScriptSyntax(), render_type=TypeScriptFormatter().normalize)
        assert built.response_type == expected
        assert built.params_signature == f"filter: {expected} | null"

    def test_file_parameter_is_sole_data_argument(self):
        function = RequestFunction(
            name="uploadFile",
            method="post",
            path="/files",
            params=(
                param("folder"),
                param("file", "FormData", required=True, source_type=FILE_TYPE, location="formData"),
            ),
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.params_signature == "file: FormData, folder: string | null"
        assert built.data_arg_suffix == ", file"
        assert built.file_param == "file"
        assert built.path == "/files?folder=${folder ?? ''}"
        assert "file=" not in built.path

    def test_keyword_parameter_names(self):
        function = RequestFunction(
            name="remove",
            method="delete",
            path="/items/{delete}",
            params=(param("delete", in_path=True), param("x-version", required=True)),
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert built.params_signature == "delete_: string, x_version: string"
        assert built.path == "/items/${delete_}?x-version=${x_version}"

    def test_unknown_path_token_warns(self):
        function = RequestFunction(name="getItem", method="get", path="/items/{id}")
        built = build_function_common(function, TypeScriptSyntax())
        assert built.path == "/items/{id}"
        assert built.warnings == ("Path '/items/{id}' has placeholder '{id}' without a path parameter",)

    def test_ext_options_without_data(self):
        built = build_function_common(get_item(), TypeScriptSyntax(), include_ext_options=True)
        assert built.params_signature == "id: string, extOptions?: ExtOptions"
        assert built.data_arg_suffix == ", null, extOptions"

    def test_ext_options_with_data(self):
        function = RequestFunction(name="create", method="post", path="/items", request_type="Item")
        built = build_function_common(function, TypeScriptSyntax(), include_ext_options=True)
        assert built.params_signature == "data: Item, extOptions?: ExtOptions"
        assert built.data_arg_suffix == ", data, extOptions"

    def test_summary_whitespace_normalized(self):
        function = RequestFunction(name="ping", method="get", path="/ping", description="Checks\n   the   service")
        built = build_function_common(function, TypeScriptSyntax())
        assert built.comment[1] == " * Checks the service"

    def test_missing_summary_uses_name(self):
        function = RequestFunction(name="Health_ping", method="get", path="/ping", tag="Health")
        built = build_function_common(function, TypeScriptSyntax())
        assert built.name == "ping"
        assert built.comment[1] == " * ping"

    def test_parameter_description_in_comment(self):
        function = RequestFunction(
            name="getItem",
            method="get",
            path="/items/{id}",
            params=(param("id", in_path=True, description="Item identifier"),),
        )
        built = build_function_common(function, TypeScriptSyntax())
        assert " * @param id Item identifier" in built.comment


class TestCSharpBuild:
    def test_simple_get(self):
        function = get_item()
        built = build_function_common(function, CSharpSyntax())
        assert built.name == "GetItemAsync"
        assert built.params_signature == "string id"
        assert built.path == "/items/{id}"
        assert built.comment == (
            "/// <summary>",
            "/// Get one item",
            "/// </summary>",
            '/// <param name="id">string</param>',
            "/// <returns></returns>",
        )

    def test_optional_parameters_nullable(self):
        function = RequestFunction(
            name="list",
            method="get",
            path="/items",
            params=(param("page", "int"), param("class", "string", required=True)),
        )
        built = build_function_common(function, CSharpSyntax())
        assert built.params_signature == "string class_, int? page"
        assert built.path == "/items?page={page}&class={class_}"

    def test_request_body(self):
        function = RequestFunction(name="create", method="post", path="/items", request_type="Item")
        built = build_function_common(function, CSharpSyntax())
        assert built.params_signature == "Item data"
        assert built.data_arg_suffix == ", data"

    def test_unknown_path_token_escaped(self):
        function = RequestFunction(name="getItem", method="get", path="/items/{id}")
        built = build_function_common(function, CSharpSyntax())
        assert built.path == "/items/{{id}}"
        assert len(built.warnings) == 1

    def test_no_ext_options(self):
        built = build_function_common(get_item(), CSharpSyntax(), include_ext_options=True)
        assert built.params_signature == "string id"
        assert built.data_arg_suffix == ""

    @pytest.mark.parametrize(
        "key,expected",
        [
            (INT_RESULT_KEY, "Result<int>"),
            (LIST_RESULT_KEY, "Result<List<ItemDto>>"),
        ],
    )
    def test_runtime_type_arguments_rendered(self, key, expected):
        function = RequestFunction(
            name="count",
            method="get",
            path="/count",
            response_type="Result<T>",
            response_ref_name=key,
        )
        built = build_function_common(function, CSharpSyntax(), render_type=CSharpFormatter().normalize)
        assert built.response_type == expected


class TestTargetSyntax:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            TargetSyntax()
