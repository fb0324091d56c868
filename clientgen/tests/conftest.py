import copy

import pytest

PAGE_LIST_KEY = "Shop.PageList`1[[Shop.ItemDto, Shop, Version=1.0.0.0]]"

_SHOP_DOCUMENT = {
    "openapi": "3.0.1",
    "info": {"title": "Shop API", "version": "1.0.0"},
    "tags": [{"name": "Items", "description": "Item management"}],
    "paths": {
        "/items/{id}": {
            "get": {
                "tags": ["Items"],
                "operationId": "getItem",
                "summary": "Get one item",
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Item"}},
                        },
                    },
                },
            },
        },
        "/items": {
            "get": {
                "tags": ["Items"],
                "operationId": "listItems",
                "parameters": [
                    {"name": "page", "in": "query", "schema": {"type": "integer", "format": "int32"}},
                    {"name": "X-Trace", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": f"#/components/schemas/{PAGE_LIST_KEY}"},
                            },
                        },
                    },
                },
            },
            "post": {
                "tags": ["Items"],
                "operationId": "createItem",
                "requestBody": {
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Item"}},
                    },
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Item"}},
                        },
                    },
                },
            },
        },
        "/files/upload": {
            "post": {
                "tags": ["Files"],
                "operationId": "upload",
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "properties": {"file": {"type": "string", "format": "binary"}},
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "OK"}},
            },
        },
        "/files/{name}": {
            "get": {
                "tags": ["Files"],
                "operationId": "download",
                "parameters": [
                    {"name": "name", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/octet-stream": {
                                "schema": {"type": "string", "format": "binary"},
                            },
                        },
                    },
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Item": {
                "type": "object",
                "description": "A shop item",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "nullable": True},
                    "name": {"type": "string", "nullable": True},
                    "status": {"$ref": "#/components/schemas/Status"},
                    "parent": {"$ref": "#/components/schemas/Item"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
            },
            "Status": {
                "type": "integer",
                "enum": [0, 1],
                "x-enumNames": ["Active", "Archived"],
            },
            "Shop.ItemDto": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "format": "int32"},
                    "title": {"type": "string"},
                },
            },
            PAGE_LIST_KEY: {
                "type": "object",
                "properties": {
                    "items": {"type": "array", "items": {"$ref": "#/components/schemas/Shop.ItemDto"}},
                    "total": {"type": "integer"},
                },
            },
        },
    },
}

_SWAGGER_DOCUMENT = {
    "swagger": "2.0",
    "info": {"title": "Files API", "version": "1.0"},
    "paths": {
        "/files": {
            "post": {
                "tags": ["Files"],
                "operationId": "uploadFile",
                "consumes": ["multipart/form-data"],
                "parameters": [
                    {"name": "folder", "in": "query", "type": "string"},
                    {"name": "file", "in": "formData", "type": "file", "required": True},
                ],
                "responses": {
                    "200": {"description": "OK", "schema": {"$ref": "#/definitions/Item"}},
                },
            },
        },
        "/items": {
            "put": {
                "tags": ["Items"],
                "operationId": "saveItem",
                "parameters": [
                    {"name": "body", "in": "body", "schema": {"$ref": "#/definitions/Item"}},
                ],
                "responses": {"204": {"description": "No Content"}},
            },
        },
    },
    "definitions": {
        "Item": {
            "type": "object",
            "properties": {"id": {"type": "integer", "format": "int64"}},
        },
    },
}


@pytest.fixture
def shop_document():
    """OpenAPI 3 document covering refs, generics, enums, uploads and downloads."""
    return copy.deepcopy(_SHOP_DOCUMENT)


@pytest.fixture
def swagger_document():
    """Swagger 2 document with a form-data file parameter and a body parameter."""
    return copy.deepcopy(_SWAGGER_DOCUMENT)
