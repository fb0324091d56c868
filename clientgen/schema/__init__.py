"""Intermediate type model and the parsers that produce it."""

from .types import (
    FILE_TYPE,
    UNTYPED,
    FunctionParam,
    GenerationResult,
    GenFile,
    OverwritePolicy,
    PropertyInfo,
    RequestFunction,
    TypeMeta,
    TypeTable,
)
from .schema_parser import SchemaParser, SchemaType, document_schemas, parse_schemas
from .operation_parser import OperationParser, parse_operations

__all__ = [
    # Type model
    "FILE_TYPE",
    "UNTYPED",
    "FunctionParam",
    "GenerationResult",
    "GenFile",
    "OverwritePolicy",
    "PropertyInfo",
    "RequestFunction",
    "TypeMeta",
    "TypeTable",
    # Parsers
    "SchemaParser",
    "SchemaType",
    "document_schemas",
    "parse_schemas",
    "OperationParser",
    "parse_operations",
]
