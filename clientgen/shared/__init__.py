"""Shared utilities for the client generators."""

from .schema_loader import (
    fetch_schema,
    load_document,
    load_schema,
    parse_document,
)
from .naming import (
    to_pascal_case,
    to_camel_case,
    to_hyphen_case,
    slugify,
    sanitize_identifier,
    TS_KEYWORDS,
    CSHARP_KEYWORDS,
)
from .generic_names import (
    GenericName,
    parse_generic_name,
    render_generic_name,
    materialize,
    short_name,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    TypeMappingError,
    GenericNameError,
    PathParameterError,
)
from .log import configure_logging, get_logger

__all__ = [
    # Schema loading
    "fetch_schema",
    "load_document",
    "load_schema",
    "parse_document",
    # Naming utilities
    "to_pascal_case",
    "to_camel_case",
    "to_hyphen_case",
    "slugify",
    "sanitize_identifier",
    "TS_KEYWORDS",
    "CSHARP_KEYWORDS",
    # Generic names
    "GenericName",
    "parse_generic_name",
    "render_generic_name",
    "materialize",
    "short_name",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "TypeMappingError",
    "GenericNameError",
    "PathParameterError",
    # Logging
    "configure_logging",
    "get_logger",
]
