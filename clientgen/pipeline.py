"""
Generation pipeline - schema document in, GenFile list out.

Stages run strictly in order: every type is parsed before any operation,
and every operation before any emitter, because emitters resolve generic
placeholders and imports against the complete type table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .emitters import EMITTERS
from .schema.operation_parser import parse_operations
from .schema.schema_parser import SchemaParser, document_schemas, parse_schemas
from .schema.types import GenerationResult
from .shared.errors import SchemaError
from .shared.log import get_logger
from .templating import GeneratorContext

logger = get_logger("pipeline")


class Variant(str, Enum):
    """Client flavor to emit."""

    ANGULAR = "angular"
    AXIOS = "axios"
    CSHARP = "csharp"


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Settings for a single generation run."""

    variant: Variant | str = Variant.ANGULAR
    project_name: str = "api"
    force: bool = False


def resolve_variant(value: Variant | str) -> Variant:
    try:
        return Variant(value)
    except ValueError as e:
        choices = ", ".join(v.value for v in Variant)
        raise SchemaError(f"Unknown variant '{value}' (expected one of: {choices})") from e


def tag_descriptions(document: Mapping[str, Any]) -> dict[str, str]:
    """Tag name -> description from the top-level ``tags`` list."""
    descriptions: dict[str, str] = {}
    for tag in document.get("tags") or []:
        if isinstance(tag, Mapping) and tag.get("name") and tag.get("description"):
            descriptions[str(tag["name"])] = str(tag["description"])
    return descriptions


def generate(
    document: Mapping[str, Any],
    options: GenerationOptions | None = None,
) -> GenerationResult:
    """Run the whole pipeline for one document.

    The document is never mutated and no state outlives the call, so two
    runs over the same input produce identical results.

    Args:
        document: Parsed schema document (OpenAPI 3 or Swagger 2).
        options: Variant and naming options; defaults to the reactive client.

    Returns:
        GenerationResult with every emitted file and recovered warning.

    Raises:
        SchemaError: If the variant is unknown or the document is unusable.
    """
    options = options or GenerationOptions()
    if not isinstance(document, Mapping):
        raise SchemaError("Schema root must be a mapping")
    variant = resolve_variant(options.variant)

    result = GenerationResult()
    context = GeneratorContext()
    parser = SchemaParser(document_schemas(document), warnings=result.warnings)
    types = parse_schemas(document, warnings=result.warnings, parser=parser)

    emitter_class = EMITTERS[variant.value]
    formatter = emitter_class.create_formatter(types, context, options.project_name)
    functions = parse_operations(
        document,
        formatter,
        warnings=result.warnings,
        schema_parser=parser,
    )

    emitter = emitter_class(
        types,
        functions,
        formatter=formatter,
        context=context,
        project_name=options.project_name,
        tag_descriptions=tag_descriptions(document),
        warnings=result.warnings,
    )
    result.files.extend(emitter.emit())

    if result.warnings:
        logger.info("Generation finished with %d warning(s)", len(result.warnings))
    return result
