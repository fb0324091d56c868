"""OpenAPI client generator for TypeScript (Angular, axios) and C#."""

from .pipeline import GenerationOptions, Variant, generate
from .schema.types import GenerationResult, GenFile, OverwritePolicy
from .writer import WriteReport, write_files

__version__ = "0.1.0"

__all__ = [
    "GenerationOptions",
    "GenerationResult",
    "GenFile",
    "OverwritePolicy",
    "Variant",
    "WriteReport",
    "generate",
    "write_files",
    "__version__",
]
