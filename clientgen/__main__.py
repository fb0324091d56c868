"""
Client Generator CLI - renders API client sources from an OpenAPI document.

Usage:
    python -m clientgen openapi.yaml --variant angular --output src/app/api
    python -m clientgen https://host/swagger/v1/swagger.json --variant csharp --name Acme.Api
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .pipeline import GenerationOptions, Variant, generate
from .shared.errors import SchemaError
from .shared.log import configure_logging
from .shared.schema_loader import load_document
from .writer import write_files


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate API client code from an OpenAPI document",
    )
    parser.add_argument(
        "source",
        help="Schema file (JSON or YAML) or http(s) URL",
    )
    parser.add_argument(
        "--variant",
        choices=[v.value for v in Variant],
        default=Variant.ANGULAR.value,
        help="Client flavor to emit",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("generated"),
        help="Output directory",
    )
    parser.add_argument(
        "--name",
        default="api",
        help="Project name used for namespaces and the aggregated client",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite write-once and merge files as well",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be written without touching disk",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        document = load_document(args.source)
        options = GenerationOptions(
            variant=Variant(args.variant),
            project_name=args.name,
            force=args.force,
        )
        result = generate(document, options)
        report = write_files(
            result.files,
            args.output,
            force=options.force,
            dry_run=args.dry_run,
        )
    except SchemaError as e:
        raise SystemExit(f"Error: {e}") from e

    prefix = "Would write" if args.dry_run else "Wrote"
    for path in report.written:
        print(f"{prefix} {path}")
    for path in report.merged:
        print(f"Merged {path}")
    for path in report.skipped:
        print(f"Kept {path}")
    print(
        f"Generated {len(result.files)} file(s) for '{args.variant}' into {args.output} "
        f"({len(result.warnings)} warning(s))"
    )


if __name__ == "__main__":
    main()
