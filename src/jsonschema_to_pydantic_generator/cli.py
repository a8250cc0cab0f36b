"""Command line interface for JSON Schema to pydantic generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import Visibility
from .errors import SchemaStructError
from .generator import SchemaLoadError, SchemaSource, WriteError, run_generation


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="jsonschema-to-pydantic-generator",
        description="Generate pydantic models with JSON entry points from a JSON Schema",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", help="Inline JSON Schema document")
    source.add_argument("--input", help="Path to a JSON or YAML schema file")
    source.add_argument("--url", help="URL of a JSON schema document")
    parser.add_argument("--output", required=True, help="Path of the Python module to generate")
    parser.add_argument("--ident", help="Top-level type name; defaults to the schema title")
    parser.add_argument(
        "--public",
        action="store_true",
        help="Export every generated type through the module's __all__",
    )
    parser.add_argument(
        "--no-definition-doc",
        action="store_true",
        help="Omit the full definition listing from the top-level docstring",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate payloads against the schema in the top-level from_json",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the generated module to stderr",
    )
    parser.add_argument(
        "--no-format",
        action="store_true",
        help="Skip running Ruff against the generated module",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source = SchemaSource(
        text=args.schema,
        path=Path(args.input) if args.input is not None else None,
        url=args.url,
    )

    try:
        run = run_generation(
            source=source,
            output_path=Path(args.output),
            ident=args.ident,
            visibility=Visibility.PUBLIC if args.public else Visibility.PRIVATE,
            definition_doc=not args.no_definition_doc,
            validate=bool(args.validate),
            debug=bool(args.debug),
            format_output=not args.no_format,
        )
    except (SchemaLoadError, SchemaStructError, WriteError) as exc:
        parser.error(str(exc))
        return 2

    print(f"Generated {run.top_level_name} in {run.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
