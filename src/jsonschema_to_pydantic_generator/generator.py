"""High-level generator orchestration."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from .builder import build_schema_model
from .codegen_ast import render_module
from .config import SchemaStructConfig, Visibility
from .emitter import emit_schema
from .json_types import JSONObject
from .loader import SchemaLoadError, load_schema_file, load_schema_url, parse_schema_text
from .model_types import CompiledSchema
from .writer import WriteError, format_generated_module, write_module

__all__ = [
    "GenerationRun",
    "SchemaLoadError",
    "SchemaSource",
    "WriteError",
    "compile_definitions",
    "compile_schema",
    "load_source",
    "run_generation",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaSource:
    """Where a schema document comes from; exactly one field is set."""

    text: Optional[str] = None
    path: Optional[Path] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class GenerationRun:
    """Outcome of generating one module on disk."""

    output_path: Path
    top_level_name: str
    definition_names: tuple[str, ...]
    formatted: bool


def load_source(source: SchemaSource) -> JSONObject:
    """Acquire the schema document described by ``source``."""
    provided = [value for value in (source.text, source.path, source.url) if value is not None]
    if len(provided) != 1:
        raise SchemaLoadError("Exactly one of schema text, file path or URL must be provided")
    if source.text is not None:
        return parse_schema_text(source.text)
    if source.path is not None:
        return load_schema_file(source.path)
    return load_schema_url(source.url)


def compile_definitions(config: SchemaStructConfig) -> CompiledSchema:
    """Build the field tree for a schema and emit its definitions."""
    model = build_schema_model(config)
    logger.debug(
        "Built schema model `%s` with %d subschema(s)",
        model.name,
        len(model.subschemas),
    )
    return emit_schema(model)


def compile_schema(config: SchemaStructConfig, *, debug_sink: Optional[TextIO] = None) -> str:
    """Compile a schema into Python module source.

    Args:
        config (SchemaStructConfig): Compilation request.
        debug_sink (Optional[TextIO]): Stream receiving the generated source when
            ``config.debug`` is set. Defaults to ``sys.stderr``.

    Returns:
        str: Generated module source.
    """
    return _render(compile_definitions(config), debug_sink=debug_sink)


def _render(compiled: CompiledSchema, *, debug_sink: Optional[TextIO]) -> str:
    source = render_module(compiled)
    if compiled.debug:
        sink = debug_sink if debug_sink is not None else sys.stderr
        sink.write(source)
        sink.flush()
    return source


def run_generation(
    *,
    source: SchemaSource,
    output_path: Path,
    ident: Optional[str] = None,
    visibility: Visibility = Visibility.PRIVATE,
    definition_doc: bool = True,
    validate: bool = False,
    debug: bool = False,
    format_output: bool = True,
) -> GenerationRun:
    """Generate a models module from a schema document.

    Args:
        source (SchemaSource): Where to read the schema from.
        output_path (Path): Module file to create; must not exist yet.
        ident (Optional[str]): Explicit top-level type name.
        visibility (Visibility): Export level of generated types.
        definition_doc (bool): Embed the simplified definition listing.
        validate (bool): Validate payloads against the schema in ``from_json``.
        debug (bool): Dump the generated source to ``sys.stderr``.
        format_output (bool): Run Ruff against the written module.

    Returns:
        GenerationRun: Location and summary of the generated module.
    """
    config = SchemaStructConfig(
        schema=load_source(source),
        ident=ident,
        visibility=visibility,
        definition_doc=definition_doc,
        validate=validate,
        debug=debug,
    )
    compiled = compile_definitions(config)
    module_source = _render(compiled, debug_sink=None)

    write_module(output_path, module_source)
    if format_output:
        format_generated_module(module_path=output_path)

    logger.info("Generated %s from schema `%s`", output_path, compiled.name)
    return GenerationRun(
        output_path=output_path,
        top_level_name=compiled.name,
        definition_names=tuple(definition.name for definition in compiled.definitions),
        formatted=format_output,
    )
