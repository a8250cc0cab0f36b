"""JSON Schema to pydantic generator package."""

from __future__ import annotations

from .cli import main
from .config import SchemaStructConfig, Visibility
from .generator import GenerationRun, SchemaSource, compile_schema, run_generation

__all__ = [
    "GenerationRun",
    "SchemaSource",
    "SchemaStructConfig",
    "Visibility",
    "compile_schema",
    "main",
    "run_generation",
]
