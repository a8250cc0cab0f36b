"""Error taxonomy for schema compilation.

Every error is fatal to the compilation that raised it. Each carries the JSON
pointer of the schema fragment it is anchored to, so a user can locate the
offending part of the document from the message alone.
"""

from __future__ import annotations


class SchemaStructError(RuntimeError):
    """Base class for all schema compilation failures."""

    def __init__(self, message: str, *, path: str = "#") -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}")


class StructuralError(SchemaStructError):
    """Raised when a schema node falls outside the supported vocabulary."""


class TypeMismatchError(SchemaStructError):
    """Raised when a default literal does not match its field's declared shape."""


class NameResolutionError(SchemaStructError):
    """Raised when a ``$ref`` path is illegal or names an undeclared subschema."""


class ConfigurationError(SchemaStructError):
    """Raised when no top-level type identifier can be derived."""
