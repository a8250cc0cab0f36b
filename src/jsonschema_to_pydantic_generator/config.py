"""Invocation configuration for one schema compilation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .json_types import JSONObject


class Visibility(str, Enum):
    """Export level of the generated types."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class SchemaStructConfig:
    """Options controlling how a schema is compiled into models.

    Attributes:
        schema (JSONObject): The parsed schema document.
        ident (Optional[str]): Explicit top-level type name. Falls back to the
            schema ``title`` when omitted.
        visibility (Visibility): ``PUBLIC`` lists every generated type in the
            module's ``__all__``; ``PRIVATE`` exports nothing.
        definition_doc (bool): Embed a simplified listing of all generated
            definitions in the top-level class docstring.
        validate (bool): Validate payloads against the schema before decoding
            them with the top-level ``from_json``.
        debug (bool): Dump the generated module to the diagnostic sink.
    """

    schema: JSONObject
    ident: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    definition_doc: bool = True
    validate: bool = False
    debug: bool = False
