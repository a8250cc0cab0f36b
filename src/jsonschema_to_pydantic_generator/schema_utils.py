"""Shared helpers for reading raw JSON-Schema nodes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from .errors import StructuralError
from .json_types import JSONArray, JSONObject, JSONValue

NULL = "null"
BOOLEAN = "boolean"
INTEGER = "integer"
NUMBER = "number"
STRING = "string"
ARRAY = "array"
OBJECT = "object"
ENUM = "enum"
TUPLE = "tuple"
REF = "ref"

_DECLARED_TYPES: frozenset[str] = frozenset({NULL, BOOLEAN, INTEGER, NUMBER, STRING, ARRAY, OBJECT})


def pointer(path: str, *tokens: str) -> str:
    """Extend a JSON pointer with escaped reference tokens.

    Args:
        path (str): Pointer of the parent node, rooted at ``#``.
        *tokens (str): Unescaped child keys.

    Returns:
        str: Pointer of the child node.
    """
    escaped = [token.replace("~", "~0").replace("/", "~1") for token in tokens]
    return "/".join([path, *escaped])


def unescape_token(token: str) -> str:
    """Undo JSON pointer escaping for a single reference token."""
    return token.replace("~1", "/").replace("~0", "~")


def as_schema_node(value: JSONValue, *, path: str) -> JSONObject:
    """Return ``value`` as a schema object or fail structurally."""
    if not isinstance(value, Mapping):
        raise StructuralError(
            f"expected a schema object, got {type(value).__name__}",
            path=path,
        )
    return value


def get_prop_str(node: JSONObject, prop: str, *, path: str) -> Optional[str]:
    """Read an optional string property."""
    if prop not in node:
        return None
    value = node[prop]
    if not isinstance(value, str):
        raise StructuralError(f"expected property `{prop}` to be a string", path=path)
    return value


def get_prop_array(node: JSONObject, prop: str, *, path: str) -> Optional[JSONArray]:
    """Read an optional array property."""
    if prop not in node:
        return None
    value = node[prop]
    if not isinstance(value, list):
        raise StructuralError(f"expected property `{prop}` to be an array", path=path)
    return value


def get_prop_obj(node: JSONObject, prop: str, *, path: str) -> Optional[JSONObject]:
    """Read an optional object property."""
    if prop not in node:
        return None
    value = node[prop]
    if not isinstance(value, Mapping):
        raise StructuralError(f"expected property `{prop}` to be an object", path=path)
    return value


def classify(node: JSONObject, *, path: str) -> str:
    """Determine which field variant a schema node describes.

    ``$ref`` wins over everything, then a ``type``-less ``enum``, then an
    ``array`` carrying ``prefixItems`` (a tuple), then the declared ``type``.

    Args:
        node (JSONObject): Schema node to inspect.
        path (str): Pointer of the node, used in error messages.

    Returns:
        str: One of the variant kind constants of this module.
    """
    if "$ref" in node:
        return REF

    declared = node.get("type")
    if declared is None:
        if "enum" in node:
            return ENUM
        raise StructuralError("value type not specified", path=path)

    if not isinstance(declared, str):
        raise StructuralError("value type must be a string", path=path)
    if declared == ARRAY and "prefixItems" in node:
        return TUPLE
    if declared not in _DECLARED_TYPES:
        raise StructuralError(f"unknown JSON type `{declared}`", path=path)
    return declared
