"""Reference resolution for ``$ref`` paths and subschema naming."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import NameResolutionError
from .json_types import JSONObject
from .model_types import (
    ArrayType,
    Field,
    FieldContext,
    FieldInfo,
    ObjectType,
    RefTarget,
    RefType,
    RootTarget,
    SchemaModel,
    SubschemaTarget,
    TupleType,
)
from .naming import type_name
from .schema_utils import get_prop_obj, pointer, unescape_token

logger = logging.getLogger(__name__)

ROOT = RootTarget()

_DEFINITIONS_KEYWORDS: tuple[str, ...] = ("$defs", "definitions")
_SUBSCHEMA_INFIX = "def"


def resolve_ref(ref: str, *, path: str = "#") -> RefTarget:
    """Map a ``$ref`` path onto the root or a named subschema.

    Args:
        ref (str): The ``$ref`` value.
        path (str): Pointer of the referencing node, used in error messages.

    Returns:
        RefTarget: The symbolic target; nothing is inlined.
    """
    if ref == "#":
        return ROOT

    segments = ref.split("/")
    if len(segments) == 3 and segments[0] == "#" and segments[1] in _DEFINITIONS_KEYWORDS:
        name = unescape_token(segments[2])
        if name:
            return SubschemaTarget(name)

    raise NameResolutionError(
        f"ref path `{ref}` must either reference the root object or a subschema",
        path=path,
    )


def mangled_name(target: RefTarget, root_name: str) -> str:
    """Return the emitted type name of a reference target."""
    match target:
        case RootTarget():
            return type_name(root_name)
        case SubschemaTarget(name=name):
            return type_name(f"{root_name}_{_SUBSCHEMA_INFIX}_{name}")
    raise TypeError(f"Unsupported reference target: {target!r}")


def declared_type_name(info: FieldInfo, ctx: FieldContext) -> str:
    """Name of the class an object or enum field at this position introduces."""
    if info.subschema:
        return mangled_name(SubschemaTarget(info.name), ctx.root_name)
    return f"{ctx.name_prefix}{type_name(info.name)}"


def subschema_definitions(
    schema: JSONObject,
    *,
    path: str = "#",
) -> Optional[tuple[str, JSONObject]]:
    """Find the definitions section of a schema.

    The first present keyword wins; a second section is ignored with a warning.

    Args:
        schema (JSONObject): Root schema document.
        path (str): Pointer of the root node.

    Returns:
        Optional[tuple[str, JSONObject]]: The keyword used and its mapping, or
            ``None`` when the schema declares no subschemas.
    """
    found: Optional[tuple[str, JSONObject]] = None
    for keyword in _DEFINITIONS_KEYWORDS:
        definitions = get_prop_obj(schema, keyword, path=path)
        if definitions is None:
            continue
        if found is None:
            found = (keyword, definitions)
            continue
        logger.warning(
            "Schema declares both `%s` and `%s`; only `%s` is used and %d definition(s) "
            "under `%s` are ignored",
            found[0],
            keyword,
            found[0],
            len(definitions),
            keyword,
        )
    return found


def check_refs(model: SchemaModel) -> None:
    """Ensure every subschema reference in the model names a declared subschema."""
    for _, subschema in model.subschemas:
        _check_field(subschema.field, model)
    _check_field(model.root, model)


def _check_field(field: Field, model: SchemaModel) -> None:
    match field.type:
        case RefType(target=SubschemaTarget(name=name)):
            if model.subschema(name) is None:
                raise NameResolutionError(
                    f"ref path references undeclared subschema `{name}`",
                    path=pointer(field.info.path, "$ref"),
                )
        case ArrayType(items=items):
            _check_field(items, model)
        case ObjectType(properties=properties):
            for _, child in properties:
                _check_field(child, model)
        case TupleType(items=items):
            for child in items:
                _check_field(child, model)
