"""Synthesize Python construction expressions from raw ``default`` values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Optional

from .errors import TypeMismatchError
from .json_types import JSONValue
from .model_types import (
    ArrayType,
    BooleanType,
    EnumType,
    Field,
    FieldContext,
    IntegerType,
    NullType,
    NumberType,
    ObjectType,
    RefType,
    StringType,
    TupleType,
)
from .naming import enum_member_names, model_field_names
from .resolver import declared_type_name
from .schema_utils import pointer

NONE_EXPRESSION = "None"


def field_default(field: Field, ctx: FieldContext) -> Optional[str]:
    """Synthesize the default a field declares for itself.

    Args:
        field (Field): Field whose own ``default`` is used.
        ctx (FieldContext): Context of the position the field occupies.

    Returns:
        Optional[str]: Python expression, or ``None`` when no default applies.
    """
    default = field.type.default
    if default is None:
        return None
    return synthesize_default(default.value, field, ctx)


def synthesize_default(value: JSONValue, field: Field, ctx: FieldContext) -> Optional[str]:
    """Turn a raw default value into an expression of the field's declared shape.

    Args:
        value (JSONValue): Raw default value.
        field (Field): Field the value must type-check against.
        ctx (FieldContext): Context of the position the field occupies.

    Returns:
        Optional[str]: Python expression, or ``None`` for reference fields,
            which never receive defaults.
    """
    path = pointer(field.info.path, "default")
    match field.type:
        case NullType():
            if value is not None:
                raise TypeMismatchError("expected default value to be null", path=path)
            return NONE_EXPRESSION
        case BooleanType():
            if not isinstance(value, bool):
                raise TypeMismatchError("expected default value to be a boolean", path=path)
            return repr(value)
        case IntegerType():
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeMismatchError("expected default value to be an integer", path=path)
            return repr(value)
        case NumberType():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeMismatchError("expected default value to be a number", path=path)
            return repr(float(value))
        case StringType():
            if not isinstance(value, str):
                raise TypeMismatchError("expected default value to be a string", path=path)
            return repr(value)
        case ArrayType(items=items):
            if not isinstance(value, list):
                raise TypeMismatchError("expected default value to be an array", path=path)
            items_ctx = replace(ctx, name_prefix=f"{ctx.name_prefix}Items")
            elements = [_or_none(synthesize_default(element, items, items_ctx)) for element in value]
            return f"[{', '.join(elements)}]"
        case ObjectType(properties=properties):
            if not isinstance(value, Mapping):
                raise TypeMismatchError("expected default value to be an object", path=path)
            return _object_default(value, properties, field, ctx)
        case EnumType(variants=variants):
            if not isinstance(value, str):
                raise TypeMismatchError(
                    "expected default value to be an enum variant string",
                    path=path,
                )
            if value not in variants:
                raise TypeMismatchError(
                    f"default value `{value}` is not one of the enum variants",
                    path=path,
                )
            member, _ = enum_member_names(variants)[variants.index(value)]
            return f"{declared_type_name(field.info, ctx)}.{member}"
        case TupleType(items=items):
            if not isinstance(value, list):
                raise TypeMismatchError("expected default value to be a tuple array", path=path)
            if len(value) != len(items):
                raise TypeMismatchError(
                    "tuple definition and default values have different lengths "
                    f"({len(items)} != {len(value)})",
                    path=path,
                )
            elements = [
                _or_none(synthesize_default(element, item, ctx))
                for element, item in zip(value, items)
            ]
            if len(elements) == 1:
                return f"({elements[0]},)"
            return f"({', '.join(elements)})"
        case RefType():
            return None
    raise TypeError(f"Unsupported field type: {field.type!r}")


def _object_default(
    value: Mapping[str, JSONValue],
    properties: tuple[tuple[str, Field], ...],
    field: Field,
    ctx: FieldContext,
) -> str:
    struct_name = declared_type_name(field.info, ctx)
    inner_ctx = replace(ctx, name_prefix=struct_name)
    keys = [key for key, _ in properties]

    arguments: list[str] = []
    for (key, child), (attribute, _) in zip(properties, model_field_names(keys)):
        if key in value:
            expression = _or_none(synthesize_default(value[key], child, inner_ctx))
        else:
            expression = field_default(child, inner_ctx)
            if expression is None:
                if child.info.required:
                    raise TypeMismatchError(
                        f"property `{key}` is not nullable and has no default",
                        path=pointer(field.info.path, "default"),
                    )
                expression = NONE_EXPRESSION
        arguments.append(f"{attribute}={expression}")
    return f"{struct_name}({', '.join(arguments)})"


def _or_none(expression: Optional[str]) -> str:
    return NONE_EXPRESSION if expression is None else expression
