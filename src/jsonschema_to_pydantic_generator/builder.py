"""Build the immutable field tree from a raw schema document."""

from __future__ import annotations

import json
import logging
from typing import Optional

from .config import SchemaStructConfig
from .errors import ConfigurationError, StructuralError
from .json_types import JSONObject, JSONValue
from .model_types import (
    ArrayType,
    BooleanType,
    EnumType,
    Field,
    FieldInfo,
    FieldType,
    IntegerType,
    NullType,
    NumberType,
    ObjectType,
    RawDefault,
    RefType,
    SchemaModel,
    StringType,
    Subschema,
    TupleType,
)
from .naming import type_name
from .resolver import check_refs, resolve_ref, subschema_definitions
from .schema_utils import (
    ARRAY,
    BOOLEAN,
    ENUM,
    INTEGER,
    NULL,
    NUMBER,
    OBJECT,
    REF,
    STRING,
    TUPLE,
    as_schema_node,
    classify,
    get_prop_array,
    get_prop_obj,
    get_prop_str,
    pointer,
)

logger = logging.getLogger(__name__)

_PRIMITIVES = {
    NULL: NullType,
    BOOLEAN: BooleanType,
    INTEGER: IntegerType,
    NUMBER: NumberType,
    STRING: StringType,
}


def build_schema_model(config: SchemaStructConfig) -> SchemaModel:
    """Parse a schema document into a ``SchemaModel``.

    Args:
        config (SchemaStructConfig): Compilation request carrying the schema.

    Returns:
        SchemaModel: Top-level model with its subschemas and root object field.
    """
    schema = as_schema_node(config.schema, path="#")
    name = _top_level_name(config, schema)
    description = get_prop_str(schema, "description", path="#")

    subschemas: list[tuple[str, Subschema]] = []
    definitions = subschema_definitions(schema, path="#")
    if definitions is not None:
        keyword, entries = definitions
        for subschema_name, value in entries.items():
            info = FieldInfo(
                name=subschema_name,
                description=None,
                required=True,
                subschema=True,
                path=pointer("#", keyword, subschema_name),
            )
            field = build_field(value, info)
            subschemas.append((subschema_name, Subschema(name=subschema_name, field=field)))
        logger.debug("Read %d subschema(s) from `%s`", len(subschemas), keyword)

    root = build_field(schema, FieldInfo(name=name, description=description, path="#"))
    if not isinstance(root.type, ObjectType):
        raise StructuralError("top-level schema must be of type `object`", path="#")

    model = SchemaModel(
        visibility=config.visibility,
        name=name,
        description=description,
        subschemas=tuple(subschemas),
        root=root,
        full_definition_doc=config.definition_doc,
        validation_schema=_capture_schema(config.schema) if config.validate else None,
        debug=config.debug,
    )
    check_refs(model)
    return model


def _capture_schema(schema: JSONObject) -> str:
    try:
        return json.dumps(schema)
    except (TypeError, ValueError) as exc:
        raise StructuralError(f"schema cannot be captured as JSON for validation: {exc}", path="#") from exc


def _top_level_name(config: SchemaStructConfig, schema: JSONObject) -> str:
    if config.ident is not None:
        return type_name(config.ident)
    title = get_prop_str(schema, "title", path="#")
    if title is None:
        raise ConfigurationError(
            "schema has no `title`; an explicit identifier must be provided",
            path="#",
        )
    return type_name(title)


def build_field(value: JSONValue, info: FieldInfo) -> Field:
    """Classify one schema node and build its field, recursing into children.

    Args:
        value (JSONValue): Raw schema node.
        info (FieldInfo): Name, requiredness and location of this position.
            A ``description`` on the node itself replaces the one in ``info``.

    Returns:
        Field: The built field.
    """
    path = info.path
    node = as_schema_node(value, path=path)
    description = get_prop_str(node, "description", path=path)
    if description is not None and description != info.description:
        info = FieldInfo(
            name=info.name,
            description=description,
            required=info.required,
            subschema=info.subschema,
            path=info.path,
        )
    default = RawDefault(node["default"]) if "default" in node else None
    return Field(info=info, type=_build_type(classify(node, path=path), node, info, default))


def _build_type(
    kind: str,
    node: JSONObject,
    info: FieldInfo,
    default: Optional[RawDefault],
) -> FieldType:
    path = info.path
    if kind in _PRIMITIVES:
        return _PRIMITIVES[kind](default=default)
    if kind == ARRAY:
        return _build_array(node, info, default)
    if kind == OBJECT:
        return _build_object(node, info, default)
    if kind == ENUM:
        return _build_enum(node, path, default)
    if kind == TUPLE:
        return _build_tuple(node, info, default)
    if kind == REF:
        ref = get_prop_str(node, "$ref", path=path)
        return RefType(target=resolve_ref(ref, path=pointer(path, "$ref")), default=default)
    raise StructuralError(f"unknown JSON type `{kind}`", path=path)


def _build_array(node: JSONObject, info: FieldInfo, default: Optional[RawDefault]) -> ArrayType:
    if "items" not in node:
        raise StructuralError("array schema requires `items`", path=info.path)
    # Items reuse the array's name and requiredness.
    items_info = FieldInfo(
        name=info.name,
        description=None,
        required=info.required,
        subschema=False,
        path=pointer(info.path, "items"),
    )
    return ArrayType(items=build_field(node["items"], items_info), default=default)


def _build_object(node: JSONObject, info: FieldInfo, default: Optional[RawDefault]) -> ObjectType:
    path = info.path
    properties = get_prop_obj(node, "properties", path=path) or {}
    required_names = get_prop_array(node, "required", path=path) or []
    for entry in required_names:
        if not isinstance(entry, str):
            raise StructuralError("entries of `required` must be strings", path=pointer(path, "required"))
    required = set(required_names)

    fields: list[tuple[str, Field]] = []
    for property_name, value in properties.items():
        child_info = FieldInfo(
            name=property_name,
            required=property_name in required,
            path=pointer(path, "properties", property_name),
        )
        fields.append((property_name, build_field(value, child_info)))
    return ObjectType(properties=tuple(fields), default=default)


def _build_enum(node: JSONObject, path: str, default: Optional[RawDefault]) -> EnumType:
    variants = get_prop_array(node, "enum", path=path)
    if not variants:
        raise StructuralError("`enum` must be a non-empty array", path=path)
    if not all(isinstance(variant, str) for variant in variants):
        raise StructuralError("`enum` variants must be strings", path=pointer(path, "enum"))
    return EnumType(variants=tuple(variants), default=default)


def _build_tuple(node: JSONObject, info: FieldInfo, default: Optional[RawDefault]) -> TupleType:
    prefix_items = get_prop_array(node, "prefixItems", path=info.path)
    if not prefix_items:
        raise StructuralError("`prefixItems` must be a non-empty array", path=info.path)
    items = tuple(
        build_field(
            value,
            FieldInfo(
                name=f"{info.name}{index}",
                required=True,
                path=pointer(info.path, "prefixItems", str(index)),
            ),
        )
        for index, value in enumerate(prefix_items)
    )
    return TupleType(items=items, default=default)
