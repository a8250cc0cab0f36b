"""Walk the field tree and emit ordered model definitions."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .config import Visibility
from .defaults import field_default
from .model_types import (
    DEFINING_TYPES,
    ArrayType,
    BooleanType,
    CompiledSchema,
    DefaultFunctionDef,
    Definition,
    EnumClassDef,
    EnumType,
    EnumVariantDef,
    Field,
    FieldContext,
    FieldDef,
    IntegerType,
    ModelClassDef,
    ModelFieldDef,
    NullType,
    NumberType,
    ObjectType,
    RefType,
    SchemaModel,
    StringType,
    Subschema,
    TupleType,
    TypeAliasDef,
)
from .naming import default_fn_name, enum_member_names, field_name, model_field_names
from .resolver import declared_type_name, mangled_name

logger = logging.getLogger(__name__)

_PRIMITIVE_ANNOTATIONS = {
    NullType: "None",
    BooleanType: "bool",
    IntegerType: "int",
    NumberType: "float",
    StringType: "str",
}

type _Emitted = tuple[str, tuple[Definition, ...], tuple[Definition, ...]]


def emit_schema(model: SchemaModel) -> CompiledSchema:
    """Emit every definition of a schema model.

    Subschema definitions come first, in declaration order, followed by the
    definitions of the root object; the root model class is last.

    Args:
        model (SchemaModel): Built schema model.

    Returns:
        CompiledSchema: Ordered definitions plus the simplified listing used
            for documentation.
    """
    ctx = FieldContext(
        root_name=model.name,
        name_prefix="",
        visibility=model.visibility,
        schema=model,
    )

    definitions: list[Definition] = []
    doc_definitions: list[Definition] = []
    for _, subschema in model.subschemas:
        defs, defs_doc = emit_subschema(subschema, ctx)
        definitions.extend(defs)
        doc_definitions.extend(defs_doc)

    root_def = emit_field(model.root, ctx)
    *root_children, root_class = root_def.defs
    if not isinstance(root_class, ModelClassDef):
        raise TypeError(f"Root field produced {type(root_class).__name__}, expected a model class")
    definitions.extend(root_children)
    definitions.append(replace(root_class, top_level=True))
    doc_definitions.extend(root_def.defs_doc)

    exported_names: tuple[str, ...] = ()
    if model.visibility is Visibility.PUBLIC:
        exported_names = tuple(
            definition.name
            for definition in definitions
            if not isinstance(definition, DefaultFunctionDef)
        )

    logger.debug("Emitted %d definition(s) for `%s`", len(definitions), model.name)
    return CompiledSchema(
        name=root_class.name,
        description=model.description,
        visibility=model.visibility,
        definitions=tuple(definitions),
        doc_definitions=tuple(doc_definitions) if model.full_definition_doc else None,
        validation_schema=model.validation_schema,
        debug=model.debug,
        exported_names=exported_names,
    )


def emit_subschema(
    subschema: Subschema,
    ctx: FieldContext,
) -> tuple[tuple[Definition, ...], tuple[Definition, ...]]:
    """Emit one named subschema.

    Objects and enums already produce a class under the mangled subschema name;
    every other shape is bound to that name through a ``type`` alias.
    """
    if isinstance(subschema.field.type, DEFINING_TYPES):
        field_def = emit_field(subschema.field, replace(ctx, name_prefix=""))
        return field_def.defs, field_def.defs_doc

    alias_name = declared_type_name(subschema.field.info, ctx)
    field_def = emit_field(_renamed(subschema.field, alias_name), replace(ctx, name_prefix=""))
    alias = TypeAliasDef(
        name=alias_name,
        description=subschema.field.info.description,
        annotation=field_def.annotation,
    )
    return (*field_def.defs, alias), (*field_def.defs_doc, alias)


def _renamed(field: Field, name: str) -> Field:
    """Rename a field along with the item slots that inherit its name."""
    match field.type:
        case ArrayType(items=items):
            field_type = replace(field.type, items=_renamed(items, name))
        case TupleType(items=items):
            field_type = replace(
                field.type,
                items=tuple(_renamed(item, f"{name}{index}") for index, item in enumerate(items)),
            )
        case _:
            field_type = field.type
    return Field(info=replace(field.info, name=name), type=field_type)


def emit_field(
    field: Field,
    ctx: FieldContext,
    *,
    attribute: Optional[tuple[str, Optional[str]]] = None,
) -> FieldDef:
    """Emit the annotation and new definitions for one field position.

    Args:
        field (Field): Field to emit.
        ctx (FieldContext): Context whose ``name_prefix`` belongs to the
            enclosing type.
        attribute (Optional[tuple[str, Optional[str]]]): Attribute name and wire
            alias when the field is a property of a model. Only properties bind
            their declared default to a producer function.

    Returns:
        FieldDef: Annotation, naming and accumulated definitions.
    """
    info = field.info
    name, rename = attribute if attribute is not None else field_name(info.name)
    annotation, defs, defs_doc = _emit_type(field, ctx)
    if not info.required:
        annotation = f"Optional[{annotation}]"

    producer: Optional[str] = None
    if attribute is not None:
        expression = field_default(field, ctx)
        if expression is not None:
            producer = default_fn_name(ctx.name_prefix, name)
            defs = (
                *defs,
                DefaultFunctionDef(name=producer, annotation=annotation, expression=expression),
            )

    return FieldDef(
        field_name=name,
        field_rename=rename,
        field_default=producer,
        field_doc=info.description,
        annotation=annotation,
        defs=defs,
        defs_doc=defs_doc,
    )


def _emit_type(field: Field, ctx: FieldContext) -> _Emitted:
    match field.type:
        case NullType() | BooleanType() | IntegerType() | NumberType() | StringType():
            return _PRIMITIVE_ANNOTATIONS[type(field.type)], (), ()
        case ArrayType(items=items):
            items_def = emit_field(items, replace(ctx, name_prefix=f"{ctx.name_prefix}Items"))
            return f"list[{items_def.annotation}]", items_def.defs, items_def.defs_doc
        case ObjectType(properties=properties):
            return _emit_object(field, properties, ctx)
        case EnumType(variants=variants):
            enum_def = EnumClassDef(
                name=declared_type_name(field.info, ctx),
                description=field.info.description,
                variants=tuple(
                    EnumVariantDef(name=member, value=variant)
                    for (member, _), variant in zip(enum_member_names(variants), variants)
                ),
            )
            return enum_def.name, (enum_def,), (enum_def,)
        case TupleType(items=items):
            defs: list[Definition] = []
            defs_doc: list[Definition] = []
            annotations: list[str] = []
            for item in items:
                item_def = emit_field(item, ctx)
                defs.extend(item_def.defs)
                defs_doc.extend(item_def.defs_doc)
                annotations.append(item_def.annotation)
            return f"tuple[{', '.join(annotations)}]", tuple(defs), tuple(defs_doc)
        case RefType(target=target):
            return mangled_name(target, ctx.root_name), (), ()
    raise TypeError(f"Unsupported field type: {field.type!r}")


def _emit_object(
    field: Field,
    properties: tuple[tuple[str, Field], ...],
    ctx: FieldContext,
) -> _Emitted:
    struct_name = declared_type_name(field.info, ctx)
    inner_ctx = replace(ctx, name_prefix=struct_name)
    names = model_field_names(key for key, _ in properties)

    defs: list[Definition] = []
    defs_doc: list[Definition] = []
    model_fields: list[ModelFieldDef] = []
    for (_, child), attribute in zip(properties, names):
        child_def = emit_field(child, inner_ctx, attribute=attribute)
        defs.extend(child_def.defs)
        defs_doc.extend(child_def.defs_doc)
        model_fields.append(
            ModelFieldDef(
                name=child_def.field_name,
                alias=child_def.field_rename,
                annotation=child_def.annotation,
                description=child_def.field_doc,
                default=None if child.info.required or child_def.field_default else "None",
                default_factory=child_def.field_default,
            )
        )

    model_def = ModelClassDef(
        name=struct_name,
        description=field.info.description,
        fields=tuple(model_fields),
    )
    defs.append(model_def)
    defs_doc.append(model_def)
    return struct_name, tuple(defs), tuple(defs_doc)
