"""Internal datatypes for the field tree and the emitted definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .config import Visibility
from .json_types import JSONValue


@dataclass(frozen=True)
class RawDefault:
    """An unparsed ``default`` value, kept apart from "no default declared"."""

    value: JSONValue


@dataclass(frozen=True)
class FieldInfo:
    """Information that applies to every field position."""

    name: str
    description: Optional[str] = None
    required: bool = True
    subschema: bool = False
    path: str = "#"


@dataclass(frozen=True)
class NullType:
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class BooleanType:
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class IntegerType:
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class NumberType:
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class StringType:
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class ArrayType:
    """A homogeneous array described by a single item field."""

    items: Field
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class ObjectType:
    """An object; ``properties`` keeps declaration order."""

    properties: tuple[tuple[str, Field], ...] = ()
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class EnumType:
    variants: tuple[str, ...]
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class TupleType:
    """A fixed-arity array declared through ``prefixItems``."""

    items: tuple[Field, ...]
    default: Optional[RawDefault] = None


@dataclass(frozen=True)
class RootTarget:
    """Reference to the schema root."""


@dataclass(frozen=True)
class SubschemaTarget:
    """Reference to a named entry of the definitions section."""

    name: str


type RefTarget = Union[RootTarget, SubschemaTarget]


@dataclass(frozen=True)
class RefType:
    target: RefTarget
    default: Optional[RawDefault] = None


type FieldType = Union[
    NullType,
    BooleanType,
    IntegerType,
    NumberType,
    StringType,
    ArrayType,
    ObjectType,
    EnumType,
    TupleType,
    RefType,
]

PRIMITIVE_TYPES = (NullType, BooleanType, IntegerType, NumberType, StringType)
DEFINING_TYPES = (ObjectType, EnumType)


@dataclass(frozen=True)
class Field:
    """One position in the field tree."""

    info: FieldInfo
    type: FieldType


@dataclass(frozen=True)
class Subschema:
    """A named, reusable definition."""

    name: str
    field: Field


@dataclass(frozen=True)
class SchemaModel:
    """The whole compilation unit produced by the model builder."""

    visibility: Visibility
    name: str
    description: Optional[str]
    subschemas: tuple[tuple[str, Subschema], ...]
    root: Field
    full_definition_doc: bool
    validation_schema: Optional[str]
    debug: bool

    def subschema(self, name: str) -> Optional[Subschema]:
        """Look up a subschema by its declared name."""
        for subschema_name, subschema in self.subschemas:
            if subschema_name == name:
                return subschema
        return None


@dataclass(frozen=True)
class FieldContext:
    """Read-only context threaded through emission."""

    root_name: str
    name_prefix: str
    visibility: Visibility
    schema: SchemaModel


@dataclass(frozen=True)
class ModelFieldDef:
    """A single attribute of a generated pydantic model."""

    name: str
    alias: Optional[str]
    annotation: str
    description: Optional[str]
    default: Optional[str]
    default_factory: Optional[str]


@dataclass(frozen=True)
class ModelClassDef:
    """A generated pydantic model class."""

    name: str
    description: Optional[str]
    fields: tuple[ModelFieldDef, ...]
    top_level: bool = False


@dataclass(frozen=True)
class EnumVariantDef:
    name: str
    value: str


@dataclass(frozen=True)
class EnumClassDef:
    """A generated string enum."""

    name: str
    description: Optional[str]
    variants: tuple[EnumVariantDef, ...]


@dataclass(frozen=True)
class TypeAliasDef:
    """A ``type`` alias standing for a subschema that declares no class."""

    name: str
    description: Optional[str]
    annotation: str


@dataclass(frozen=True)
class DefaultFunctionDef:
    """A nullary function producing one attribute's default value."""

    name: str
    annotation: str
    expression: str


type Definition = Union[ModelClassDef, EnumClassDef, TypeAliasDef, DefaultFunctionDef]


@dataclass(frozen=True)
class FieldDef:
    """Emission result for one field position."""

    field_name: str
    field_rename: Optional[str]
    field_default: Optional[str]
    field_doc: Optional[str]
    annotation: str
    defs: tuple[Definition, ...] = ()
    defs_doc: tuple[Definition, ...] = ()


@dataclass(frozen=True)
class CompiledSchema:
    """Ordered definitions for one compiled schema."""

    name: str
    description: Optional[str]
    visibility: Visibility
    definitions: tuple[Definition, ...]
    doc_definitions: Optional[tuple[Definition, ...]]
    validation_schema: Optional[str]
    debug: bool = False
    exported_names: tuple[str, ...] = ()
