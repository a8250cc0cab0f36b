"""Serialization entry points used by generated models.

Generated modules import this module and route their ``from_json`` and
``to_json`` methods through it, so every generated type shares the same wire
behavior: keys are written under their JSON names and optional values are
written as ``null``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, TypeVar

from jsonschema import ValidationError as JSONSchemaValidationError
from jsonschema.exceptions import SchemaError as JSONSchemaDefinitionError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from pydantic import TypeAdapter, ValidationError

from .json_types import JSONValue

T = TypeVar("T")


class JSONSchemaError(RuntimeError):
    """Base class for errors raised by generated entry points."""


class DeserializeError(JSONSchemaError):
    """Raised when a payload is not valid JSON or does not fit the target type."""


class SchemaError(JSONSchemaError):
    """Raised when the captured validation schema is not a valid JSON Schema."""


class SchemaValidationError(JSONSchemaError):
    """Raised when a payload violates the captured validation schema.

    Attributes:
        errors (list[jsonschema.ValidationError]): Every violation found, ordered
            by the location of the offending value.
    """

    def __init__(self, errors: list[JSONSchemaValidationError]) -> None:
        self.errors = errors
        details = "; ".join(f"{error.json_path}: {error.message}" for error in errors)
        super().__init__(f"Payload failed schema validation: {details}")


@lru_cache(maxsize=None)
def _adapter(cls: type[Any]) -> TypeAdapter[Any]:
    return TypeAdapter(cls)


@lru_cache(maxsize=None)
def _validator(schema_text: str) -> Validator:
    schema = json.loads(schema_text)
    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except JSONSchemaDefinitionError as exc:
        raise SchemaError(f"Validation schema is invalid: {exc.message}") from exc
    return validator_cls(schema)


def serialize(value: Any) -> str:
    """Serialize a generated model or enum member into a JSON string."""
    return _adapter(type(value)).dump_json(value, by_alias=True).decode("utf-8")


def serialize_to_value(value: Any) -> JSONValue:
    """Serialize a generated model or enum member into a JSON-compatible value."""
    return _adapter(type(value)).dump_python(value, mode="json", by_alias=True)


def deserialize(cls: type[T], json_data: str) -> T:
    """Deserialize a JSON string into ``cls``.

    Args:
        cls (type[T]): Generated model or enum class.
        json_data (str): JSON payload.

    Returns:
        T: Decoded instance.
    """
    try:
        return _adapter(cls).validate_json(json_data)
    except ValidationError as exc:
        raise DeserializeError(f"Failed to deserialize {cls.__name__}: {exc}") from exc


def deserialize_from_value(cls: type[T], value: JSONValue) -> T:
    """Deserialize an already parsed JSON value into ``cls``.

    Generated models are strict, so the value is decoded in its wire form: enum
    members from their strings and tuples from arrays, as in ``deserialize``.
    """
    try:
        json_data = json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise DeserializeError(f"Failed to deserialize {cls.__name__}: {exc}") from exc
    return deserialize(cls, json_data)


def deserialize_validate(cls: type[T], json_data: str, schema_text: str) -> T:
    """Validate a JSON string against a schema, then deserialize it into ``cls``.

    Args:
        cls (type[T]): Generated model class.
        json_data (str): JSON payload.
        schema_text (str): JSON text of the schema the payload must satisfy.

    Returns:
        T: Decoded instance.
    """
    try:
        value = json.loads(json_data)
    except json.JSONDecodeError as exc:
        raise DeserializeError(f"Failed to deserialize {cls.__name__}: {exc}") from exc
    _check_schema(value, schema_text)
    return deserialize(cls, json_data)


def deserialize_from_value_validate(cls: type[T], value: JSONValue, schema_text: str) -> T:
    """Validate a parsed JSON value against a schema, then deserialize it into ``cls``."""
    _check_schema(value, schema_text)
    return deserialize_from_value(cls, value)


def _check_schema(value: JSONValue, schema_text: str) -> None:
    errors = sorted(_validator(schema_text).iter_errors(value), key=lambda error: error.json_path)
    if errors:
        raise SchemaValidationError(errors)
