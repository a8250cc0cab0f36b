"""Unit tests for the serialization helpers shared by generated modules."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from jsonschema_to_pydantic_generator import runtime


class _Color(Enum):
    Red = "red"
    DarkBlue = "dark blue"


class _Swatch(BaseModel):
    model_config = ConfigDict(strict=True, validate_by_name=True)

    color_name: _Color = Field(..., alias="colorName")
    weight: Optional[float] = Field(None)


_SWATCH_SCHEMA = (
    '{"type": "object", "properties": {"weight": {"type": "number", "minimum": 0}},'
    ' "required": ["colorName"]}'
)


def test_serialize_writes_aliases_and_nulls() -> None:
    """Keys use their JSON names and absent optionals are written as null."""
    swatch = _Swatch(color_name=_Color.DarkBlue)
    assert runtime.serialize(swatch) == '{"colorName":"dark blue","weight":null}'
    assert runtime.serialize_to_value(swatch) == {"colorName": "dark blue", "weight": None}
    assert runtime.serialize(_Color.Red) == '"red"'


def test_deserialize_string_and_value() -> None:
    """JSON text and parsed values decode to the same instance."""
    from_text = runtime.deserialize(_Swatch, '{"colorName": "red", "weight": 2}')
    from_value = runtime.deserialize_from_value(_Swatch, {"colorName": "red", "weight": 2})
    assert from_text == from_value
    assert from_text.color_name is _Color.Red
    assert runtime.deserialize(_Color, '"dark blue"') is _Color.DarkBlue


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"weight": 1}',
        '{"colorName": "green"}',
        '{"colorName": "red", "weight": "x"}',
        '{"colorName": "red", "weight": "2"}',
    ],
)
def test_deserialize_failures(payload: str) -> None:
    """Malformed or ill-typed payloads raise ``DeserializeError``."""
    with pytest.raises(runtime.DeserializeError):
        runtime.deserialize(_Swatch, payload)


def test_validation_collects_every_violation() -> None:
    """Schema violations are reported together, ordered by location."""
    with pytest.raises(runtime.SchemaValidationError) as excinfo:
        runtime.deserialize_validate(_Swatch, '{"weight": -1}', _SWATCH_SCHEMA)
    errors = excinfo.value.errors
    assert [error.json_path for error in errors] == ["$", "$.weight"]
    assert "$.weight" in str(excinfo.value)

    swatch = runtime.deserialize_validate(_Swatch, '{"colorName": "red"}', _SWATCH_SCHEMA)
    assert swatch.weight is None


def test_validation_rejects_malformed_json() -> None:
    """Text that is not JSON fails before validation runs."""
    with pytest.raises(runtime.DeserializeError):
        runtime.deserialize_validate(_Swatch, "{", _SWATCH_SCHEMA)


def test_invalid_validation_schema() -> None:
    """A captured schema that is not itself valid raises ``SchemaError``."""
    with pytest.raises(runtime.SchemaError):
        runtime.deserialize_validate(_Swatch, '{"colorName": "red"}', '{"type": 5}')


def test_validated_payload_may_still_fail_decoding() -> None:
    """Passing the schema does not bypass type checking of the model."""
    with pytest.raises(runtime.DeserializeError):
        runtime.deserialize_from_value_validate(_Swatch, {"colorName": "blue"}, _SWATCH_SCHEMA)


def test_value_decoding_uses_wire_form() -> None:
    """Parsed values decode like their JSON text, so strict enums accept wire strings."""
    swatch = runtime.deserialize_from_value(_Swatch, {"colorName": "dark blue"})
    assert swatch.color_name is _Color.DarkBlue
    with pytest.raises(runtime.DeserializeError):
        runtime.deserialize_from_value(_Swatch, {"colorName": "red", "weight": "2"})
