"""Pydantic field types for scalar values.

Two flavours per scalar:
- ``BigIntStr`` / ``BigDecimalStr``: canonical decimal strings, for models
  that pass values through as text (the persisted format)
- ``BigIntValue`` / ``BigDecimalValue``: the numeric types themselves, which
  serialize back to the canonical decimal string

All of them accept store text (str or bytes, where empty bytes mean zero),
Python ints and scalar instances. Malformed input fails validation with a
ValueError rather than the fatal store-bytes error.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer, PlainValidator, WithJsonSchema

from substreams.scalar import BigDecimal, BigInt


def _store_text(value: bytes | bytearray) -> str:
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError(f"Store bytes are not valid UTF-8: '{bytes(value).hex()}'") from err


def coerce_bigint(value: Any) -> BigInt:
    """Convert a field value into a BigInt.

    Args:
        value: BigInt, int, decimal string or store bytes

    Returns:
        A new BigInt (never the caller's instance)

    Raises:
        ValueError: If value is not an integer or not a valid decimal integer
    """
    if isinstance(value, BigInt):
        return value.clone()
    if isinstance(value, (bytes, bytearray)):
        text = _store_text(value)
        return BigInt.from_str(text) if text else BigInt.zero()
    if isinstance(value, str):
        return BigInt.from_str(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return BigInt(value)
    raise ValueError(f"BigInt must be string, bytes or int, got {type(value).__name__}")


def coerce_bigdecimal(value: Any) -> BigDecimal:
    """Convert a field value into a BigDecimal.

    Args:
        value: BigDecimal, BigInt, int, float, Decimal, decimal string or store bytes

    Raises:
        ValueError: If value is not numeric, not finite or not a valid decimal
    """
    if isinstance(value, BigDecimal):
        return value
    if isinstance(value, (bytes, bytearray)):
        text = _store_text(value)
        return BigDecimal.from_str(text) if text else BigDecimal.zero()
    if isinstance(value, str):
        return BigDecimal.from_str(value)
    if isinstance(value, float):
        return BigDecimal.try_from_float(value)
    if isinstance(value, (BigInt, Decimal)) or (isinstance(value, int) and not isinstance(value, bool)):
        return BigDecimal(value)
    raise ValueError(f"BigDecimal must be string, bytes or number, got {type(value).__name__}")


def validate_bigint_str(value: Any) -> str:
    """Validate a BigInt field and return its canonical decimal string."""
    return str(coerce_bigint(value))


def validate_bigdecimal_str(value: Any) -> str:
    """Validate a BigDecimal field and return its canonical decimal string."""
    return str(coerce_bigdecimal(value))


_DECIMAL_STRING_SCHEMA = WithJsonSchema({"type": "string"})

# Arbitrary-precision integer as canonical decimal string
BigIntStr = Annotated[
    str,
    BeforeValidator(validate_bigint_str),
    Field(description="Arbitrary-precision integer as decimal string"),
]

# Arbitrary-precision decimal as canonical decimal string
BigDecimalStr = Annotated[
    str,
    BeforeValidator(validate_bigdecimal_str),
    Field(description="Arbitrary-precision decimal as decimal string"),
]

# Models using these need arbitrary_types_allowed
BigIntValue = Annotated[
    BigInt,
    PlainValidator(coerce_bigint),
    PlainSerializer(str, return_type=str),
    _DECIMAL_STRING_SCHEMA,
]

BigDecimalValue = Annotated[
    BigDecimal,
    PlainValidator(coerce_bigdecimal),
    PlainSerializer(str, return_type=str),
    _DECIMAL_STRING_SCHEMA,
]
