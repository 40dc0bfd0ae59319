"""Pydantic models for scalar values at the store boundary."""

from substreams.models.delta import Delta, DeltaBigDecimal, DeltaBigInt, Deltas, Operation, StoreDelta
from substreams.models.types import (
    BigDecimalStr,
    BigDecimalValue,
    BigIntStr,
    BigIntValue,
    coerce_bigdecimal,
    coerce_bigint,
)

__all__ = [
    # Types
    "BigIntStr",
    "BigDecimalStr",
    "BigIntValue",
    "BigDecimalValue",
    "coerce_bigint",
    "coerce_bigdecimal",
    # Store deltas
    "Operation",
    "StoreDelta",
    "Delta",
    "DeltaBigInt",
    "DeltaBigDecimal",
    "Deltas",
]
