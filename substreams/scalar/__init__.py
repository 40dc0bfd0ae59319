"""Arbitrary-precision scalar types: BigInt, BigUint and BigDecimal."""

from substreams.scalar.bigdecimal import MAX_EXP, MAX_SIGNIFICANT_DIGITS, MIN_EXP, BigDecimal
from substreams.scalar.bigint import BigInt, BigUint
from substreams.scalar.codec import Sign
from substreams.scalar.errors import (
    BigIntOutOfRangeError,
    DivisionByZero,
    FloatConversionError,
    InvalidStoreBytes,
    NarrowingOverflow,
    NegativeShiftCount,
    OutOfRangeKind,
    ParseBigDecimalError,
    ParseBigIntError,
    ScalarError,
    ScalarPanic,
)
from substreams.scalar.promotion import OperandKind

__all__ = [
    # Types
    "BigInt",
    "BigUint",
    "BigDecimal",
    "Sign",
    "OperandKind",
    # Decimal128 limits (advisory)
    "MAX_SIGNIFICANT_DIGITS",
    "MIN_EXP",
    "MAX_EXP",
    # Recoverable errors
    "ScalarError",
    "ParseBigIntError",
    "ParseBigDecimalError",
    "OutOfRangeKind",
    "BigIntOutOfRangeError",
    # Fatal errors
    "ScalarPanic",
    "DivisionByZero",
    "InvalidStoreBytes",
    "NarrowingOverflow",
    "NegativeShiftCount",
    "FloatConversionError",
]
