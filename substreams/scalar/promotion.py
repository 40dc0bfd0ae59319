"""Operand promotion and conversion rules.

Every binary operator on BigInt and BigDecimal classifies both operands and
picks the result type from one table, instead of one overload per primitive
width:

    =============  =============  ===========
    lhs            rhs            result
    =============  =============  ===========
    INTEGER        INTEGER        native (not handled here)
    BIG_INTEGER    INTEGER        BigInt
    BIG_INTEGER    BIG_INTEGER    BigInt
    BIG_INTEGER    FLOAT          BigDecimal
    BIG_INTEGER    BIG_DECIMAL    BigDecimal
    BIG_DECIMAL    any numeric    BigDecimal
    =============  =============  ===========

The table is symmetric. Floats enter the decimal domain by formatting them in
scientific notation with the float type's guaranteed decimal digits
(6 for float32, 15 for float64) and parsing that text exactly. This bounds
the binary noise a float can carry into a BigDecimal.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Protocol

import numpy as np

from substreams.config import DEFAULT_SCALAR_CONFIG
from substreams.scalar.codec import parse_decimal
from substreams.scalar.errors import FloatConversionError, NarrowingOverflow, ParseBigDecimalError, fatal

__all__ = [
    "OperandKind",
    "NumericOperand",
    "classify",
    "result_kind",
    "float_digits",
    "format_float",
    "decimal_from_float",
    "integer_value",
    "decimal_value",
    "is_non_finite",
    "compare_non_finite",
    "fits",
    "narrow",
]


class OperandKind(Enum):
    """Numeric operand categories used for promotion."""

    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    FLOAT = "float"
    BIG_DECIMAL = "big_decimal"


class NumericOperand(Protocol):
    """Capability implemented by BigInt and BigDecimal."""

    operand_kind: ClassVar[OperandKind]


_DECIMAL_KINDS = (OperandKind.FLOAT, OperandKind.BIG_DECIMAL)
_INTEGER_KINDS = (OperandKind.INTEGER, OperandKind.BIG_INTEGER)


def classify(value: Any) -> OperandKind | None:
    """Return the operand kind of value, or None if it is not a supported number.

    bool is rejected even though it is an int subclass. Only float32 and
    float64 floats are supported.
    """
    kind = getattr(type(value), "operand_kind", None)
    if isinstance(kind, OperandKind):
        return kind
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return OperandKind.INTEGER
    if isinstance(value, (float, np.float32)):
        return OperandKind.FLOAT
    if isinstance(value, Decimal):
        return OperandKind.BIG_DECIMAL
    return None


def result_kind(lhs: Any, rhs: Any) -> OperandKind | None:
    """Result kind of a binary operation, or None if the pair is not handled."""
    lhs_kind, rhs_kind = classify(lhs), classify(rhs)
    if lhs_kind is None or rhs_kind is None:
        return None
    if lhs_kind in _DECIMAL_KINDS or rhs_kind in _DECIMAL_KINDS:
        return OperandKind.BIG_DECIMAL
    if lhs_kind is OperandKind.INTEGER and rhs_kind is OperandKind.INTEGER:
        return None
    return OperandKind.BIG_INTEGER


# =============================================================================
# Float bridge
# =============================================================================


def float_digits(value: float | np.float32) -> int:
    """Fractional digits used when formatting value (its type's decimal precision)."""
    if isinstance(value, np.float32):
        return DEFAULT_SCALAR_CONFIG.f32_digits
    return DEFAULT_SCALAR_CONFIG.f64_digits


def format_float(value: float | np.float32) -> str:
    """Format a float in scientific notation at its type's precision.

    Examples:
        format_float(112000000.5) -> "1.120000005000000e+08"
        format_float(np.float32(0.1)) -> "1.000000e-01"
    """
    return format(float(value), f".{float_digits(value)}e")


def decimal_from_float(value: float | np.float32) -> Decimal:
    """Bridge a float into an exact Decimal via format-then-parse.

    Raises:
        ParseBigDecimalError: If value is NaN or infinite
    """
    return parse_decimal(format_float(value))


def is_non_finite(value: Any) -> bool:
    """True for NaN/infinite floats and Decimals."""
    if isinstance(value, Decimal):
        return not value.is_finite()
    if isinstance(value, (float, np.float32)):
        return not math.isfinite(value)
    return False


def compare_non_finite(value: Any, op: Callable[[Any, Any], bool]) -> bool:
    """Apply op between a finite value and a NaN or infinite operand.

    The finite side compares like zero. NaN Decimals (signaling ones included)
    are unequal to everything and never ordered.
    """
    if isinstance(value, Decimal):
        if value.is_nan():
            return op is operator.ne
        value = float("-inf") if value.is_signed() else float("inf")
    return bool(op(0.0, float(value)))


# =============================================================================
# Operand extraction
# =============================================================================


def integer_value(value: Any) -> int:
    """Python int for an INTEGER or BIG_INTEGER operand."""
    return int(value)


def decimal_value(value: Any) -> Decimal:
    """Exact Decimal for any numeric operand.

    Used inside operators, where a NaN or infinite operand is fatal.

    Raises:
        FloatConversionError: If value is a NaN or infinite float/Decimal (fatal)
        TypeError: If value is not a numeric operand
    """
    kind = classify(value)
    if kind in _INTEGER_KINDS:
        return Decimal(int(value))
    if kind is OperandKind.FLOAT:
        try:
            return decimal_from_float(value)
        except ParseBigDecimalError:
            fatal(FloatConversionError(f"Cannot convert '{value}' to BigDecimal"))
    if isinstance(value, Decimal):
        if not value.is_finite():
            fatal(FloatConversionError(f"Cannot convert '{value}' to BigDecimal"))
        return value
    if kind is OperandKind.BIG_DECIMAL:
        return value.as_decimal()
    raise TypeError(f"Unsupported numeric operand: {type(value).__name__}")


# =============================================================================
# Narrowing
# =============================================================================


def fits(value: int, dtype: type[np.integer]) -> bool:
    """True if value is within the range of the fixed-width integer type dtype."""
    info = np.iinfo(dtype)
    return int(info.min) <= value <= int(info.max)


def narrow(value: int, dtype: type[np.integer], source: str = "BigInt") -> int:
    """Check that value fits the fixed-width integer type dtype.

    Raises:
        NarrowingOverflow: If value is outside dtype's range (fatal)
    """
    if not fits(value, dtype):
        fatal(NarrowingOverflow(f"{source} '{value}' is too large to fit into {np.dtype(dtype).name}"))
    return value
