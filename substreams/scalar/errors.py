"""Scalar error classes.

Errors come in two tiers:

- Recoverable (``ScalarError``): malformed numeric literals and the checked
  ``BigInt -> u64`` conversion. Callers are expected to catch these.
- Fatal (``ScalarPanic``): division by zero, corrupt store bytes, out-of-range
  narrowing conversions. These abort the current unit of work and are
  logged before being raised.

``ScalarPanic`` never derives from ``ScalarError``, so ``except ScalarError``
only ever catches the recoverable conditions.
"""

from __future__ import annotations

from enum import Enum
from typing import NoReturn

import structlog

logger = structlog.get_logger()


# =============================================================================
# Recoverable errors
# =============================================================================


class ScalarError(Exception):
    """Base class for recoverable scalar errors."""

    pass


class ParseBigIntError(ScalarError, ValueError):
    """String is not a valid decimal integer."""

    pass


class ParseBigDecimalError(ScalarError, ValueError):
    """String is not a valid decimal number."""

    pass


class OutOfRangeKind(Enum):
    """Why a BigInt did not fit the requested type."""

    NEGATIVE = "negative"
    OVERFLOW = "overflow"


class BigIntOutOfRangeError(ScalarError):
    """BigInt cannot be represented as an unsigned 64-bit integer.

    Attributes:
        kind: NEGATIVE if the value is below zero, OVERFLOW if it needs more
            than 64 bits
    """

    _MESSAGES = {
        OutOfRangeKind.NEGATIVE: "Cannot convert negative BigInt into type",
        OutOfRangeKind.OVERFLOW: "BigInt value is too large for type",
    }

    def __init__(self, kind: OutOfRangeKind) -> None:
        super().__init__(self._MESSAGES[kind])
        self.kind = kind


# =============================================================================
# Fatal errors
# =============================================================================


class ScalarPanic(RuntimeError):
    """Base class for fatal scalar errors."""

    pass


class DivisionByZero(ScalarPanic, ZeroDivisionError):
    """Division or remainder by a zero-valued operand."""

    pass


class InvalidStoreBytes(ScalarPanic):
    """Persisted bytes are not UTF-8 or not a valid decimal string."""

    pass


class NarrowingOverflow(ScalarPanic, OverflowError):
    """Value does not fit the requested fixed-width type."""

    pass


class FloatConversionError(ScalarPanic):
    """Float operand cannot be bridged into a BigDecimal (NaN or infinite)."""

    pass


class NegativeShiftCount(NarrowingOverflow, ValueError):
    """Shift by a negative bit count (shift counts are unsigned)."""

    pass


def fatal(error: ScalarPanic) -> NoReturn:
    """Log a fatal error and raise it."""
    logger.error("scalar_panic", error=type(error).__name__, message=str(error))
    raise error


__all__ = [
    "ScalarError",
    "ParseBigIntError",
    "ParseBigDecimalError",
    "OutOfRangeKind",
    "BigIntOutOfRangeError",
    "ScalarPanic",
    "DivisionByZero",
    "InvalidStoreBytes",
    "NarrowingOverflow",
    "FloatConversionError",
    "NegativeShiftCount",
    "fatal",
]
