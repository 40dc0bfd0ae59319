"""Arbitrary-precision decimal number.

A BigDecimal is an unbounded integer coefficient with a base-10 scale,
denoting ``coefficient * 10**-scale``. Values with different scales can be
equal (``1.0 == 1.00``); equality, ordering and hashing use the numeric value,
while ``str()`` keeps the scale.

Arithmetic:
- ``+ - *`` are exact (the result scale grows as needed)
- ``/`` returns exact quotients exactly; otherwise it keeps 100 significant
  digits and rounds the last one half-up
- any operand that is a float, Decimal, BigInt or plain integer is promoted
  first (see promotion.py); floats go through format-then-parse

Values are immutable. The decimal128 limits below are advisory and not
enforced by any operation.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_EVEN, Context, Decimal
from typing import Any, ClassVar

import numpy as np

from substreams.config import DEFAULT_SCALAR_CONFIG
from substreams.scalar import codec
from substreams.scalar.bigint import BigInt
from substreams.scalar.codec import BytesLike
from substreams.scalar.errors import DivisionByZero, InvalidStoreBytes, ParseBigDecimalError, fatal
from substreams.scalar.promotion import (
    OperandKind,
    classify,
    compare_non_finite,
    decimal_from_float,
    decimal_value,
    fits,
    is_non_finite,
)

__all__ = ["BigDecimal", "MAX_SIGNIFICANT_DIGITS", "MIN_EXP", "MAX_EXP"]

MAX_SIGNIFICANT_DIGITS = DEFAULT_SCALAR_CONFIG.max_significant_digits
MIN_EXP = DEFAULT_SCALAR_CONFIG.min_exp
MAX_EXP = DEFAULT_SCALAR_CONFIG.max_exp

# Unbounded context: add, subtract and multiply never round
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


# =============================================================================
# Coefficient / scale helpers
# =============================================================================


def _split(value: Decimal) -> tuple[int, int]:
    """Split a finite Decimal into (coefficient, scale)."""
    exponent = int(value.as_tuple().exponent)
    return int(value.scaleb(-exponent, context=_EXACT)), -exponent


def _compose(coefficient: int, scale: int) -> Decimal:
    return Decimal(coefficient).scaleb(-scale, context=_EXACT)


def _digit_count(n: int) -> int:
    """Decimal digits in abs(n); zero has one digit."""
    if n == 0:
        return 1
    return Decimal(n).adjusted() + 1


def _canonical(value: Decimal) -> Decimal:
    # Zero never carries a sign
    if value.is_zero() and value.is_signed():
        return value.copy_abs()
    return value


def _long_division(num: int, den: int, scale: int, max_precision: int) -> Decimal:
    """Divide two coefficients digit by digit.

    Stops as soon as the remainder is zero, so terminating quotients are
    exact. Otherwise produces max_precision significant digits and rounds
    the last one up when the next digit is 5 or more.

    Examples:
        _long_division(1, 4, 0, 100) -> 0.25
        _long_division(2, 3, 0, 5) -> 0.66667
    """
    if num == 0:
        return Decimal(0)
    negative = (num < 0) != (den < 0)
    num, den = abs(num), abs(den)

    # Shift the numerator until the first quotient digit is non-zero
    if num < den:
        shift = _digit_count(den) - _digit_count(num)
        num *= 10**shift
        scale += shift
        if num < den:
            num *= 10
            scale += 1

    quotient, remainder = divmod(num, den)
    if remainder:
        precision = _digit_count(quotient)
        remainder *= 10
        while remainder and precision < max_precision:
            digit, remainder = divmod(remainder, den)
            quotient = quotient * 10 + digit
            remainder *= 10
            precision += 1
            scale += 1
        if remainder and remainder // den >= 5:
            quotient += 1

    return _compose(-quotient if negative else quotient, scale)


def _divide(lhs: Decimal, rhs: Decimal) -> Decimal:
    """Divide two finite Decimals.

    Raises:
        DivisionByZero: If rhs is zero (fatal)
    """
    if rhs.is_zero():
        fatal(DivisionByZero("Cannot divide by zero-valued `BigDecimal`!"))
    if lhs.is_zero() or rhs == 1:
        return lhs
    num, num_scale = _split(lhs)
    den, den_scale = _split(rhs)
    scale = num_scale - den_scale
    if num == den:
        return _compose(1, scale)
    return _long_division(num, den, scale, DEFAULT_SCALAR_CONFIG.division_precision)


# =============================================================================
# BigDecimal
# =============================================================================


class BigDecimal:
    """Immutable arbitrary-precision decimal.

    Example:
        >>> BigDecimal.new(15, -1)
        BigDecimal("1.5")
        >>> BigDecimal("112000000.5") / BigDecimal.new(1, 5)
        BigDecimal("1120.000005")
    """

    operand_kind: ClassVar[OperandKind] = OperandKind.BIG_DECIMAL
    MAX_SIGNIFICANT_DIGITS: ClassVar[int] = MAX_SIGNIFICANT_DIGITS
    MIN_EXP: ClassVar[int] = MIN_EXP
    MAX_EXP: ClassVar[int] = MAX_EXP

    __slots__ = ("_value",)
    __array_ufunc__ = None  # Make numpy scalars defer to our reflected operators
    _value: Decimal

    def __init__(self, value: Any = 0) -> None:
        """Create a BigDecimal.

        Accepts another BigDecimal, a BigInt, an int or numpy integer, a finite
        Decimal, a float (format-then-parse) or a decimal string.

        Raises:
            ParseBigDecimalError: If value is a malformed string, a NaN or
                infinite float, or a non-finite Decimal
            TypeError: If value is not numeric
        """
        if isinstance(value, BigDecimal):
            decimal = value._value
        elif isinstance(value, str):
            decimal = codec.parse_decimal(value)
        else:
            kind = classify(value)
            if kind in (OperandKind.INTEGER, OperandKind.BIG_INTEGER):
                decimal = Decimal(int(value))
            elif kind is OperandKind.FLOAT:
                decimal = decimal_from_float(value)
            elif isinstance(value, Decimal):
                if not value.is_finite():
                    raise ParseBigDecimalError(f"Cannot convert '{value}' to BigDecimal")
                decimal = value
            else:
                raise TypeError(f"BigDecimal requires a number, got {type(value).__name__}")
        self._value = _canonical(decimal)

    # --- Constructors ---

    @classmethod
    def new(cls, digits: int | BigInt, exp: int) -> BigDecimal:
        """Build ``digits * 10**exp``; the stored scale is ``-exp``.

        new(100, 0), new(10, 1) and new(1, 2) are all equal to 100.
        """
        if classify(digits) not in (OperandKind.INTEGER, OperandKind.BIG_INTEGER):
            raise TypeError(f"BigDecimal digits must be an integer, got {type(digits).__name__}")
        return cls(_compose(int(digits), -int(exp)))

    @classmethod
    def zero(cls) -> BigDecimal:
        return cls(0)

    @classmethod
    def one(cls) -> BigDecimal:
        return cls(1)

    @classmethod
    def from_str(cls, text: str) -> BigDecimal:
        """Parse a decimal literal ("1.5", "-.25", "1e-3").

        Raises:
            ParseBigDecimalError: If text is malformed
        """
        return cls(codec.parse_decimal(text))

    @classmethod
    def try_from_float(cls, value: float | np.floating) -> BigDecimal:
        """Convert a float by formatting it at its type's precision, then parsing.

        Raises:
            ParseBigDecimalError: If value is NaN or infinite
        """
        if classify(value) is not OperandKind.FLOAT:
            raise TypeError(f"Expected a float, got {type(value).__name__}")
        return cls(decimal_from_float(value))

    @classmethod
    def parse_bytes(cls, buf: BytesLike) -> BigDecimal | None:
        """Parse UTF-8 decimal text, returning None if it is malformed."""
        try:
            return cls.from_str(bytes(buf).decode("utf-8"))
        except (UnicodeDecodeError, ParseBigDecimalError):
            return None

    @classmethod
    def from_store_bytes(cls, buf: BytesLike) -> BigDecimal:
        """Decode a value persisted as an ASCII decimal string.

        Raises:
            InvalidStoreBytes: If buf is not UTF-8 or not a decimal number (fatal)
        """
        text = codec.decode_store_text(buf, cls.__name__)
        if text is None:
            return cls.zero()
        try:
            return cls.from_str(text)
        except ParseBigDecimalError:
            fatal(InvalidStoreBytes(f"Invalid store {cls.__name__} string '{text}'"))

    @staticmethod
    def divide_by_decimals(amount: BigDecimal, decimals: int) -> BigDecimal:
        """Scale a raw amount down by a number of decimal places (amount / 10**decimals)."""
        return amount / BigDecimal.new(1, decimals)

    # --- Representation ---

    def as_decimal(self) -> Decimal:
        """The underlying stdlib Decimal."""
        return self._value

    def as_bigint_and_exponent(self) -> tuple[BigInt, int]:
        """Return (coefficient, scale), so that value == coefficient * 10**-scale."""
        coefficient, scale = _split(self._value)
        return BigInt(coefficient), scale

    def digits(self) -> int:
        """Number of digits in the coefficient (zero has one)."""
        return len(self._value.as_tuple().digits)

    def is_zero(self) -> bool:
        return self._value.is_zero()

    def with_prec(self, prec: int) -> BigDecimal:
        """Round to prec significant digits, half to even.

        A value with fewer digits is padded with trailing zeros, so the result
        always has exactly prec digits.

        Examples:
            BigDecimal("2.345").with_prec(3) -> 2.34
            BigDecimal("1.5").with_prec(4) -> 1.500
        """
        if prec < 1:
            raise ValueError(f"Precision must be positive, got {prec}")
        missing = prec - self.digits()
        if missing >= 0:
            coefficient, scale = _split(self._value)
            return BigDecimal(_compose(coefficient * 10**missing, scale + missing))
        context = Context(prec=prec, rounding=ROUND_HALF_EVEN, Emax=MAX_EMAX, Emin=MIN_EMIN)
        return BigDecimal(context.plus(self._value))

    # --- Conversion ---

    def to_bigint(self) -> BigInt:
        """Truncate toward zero."""
        return BigInt(int(self._value))

    def to_i64(self) -> int | None:
        """Truncated value as i64, or None if it does not fit."""
        value = int(self._value)
        return value if fits(value, np.int64) else None

    def to_u64(self) -> int | None:
        """Truncated value as u64, or None if it does not fit."""
        value = int(self._value)
        return value if fits(value, np.uint64) else None

    def to_store_bytes(self) -> bytes:
        return codec.encode_store_text(str(self))

    def __int__(self) -> int:
        return int(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __bool__(self) -> bool:
        return not self._value.is_zero()

    def __str__(self) -> str:
        return codec.format_decimal(self._value)

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self}")'

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic ---

    def _arith(self, other: Any, op: Callable[[Decimal, Decimal], Decimal], reflected: bool = False) -> Any:
        if classify(other) is None:
            return NotImplemented
        rhs = decimal_value(other)
        if reflected:
            return BigDecimal(op(rhs, self._value))
        return BigDecimal(op(self._value, rhs))

    def __add__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.add)

    def __radd__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.add, reflected=True)

    def __sub__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.subtract)

    def __rsub__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.subtract, reflected=True)

    def __mul__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.multiply)

    def __rmul__(self, other: Any) -> Any:
        return self._arith(other, _EXACT.multiply, reflected=True)

    def __truediv__(self, other: Any) -> Any:
        return self._arith(other, _divide)

    def __rtruediv__(self, other: Any) -> Any:
        return self._arith(other, _divide, reflected=True)

    def __neg__(self) -> BigDecimal:
        return BigDecimal(self._value.copy_negate())

    def __pos__(self) -> BigDecimal:
        return self

    def __abs__(self) -> BigDecimal:
        return BigDecimal(self._value.copy_abs())

    def neg(self) -> BigDecimal:
        return -self

    def absolute(self) -> BigDecimal:
        return abs(self)

    # --- Comparison ---

    def _compare(self, other: Any, op: Callable[[Any, Any], bool]) -> Any:
        if classify(other) is None:
            return NotImplemented
        if is_non_finite(other):
            return compare_non_finite(other, op)
        return op(self._value, decimal_value(other))

    def __eq__(self, other: object) -> bool:
        return self._compare(other, operator.eq)  # type: ignore[no-any-return]

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)  # type: ignore[no-any-return]

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)  # type: ignore[no-any-return]

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)  # type: ignore[no-any-return]

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)  # type: ignore[no-any-return]
