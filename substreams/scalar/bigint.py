"""Arbitrary-precision signed integer for token amounts.

BigInt wraps a Python int and gives it the arithmetic of on-chain integer
types rather than Python's:

- Division truncates toward zero and the remainder keeps the dividend's sign
  (``a == b * (a / b) + a % b``), like Solidity
- Division or remainder by zero is fatal (DivisionByZero)
- Mixing in a float or a BigDecimal promotes the result to BigDecimal
- Narrowing conversions are checked; only ``try_into_u64`` is recoverable

Usage pattern:
    from substreams.scalar import BigInt

    balance = BigInt.from_store_bytes(stored)   # b"" is zero
    balance = balance + transfer_amount          # int, numpy int or BigInt
    store.set(key, balance.to_store_bytes())

The bitwise and shift compound assignments (``&= |= ^= <<= >>=``) mutate the
receiver in place; all other operators return new values. BigInt is therefore
unhashable, and ``clone()`` must be used before mutating a shared value.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from substreams.scalar import codec
from substreams.scalar.codec import BytesLike, Sign
from substreams.scalar.errors import (
    BigIntOutOfRangeError,
    DivisionByZero,
    InvalidStoreBytes,
    NarrowingOverflow,
    NegativeShiftCount,
    OutOfRangeKind,
    ParseBigIntError,
    fatal,
)
from substreams.scalar.promotion import (
    OperandKind,
    classify,
    compare_non_finite,
    decimal_value,
    fits,
    integer_value,
    is_non_finite,
    narrow,
    result_kind,
)

if TYPE_CHECKING:
    from substreams.scalar.bigdecimal import BigDecimal

__all__ = ["BigInt", "BigUint", "MAX_POW_EXPONENT"]

# Exponents are unsigned primitives, at most 128 bits wide
MAX_POW_EXPONENT = 2**128 - 1

_INTEGER_KINDS = (OperandKind.INTEGER, OperandKind.BIG_INTEGER)


def _div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero.

    Python's // rounds toward negative infinity; for operands of different
    signs we truncate the magnitude quotient instead.

    Raises:
        DivisionByZero: If b is zero (fatal)

    Examples:
        Python: -7 // 3 = -3
        BigInt: -7 / 3 = -2
    """
    if b == 0:
        fatal(DivisionByZero("attempt to divide by zero"))
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _rem_trunc(a: int, b: int) -> int:
    """Remainder matching _div_trunc; its sign follows the dividend."""
    if b == 0:
        fatal(DivisionByZero("attempt to calculate the remainder with a divisor of zero"))
    return a - b * _div_trunc(a, b)


def _big_decimal(value: Any) -> BigDecimal:
    """Promote a numeric operand into a BigDecimal."""
    from substreams.scalar.bigdecimal import BigDecimal

    return BigDecimal(decimal_value(value))


class BigInt:
    """Arbitrary-precision signed integer.

    Attributes:
        value: The underlying Python int (read-only)
    """

    operand_kind: ClassVar[OperandKind] = OperandKind.BIG_INTEGER

    __slots__ = ("_value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable: compound bitwise operators mutate
    __array_ufunc__ = None  # Make numpy scalars defer to our reflected operators
    _value: int

    def __init__(self, value: int | np.integer | str | BigInt = 0) -> None:
        """Create a BigInt from an integer, a numpy integer, a decimal string or a BigInt.

        Raises:
            ParseBigIntError: If value is a malformed decimal string
            TypeError: If value is any other type (floats included)
        """
        if isinstance(value, BigInt):
            self._assign(value._value)
        elif isinstance(value, str):
            self._assign(codec.parse_int(value))
        elif classify(value) is OperandKind.INTEGER:
            self._assign(int(value))
        else:
            raise TypeError(f"{type(self).__name__} requires an integer, got {type(value).__name__}")

    def _assign(self, value: int) -> None:
        self._value = value

    # --- Constructors ---

    @classmethod
    def zero(cls) -> BigInt:
        return cls(0)

    @classmethod
    def one(cls) -> BigInt:
        return cls(1)

    @classmethod
    def from_str(cls, text: str) -> BigInt:
        """Parse a decimal string such as "-123".

        Raises:
            ParseBigIntError: If text is not a valid decimal integer
        """
        return cls(codec.parse_int(text))

    @classmethod
    def from_digits(cls, sign: Sign, digits: list[int]) -> BigInt:
        """Build from little-endian base 2^32 digits."""
        return cls(codec.int_from_digits(sign, digits))

    @classmethod
    def from_unsigned_bytes_be(cls, buf: BytesLike) -> BigInt:
        return cls(codec.int_from_unsigned_bytes(buf, "big"))

    @classmethod
    def from_unsigned_bytes_le(cls, buf: BytesLike) -> BigInt:
        return cls(codec.int_from_unsigned_bytes(buf, "little"))

    @classmethod
    def from_signed_bytes_be(cls, buf: BytesLike) -> BigInt:
        return cls(codec.int_from_signed_bytes(buf, "big"))

    @classmethod
    def from_signed_bytes_le(cls, buf: BytesLike) -> BigInt:
        return cls(codec.int_from_signed_bytes(buf, "little"))

    @classmethod
    def from_bytes_be(cls, sign: Sign, buf: BytesLike) -> BigInt:
        """Decode a big-endian magnitude and apply sign (NO_SIGN yields zero)."""
        return cls(codec.int_from_sign_magnitude(sign, buf, "big"))

    @classmethod
    def from_bytes_le(cls, sign: Sign, buf: BytesLike) -> BigInt:
        """Decode a little-endian magnitude and apply sign (NO_SIGN yields zero)."""
        return cls(codec.int_from_sign_magnitude(sign, buf, "little"))

    @classmethod
    def from_store_bytes(cls, buf: BytesLike) -> BigInt:
        """Decode a value persisted as an ASCII decimal string.

        An empty buffer is zero. Store contents are expected to be well-formed,
        so anything else that does not parse is fatal.

        Raises:
            InvalidStoreBytes: If buf is not UTF-8 or not a decimal integer (fatal)
        """
        text = codec.decode_store_text(buf, cls.__name__)
        if text is None:
            return cls.zero()
        try:
            return cls.from_str(text)
        except ParseBigIntError:
            fatal(InvalidStoreBytes(f"Invalid store {cls.__name__} string '{text}'"))

    # --- Encoding ---

    def to_bytes_be(self) -> tuple[Sign, bytes]:
        """Sign and big-endian magnitude. Zero is (NO_SIGN, b"\\x00")."""
        return codec.int_to_sign_magnitude(self._value, "big")

    def to_bytes_le(self) -> tuple[Sign, bytes]:
        """Sign and little-endian magnitude. Zero is (NO_SIGN, b"\\x00")."""
        return codec.int_to_sign_magnitude(self._value, "little")

    def to_signed_bytes_be(self) -> bytes:
        """Minimal big-endian two's complement."""
        return codec.int_to_signed_bytes(self._value, "big")

    def to_signed_bytes_le(self) -> bytes:
        """Minimal little-endian two's complement."""
        return codec.int_to_signed_bytes(self._value, "little")

    def to_u32_digits(self) -> tuple[Sign, list[int]]:
        """Sign and little-endian base 2^32 digits (inverse of from_digits)."""
        return codec.int_to_digits(self._value)

    def to_store_bytes(self) -> bytes:
        """Canonical persisted form: the decimal string as ASCII bytes."""
        return codec.encode_store_text(str(self))

    # --- Properties and predicates ---

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def bits(self) -> int:
        """Number of bits needed to represent the magnitude."""
        return self._value.bit_length()

    def is_zero(self) -> bool:
        return self._value == 0

    def is_one(self) -> bool:
        return self._value == 1

    def clone(self) -> BigInt:
        """Independent copy, safe to mutate with compound operators."""
        return type(self)(self._value)

    # --- Conversion ---

    def try_into_u64(self) -> int:
        """Convert to an unsigned 64-bit value.

        This is the only narrowing conversion that reports failure as a
        recoverable error; the to_* methods are fatal instead.

        Raises:
            BigIntOutOfRangeError: kind NEGATIVE if the value is below zero,
                kind OVERFLOW if it needs more than 64 bits
        """
        if self._value < 0:
            raise BigIntOutOfRangeError(OutOfRangeKind.NEGATIVE)
        if not fits(self._value, np.uint64):
            raise BigIntOutOfRangeError(OutOfRangeKind.OVERFLOW)
        return self._value

    def to_u64(self) -> int:
        """Convert to u64. Raises NarrowingOverflow (fatal) when out of range."""
        return narrow(self._value, np.uint64)

    def to_i64(self) -> int:
        """Convert to i64. Raises NarrowingOverflow (fatal) when out of range."""
        return narrow(self._value, np.int64)

    def to_u32(self) -> int:
        """Convert to u32. Raises NarrowingOverflow (fatal) when out of range."""
        return narrow(self._value, np.uint32)

    def to_i32(self) -> int:
        """Convert to i32. Raises NarrowingOverflow (fatal) when out of range."""
        return narrow(self._value, np.int32)

    def to_decimal(self, decimals: int) -> BigDecimal:
        """Scale a raw amount down by a number of decimal places.

        Example: BigInt(50000).to_decimal(3) == BigDecimal(50)
        """
        from substreams.scalar.bigdecimal import BigDecimal

        return BigDecimal.divide_by_decimals(BigDecimal(self), decimals)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __format__(self, format_spec: str) -> str:
        return format(self._value, format_spec)

    # --- Arithmetic ---

    def _arith(
        self,
        other: Any,
        int_op: Callable[[int, int], int],
        decimal_op: Callable[[Any, Any], Any] | None,
        reflected: bool = False,
    ) -> Any:
        kind = result_kind(self, other)
        if kind is None:
            return NotImplemented
        if kind is OperandKind.BIG_DECIMAL:
            if decimal_op is None:
                return NotImplemented
            lhs, rhs = _big_decimal(self), _big_decimal(other)
            return decimal_op(rhs, lhs) if reflected else decimal_op(lhs, rhs)
        a, b = self._value, integer_value(other)
        if reflected:
            a, b = b, a
        return BigInt(int_op(a, b))

    def __add__(self, other: Any) -> Any:
        return self._arith(other, operator.add, operator.add)

    def __radd__(self, other: Any) -> Any:
        return self._arith(other, operator.add, operator.add, reflected=True)

    def __sub__(self, other: Any) -> Any:
        return self._arith(other, operator.sub, operator.sub)

    def __rsub__(self, other: Any) -> Any:
        return self._arith(other, operator.sub, operator.sub, reflected=True)

    def __mul__(self, other: Any) -> Any:
        return self._arith(other, operator.mul, operator.mul)

    def __rmul__(self, other: Any) -> Any:
        return self._arith(other, operator.mul, operator.mul, reflected=True)

    def __truediv__(self, other: Any) -> Any:
        """Truncating division; promotes to BigDecimal with float/BigDecimal operands."""
        return self._arith(other, _div_trunc, operator.truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._arith(other, _div_trunc, operator.truediv, reflected=True)

    def __mod__(self, other: Any) -> Any:
        """Remainder with the sign of the dividend. Integer operands only."""
        return self._arith(other, _rem_trunc, None)

    def __rmod__(self, other: Any) -> Any:
        return self._arith(other, _rem_trunc, None, reflected=True)

    def div_rem(self, other: BigInt | int) -> tuple[BigInt, BigInt]:
        """Quotient truncated toward zero and the matching remainder.

        Raises:
            DivisionByZero: If other is zero (fatal)
        """
        if classify(other) not in _INTEGER_KINDS:
            raise TypeError(f"div_rem requires an integer divisor, got {type(other).__name__}")
        divisor = integer_value(other)
        quotient = _div_trunc(self._value, divisor)
        return BigInt(quotient), BigInt(self._value - divisor * quotient)

    def pow(self, exponent: int | np.unsignedinteger) -> BigInt:
        """Raise to a non-negative primitive integer power.

        Raises:
            TypeError: If exponent is not a primitive integer (BigInt included)
            ValueError: If exponent is negative or wider than 128 bits
        """
        if classify(exponent) is not OperandKind.INTEGER:
            raise TypeError(f"BigInt exponent must be a primitive integer, got {type(exponent).__name__}")
        exp = int(exponent)
        if not 0 <= exp <= MAX_POW_EXPONENT:
            raise ValueError(f"BigInt exponent must be an unsigned 128-bit integer, got {exp}")
        return BigInt(self._value**exp)

    def __pow__(self, exponent: Any, modulo: Any = None) -> Any:
        if modulo is not None or classify(exponent) is not OperandKind.INTEGER:
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self) -> BigInt:
        return BigInt(-self._value)

    def __pos__(self) -> BigInt:
        return BigInt(self._value)

    def __abs__(self) -> BigInt:
        return BigInt(abs(self._value))

    def neg(self) -> BigInt:
        return -self

    def absolute(self) -> BigInt:
        return abs(self)

    # --- Bitwise (two's complement) ---

    def _bitwise(self, other: Any, op: Callable[[int, int], int]) -> Any:
        if classify(other) not in _INTEGER_KINDS:
            return NotImplemented
        return BigInt(op(self._value, integer_value(other)))

    def _bitwise_assign(self, other: Any, op: Callable[[int, int], int]) -> Any:
        if classify(other) not in _INTEGER_KINDS:
            return NotImplemented
        self._assign(op(self._value, integer_value(other)))
        return self

    def __and__(self, other: Any) -> Any:
        return self._bitwise(other, operator.and_)

    __rand__ = __and__

    def __or__(self, other: Any) -> Any:
        return self._bitwise(other, operator.or_)

    __ror__ = __or__

    def __xor__(self, other: Any) -> Any:
        return self._bitwise(other, operator.xor)

    __rxor__ = __xor__

    def __iand__(self, other: Any) -> Any:
        return self._bitwise_assign(other, operator.and_)

    def __ior__(self, other: Any) -> Any:
        return self._bitwise_assign(other, operator.or_)

    def __ixor__(self, other: Any) -> Any:
        return self._bitwise_assign(other, operator.xor)

    # --- Shifts (primitive counts only; right shift floors) ---

    @staticmethod
    def _shift_count(other: Any) -> int | None:
        if classify(other) is not OperandKind.INTEGER:
            return None
        count = int(other)
        if count < 0:
            fatal(NegativeShiftCount(f"attempt to shift by negative count {count}"))
        return count

    def __lshift__(self, other: Any) -> Any:
        count = self._shift_count(other)
        if count is None:
            return NotImplemented
        return BigInt(self._value << count)

    def __rshift__(self, other: Any) -> Any:
        count = self._shift_count(other)
        if count is None:
            return NotImplemented
        return BigInt(self._value >> count)

    def __ilshift__(self, other: Any) -> Any:
        count = self._shift_count(other)
        if count is None:
            return NotImplemented
        self._assign(self._value << count)
        return self

    def __irshift__(self, other: Any) -> Any:
        count = self._shift_count(other)
        if count is None:
            return NotImplemented
        self._assign(self._value >> count)
        return self

    # --- Comparison ---

    def _compare(self, other: Any, op: Callable[[Any, Any], bool]) -> Any:
        kind = classify(other)
        if kind is None:
            return NotImplemented
        if kind in _INTEGER_KINDS:
            return op(self._value, integer_value(other))
        if is_non_finite(other):
            return compare_non_finite(other, op)
        return op(Decimal(self._value), decimal_value(other))

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


class BigUint(BigInt):
    """Non-negative BigInt.

    Converts into BigInt and BigDecimal without loss. Arithmetic results are
    plain signed BigInt values, so ``BigUint(1) - 2 == BigInt(-1)``.

    Raises:
        NarrowingOverflow: On construction from, or in-place mutation to, a
            negative value (fatal)
    """

    __slots__ = ()

    def _assign(self, value: int) -> None:
        if value < 0:
            fatal(NarrowingOverflow(f"Cannot convert negative value '{value}' into BigUint"))
        self._value = value

    def to_bigint(self) -> BigInt:
        return BigInt(self._value)
