"""Byte and string codec for scalar values.

Binary layouts carry no length prefix or framing:

- unsigned (magnitude) big-endian / little-endian, paired with a ``Sign``
- signed two's-complement big-endian / little-endian, minimal length

The persisted (store) format is a plain ASCII decimal string, where an empty
buffer means zero. There is exactly one textual form per value; scientific
notation is accepted when parsing decimals but never produced.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Literal

from substreams.scalar.errors import InvalidStoreBytes, ParseBigDecimalError, ParseBigIntError, fatal

ByteOrder = Literal["big", "little"]
BytesLike = bytes | bytearray | memoryview

# 32-bit digits used by BigInt.from_digits / to_u32_digits
DIGIT_BITS = 32
DIGIT_MASK = (1 << DIGIT_BITS) - 1

_BIGINT_RE = re.compile(r"[+-]?[0-9][0-9_]*")
_BIGDECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Sign(Enum):
    """Sign of a magnitude encoding."""

    MINUS = -1
    NO_SIGN = 0
    PLUS = 1


# =============================================================================
# Text
# =============================================================================


def parse_int(text: str) -> int:
    """Parse a decimal integer literal.

    Accepts an optional sign followed by ASCII digits, optionally separated by
    underscores after the first digit. Whitespace, radix prefixes and non-ASCII
    digits are rejected.

    Raises:
        ParseBigIntError: If text is not a valid decimal integer
    """
    if not isinstance(text, str) or not _BIGINT_RE.fullmatch(text):
        raise ParseBigIntError(f"invalid digit found in string: {text!r}")
    return int(text.replace("_", ""))


def parse_decimal(text: str) -> Decimal:
    """Parse a decimal number literal exactly.

    Accepts ``[+-]digits[.digits][e[+-]digits]`` (either side of the point may
    be empty, not both). NaN, infinities and whitespace are rejected.

    Raises:
        ParseBigDecimalError: If text is not a valid decimal number
    """
    if not isinstance(text, str) or not _BIGDECIMAL_RE.fullmatch(text):
        raise ParseBigDecimalError(f"invalid decimal literal: {text!r}")
    try:
        return Decimal(text)
    except InvalidOperation as err:
        raise ParseBigDecimalError(f"decimal literal out of range: {text!r}") from err


def format_decimal(value: Decimal) -> str:
    """Render a finite Decimal in plain positional notation, keeping its scale."""
    return format(value, "f")


# =============================================================================
# Store format
# =============================================================================


def decode_store_text(buf: BytesLike, type_name: str) -> str | None:
    """Decode persisted bytes into their decimal text.

    Returns:
        The decoded string, or None for an empty buffer (meaning zero)

    Raises:
        InvalidStoreBytes: If buf is not valid UTF-8 (fatal)
    """
    raw = bytes(buf)
    if not raw:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        fatal(InvalidStoreBytes(f"Invalid store UTF-8 bytes '{raw.hex()}' for {type_name}"))


def encode_store_text(text: str) -> bytes:
    """Encode canonical decimal text for the store."""
    return text.encode("ascii")


# =============================================================================
# Binary
# =============================================================================


def int_from_unsigned_bytes(buf: BytesLike, byteorder: ByteOrder) -> int:
    """Decode a magnitude. Empty input is zero."""
    return int.from_bytes(bytes(buf), byteorder, signed=False)


def int_from_signed_bytes(buf: BytesLike, byteorder: ByteOrder) -> int:
    """Decode a two's-complement value. Empty input is zero."""
    return int.from_bytes(bytes(buf), byteorder, signed=True)


def int_from_sign_magnitude(sign: Sign, buf: BytesLike, byteorder: ByteOrder) -> int:
    """Decode a magnitude and apply sign. NO_SIGN always yields zero."""
    if sign is Sign.NO_SIGN:
        return 0
    magnitude = int_from_unsigned_bytes(buf, byteorder)
    return -magnitude if sign is Sign.MINUS else magnitude


def int_to_sign_magnitude(value: int, byteorder: ByteOrder) -> tuple[Sign, bytes]:
    """Encode value as (sign, minimal magnitude bytes). Zero is (NO_SIGN, b"\\x00")."""
    if value == 0:
        return Sign.NO_SIGN, b"\x00"
    magnitude = abs(value)
    length = (magnitude.bit_length() + 7) // 8
    sign = Sign.MINUS if value < 0 else Sign.PLUS
    return sign, magnitude.to_bytes(length, byteorder)


def int_to_signed_bytes(value: int, byteorder: ByteOrder) -> bytes:
    """Encode value as minimal two's-complement bytes (at least one byte)."""
    # Length must leave room for the sign bit
    significant = value if value >= 0 else ~value
    length = (significant.bit_length() + 8) // 8
    return value.to_bytes(length, byteorder, signed=True)


def int_from_digits(sign: Sign, digits: list[int]) -> int:
    """Build an integer from little-endian base 2^32 digits.

    Raises:
        ValueError: If any digit is outside [0, 2^32)
    """
    magnitude = 0
    for position, digit in enumerate(digits):
        if not 0 <= digit <= DIGIT_MASK:
            raise ValueError(f"Digit {digit} at position {position} does not fit in 32 bits")
        magnitude |= digit << (DIGIT_BITS * position)
    if sign is Sign.NO_SIGN or magnitude == 0:
        return 0
    return -magnitude if sign is Sign.MINUS else magnitude


def int_to_digits(value: int) -> tuple[Sign, list[int]]:
    """Split value into (sign, little-endian base 2^32 digits). Zero has no digits."""
    if value == 0:
        return Sign.NO_SIGN, []
    magnitude = abs(value)
    digits = []
    while magnitude:
        digits.append(magnitude & DIGIT_MASK)
        magnitude >>= DIGIT_BITS
    return (Sign.MINUS if value < 0 else Sign.PLUS), digits
