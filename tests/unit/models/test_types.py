"""Tests for scalar pydantic field types."""

from decimal import Decimal

import pytest
from pydantic import BaseModel, ConfigDict, ValidationError

from substreams.models import BigDecimalStr, BigDecimalValue, BigIntStr, BigIntValue
from substreams.scalar import BigDecimal, BigInt


class Balance(BaseModel):
    """Model with canonical string fields."""

    amount: BigIntStr
    price: BigDecimalStr = "0"


class Holding(BaseModel):
    """Model with numeric scalar fields."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    amount: BigIntValue
    price: BigDecimalValue


class TestBigIntStr:
    """Tests for the BigIntStr type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5, "5"),
            ("-12", "-12"),
            ("1_000", "1000"),
            (b"42", "42"),
            (b"", "0"),
            (BigInt(-3), "-3"),
        ],
    )
    def test_canonical_string(self, value, expected):
        """Accepted inputs normalize to the canonical decimal string."""
        assert Balance(amount=value).amount == expected

    @pytest.mark.parametrize("value", ["1.5", "abc", True, 1.0, b"\xff", None])
    def test_invalid(self, value):
        """Malformed input fails validation."""
        with pytest.raises(ValidationError):
            Balance(amount=value)


class TestBigDecimalStr:
    """Tests for the BigDecimalStr type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.50", "1.50"),
            ("1e3", "1000"),
            (b"-0.25", "-0.25"),
            (7, "7"),
            (Decimal("2.5"), "2.5"),
            (BigInt(2), "2"),
            (0.1, "0.1000000000000000"),
        ],
    )
    def test_canonical_string(self, value, expected):
        """Accepted inputs normalize to the canonical decimal string."""
        assert Balance(amount=0, price=value).price == expected

    @pytest.mark.parametrize("value", ["NaN", "1.2.3", float("inf"), b"\xff", [1]])
    def test_invalid(self, value):
        """Malformed input fails validation."""
        with pytest.raises(ValidationError):
            Balance(amount=0, price=value)


class TestScalarValues:
    """Tests for BigIntValue and BigDecimalValue fields."""

    def test_validates_to_scalars(self):
        """Fields hold BigInt and BigDecimal instances."""
        holding = Holding(amount="12", price=b"1.5")
        assert isinstance(holding.amount, BigInt)
        assert isinstance(holding.price, BigDecimal)
        assert holding.amount == 12
        assert holding.price == BigDecimal("1.5")

    def test_copies_bigint_input(self):
        """A mutable BigInt input is copied."""
        amount = BigInt(1)
        holding = Holding(amount=amount, price=1)
        amount |= 2
        assert holding.amount == 1

    def test_serializes_to_strings(self):
        """Dumps use canonical decimal strings."""
        holding = Holding(amount=BigInt(-(10**30)), price=BigDecimal("0.50"))
        assert holding.model_dump() == {"amount": "-1" + "0" * 30, "price": "0.50"}

    def test_json_round_trip(self):
        """Models round-trip through JSON."""
        holding = Holding(amount=7, price="2.25")
        restored = Holding.model_validate_json(holding.model_dump_json())
        assert restored.amount == 7
        assert restored.price == BigDecimal("2.25")

    def test_json_schema_is_string(self):
        """The JSON schema describes scalars as strings."""
        schema = Holding.model_json_schema()
        assert schema["properties"]["amount"]["type"] == "string"
        assert schema["properties"]["price"]["type"] == "string"

    def test_invalid(self):
        """Malformed input fails validation."""
        with pytest.raises(ValidationError):
            Holding(amount="1.5", price=1)
        with pytest.raises(ValidationError):
            Holding(amount=1, price="abc")
