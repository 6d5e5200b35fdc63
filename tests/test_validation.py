"""Tests for amount parsing and validation."""

import pytest
from decimal import Decimal

from petspend.validation import (
    AmountValidator,
    InvalidAmountError,
    parse_amount,
)


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("text, expected", [
        ("84", Decimal("84")),
        ("12.50", Decimal("12.50")),
        ("12,50", Decimal("12.50")),
        ("  7 ", Decimal("7")),
        ("-3", Decimal("-3")),
    ])
    def test_parses_numbers(self, text, expected):
        """Test dot and comma decimal separators."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
    def test_rejects_non_numbers(self, text):
        """Test non-numeric text parses to None."""
        assert parse_amount(text) is None


class TestAmountValidator:
    """Tests for AmountValidator."""

    def test_valid_text(self):
        """Test a positive amount passes."""
        result = AmountValidator().validate("19,99")
        assert result.is_valid
        assert result.amount == Decimal("19.99")

    def test_zero_and_negative(self):
        """Test amounts must be greater than zero."""
        for value in ("0", Decimal("-1"), 0):
            result = AmountValidator().validate(value)
            assert not result.is_valid
            assert result.issues[0].issue_type == "non_positive"

    def test_missing_and_malformed(self):
        """Test empty and malformed text are reported differently."""
        assert AmountValidator().validate(" ").issues[0].issue_type == "missing"
        assert AmountValidator().validate("ten").issues[0].issue_type == "invalid_format"

    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")])
    def test_non_finite_decimal(self, value):
        """Test non-finite decimals are reported as issues, without an amount."""
        result = AmountValidator().validate(value)
        assert not result.is_valid
        assert result.amount is None
        assert result.issues[0].issue_type == "invalid_format"

    def test_ensure_valid_non_finite(self):
        """Test ensure_valid raises InvalidAmountError for NaN."""
        with pytest.raises(InvalidAmountError):
            AmountValidator().ensure_valid(Decimal("NaN"))

    def test_ensure_valid(self):
        """Test ensure_valid returns the amount or raises."""
        validator = AmountValidator(field="limit_amount")
        assert validator.ensure_valid("120") == Decimal("120")
        with pytest.raises(InvalidAmountError) as excinfo:
            validator.ensure_valid("-5")
        assert excinfo.value.issues[0].field == "limit_amount"
        assert isinstance(excinfo.value, ValueError)
