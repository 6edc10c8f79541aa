"""
Unit tests for money and date helpers and value objects.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime

from billing.domain.models.base import ValidationError
from billing.domain.models.value_objects import (
    EmailAddress,
    InvoiceNumber,
    add_days,
    days_until,
    round2,
    to_decimal,
)


class TestRound2:
    """Test cases for round2."""

    def test_rounds_half_away_from_zero(self):
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2(Decimal("-2.675")) == Decimal("-2.68")
        assert round2(Decimal("0.005")) == Decimal("0.01")

    def test_float_input_does_not_drift(self):
        # binary 2.675 is 2.67499999..., str() keeps the written value
        assert round2(2.675) == Decimal("2.68")
        assert round2(0.1 + 0.2) == Decimal("0.30")

    def test_always_two_places(self):
        assert str(round2(260)) == "260.00"
        assert str(round2("49.4")) == "49.40"


class TestToDecimal:
    """Test cases for to_decimal."""

    def test_accepts_numbers_and_strings(self):
        assert to_decimal(3) == Decimal("3")
        assert to_decimal("19.5") == Decimal("19.5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_rejects_garbage(self):
        with pytest.raises(ValidationError):
            to_decimal("abc", "quantity")

    def test_rejects_bool(self):
        with pytest.raises(ValidationError):
            to_decimal(True)

    def test_rejects_non_finite(self):
        with pytest.raises(ValidationError, match="finite"):
            to_decimal(float("nan"))
        with pytest.raises(ValidationError, match="finite"):
            to_decimal("Infinity")


class TestDateHelpers:
    """Test cases for civil date arithmetic."""

    def test_add_days(self):
        assert add_days(date(2024, 1, 1), 30) == date(2024, 1, 31)
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2023, 12, 25), 7) == date(2024, 1, 1)

    def test_add_days_drops_time(self):
        assert add_days(datetime(2024, 1, 1, 23, 59), 1) == date(2024, 1, 2)

    def test_days_until(self):
        assert days_until(date(2024, 1, 31), date(2024, 1, 28)) == 3
        assert days_until(date(2024, 1, 31), datetime(2024, 1, 31, 18, 0)) == 0
        assert days_until(date(2024, 1, 31), date(2024, 2, 2)) == -2


class TestEmailAddress:
    """Test cases for EmailAddress value object."""

    def test_valid_address(self):
        email = EmailAddress("billing@example.com")
        assert email.address == "billing@example.com"
        assert str(email) == "billing@example.com"

    def test_invalid_address(self):
        with pytest.raises(ValidationError) as exc_info:
            EmailAddress("not-an-email")
        assert exc_info.value.field == "recipients"

    def test_is_valid(self):
        assert EmailAddress.is_valid("a@b.io")
        assert not EmailAddress.is_valid("a@b")
        assert not EmailAddress.is_valid(None)

    @pytest.mark.parametrize("address", [
        "victim@example.com\n",
        "victim@example.com\r\nBcc: other@example.com",
        " victim@example.com",
    ])
    def test_rejects_line_breaks_and_padding(self, address):
        assert not EmailAddress.is_valid(address)
        with pytest.raises(ValidationError):
            EmailAddress(address)

    def test_rejects_overlong_address(self):
        assert not EmailAddress.is_valid("a" * 250 + "@b.io")


class TestInvoiceNumber:
    """Test cases for InvoiceNumber value object."""

    def test_accepts_letters_digits_hyphens_underscores(self):
        assert str(InvoiceNumber("INV_2024-0012")) == "INV_2024-0012"

    def test_rejects_trailing_newline(self):
        with pytest.raises(ValidationError):
            InvoiceNumber("INV-001\n")

    def test_rejects_bad_characters(self):
        with pytest.raises(ValidationError):
            InvoiceNumber("INV 001")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            InvoiceNumber("")
