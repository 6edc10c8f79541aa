"""
Value Objects for the domain layer.
Immutable values plus the money and calendar helpers every invoice calculation relies on.
"""

from typing import Optional, Union
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from datetime import date, datetime, timedelta
from dataclasses import dataclass
import re

from .base import ValidationError


Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")

EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')
INVOICE_NUMBER_PATTERN = re.compile(r'[A-Za-z0-9\-_]+')


def to_decimal(value: Number, field: Optional[str] = None) -> Decimal:
    """
    Convert a number to Decimal without binary floating point drift.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid numeric value: {value!r}", field)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError(f"Invalid numeric value: {value!r}", field)
    if not result.is_finite():
        raise ValidationError(f"Numeric value must be finite: {value!r}", field)
    return result


def round2(value: Number) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    # ROUND_HALF_UP on Decimal rounds ties away from zero for negatives too
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_civil_date(value: Union[date, datetime]) -> date:
    """Drop the time part of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(start: Union[date, datetime], days: int) -> date:
    """Calendar-day addition on civil dates."""
    return as_civil_date(start) + timedelta(days=days)


def days_until(due_date: Union[date, datetime], now: Union[date, datetime]) -> int:
    """Signed number of civil days from now until due_date (negative once past)."""
    return (as_civil_date(due_date) - as_civil_date(now)).days


@dataclass(frozen=True)
class EmailAddress:
    """Value object representing a syntactically valid email address."""

    address: str

    def __post_init__(self):
        """Validate the email address using basic regex."""
        if not self.is_valid(self.address):
            raise ValidationError(f"Invalid email address: {self.address!r}", "recipients")

    @staticmethod
    def is_valid(email_str: str) -> bool:
        """Check syntax without raising."""
        # fullmatch: "$" would also accept a trailing newline
        return (
            isinstance(email_str, str)
            and len(email_str) <= 254
            and EMAIL_PATTERN.fullmatch(email_str) is not None
        )

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class InvoiceNumber:
    """Value object representing an invoice number with format validation."""

    value: str

    def __post_init__(self):
        """Validate the invoice number format."""
        if not self.value:
            raise ValidationError("Invoice number cannot be empty", "invoice_number")

        if len(self.value) > 50:
            raise ValidationError("Invoice number cannot exceed 50 characters", "invoice_number")

        # Allow alphanumeric characters, hyphens, and underscores
        if not INVOICE_NUMBER_PATTERN.fullmatch(self.value):
            raise ValidationError(
                "Invoice number can only contain letters, numbers, hyphens, and underscores",
                "invoice_number"
            )

    def __str__(self) -> str:
        return self.value
