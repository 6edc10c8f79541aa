"""
Unit tests for Invoice domain model.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime

from billing.domain.models.base import ValidationError
from billing.domain.models.invoice import (
    Invoice,
    InvoiceStatus,
    LineItem,
    PaymentTerms,
    term_to_days,
)


def make_invoice(**overrides) -> Invoice:
    data = dict(
        account_id="acct-1",
        client_id=1,
        invoice_number="INV-001",
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 1, 31),
    )
    data.update(overrides)
    return Invoice(**data)


class TestTermToDays:
    """Test cases for payment terms."""

    def test_net_terms(self):
        assert term_to_days(PaymentTerms.NET_7) == 7
        assert term_to_days("Net 14") == 14
        assert term_to_days("Net 30") == 30

    def test_custom_has_no_days(self):
        assert term_to_days("Custom") is None

    def test_unknown_term(self):
        with pytest.raises(ValidationError):
            term_to_days("Net 45")


class TestLineItem:
    """Test cases for LineItem."""

    def test_amount(self):
        item = LineItem.of("Design", 2, "50.10")
        assert item.quantity == Decimal("2")
        assert item.amount == Decimal("100.20")

    def test_negative_quantity(self):
        with pytest.raises(ValidationError, match="Quantity"):
            LineItem.of("Design", -1, 50)

    def test_negative_price(self):
        with pytest.raises(ValidationError, match="Unit price"):
            LineItem.of("Design", 1, -50)

    def test_zero_is_allowed(self):
        assert LineItem.of("Free sample", 0, 0).amount == Decimal("0")


class TestInvoice:
    """Test cases for Invoice aggregate."""

    def test_create_defaults(self):
        invoice = make_invoice()

        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.payment_terms == PaymentTerms.NET_30
        assert invoice.currency == "EUR"
        assert invoice.is_new
        assert not invoice.is_paid

    def test_coerces_strings_and_datetimes(self):
        invoice = make_invoice(
            payment_terms="Net 7",
            status="paid",
            paid_at=date(2024, 1, 5),
            issue_date=datetime(2024, 1, 1, 10, 30),
            vat_rate="19",
        )

        assert invoice.payment_terms == PaymentTerms.NET_7
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.issue_date == date(2024, 1, 1)
        assert invoice.vat_rate == Decimal("19")

    def test_overdue_cannot_be_stored(self):
        with pytest.raises(ValidationError, match="derived"):
            make_invoice(status="overdue")

    def test_paid_requires_payment_date(self):
        with pytest.raises(ValidationError) as exc_info:
            make_invoice(status=InvoiceStatus.PAID)
        assert exc_info.value.field == "paid_at"

    def test_due_before_issue(self):
        with pytest.raises(ValidationError, match="Due date"):
            make_invoice(due_date=date(2023, 12, 31))

    def test_negative_vat(self):
        with pytest.raises(ValidationError):
            make_invoice(vat_rate=-1)

    def test_unknown_terms(self):
        with pytest.raises(ValidationError) as exc_info:
            make_invoice(payment_terms="Net 60")
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_invalid_invoice_number(self):
        with pytest.raises(ValidationError):
            make_invoice(invoice_number="INV/001")

    def test_invalid_client_email(self):
        with pytest.raises(ValidationError) as exc_info:
            make_invoice(client_email="client@example.com\n")
        assert exc_info.value.field == "client_email"

    def test_client_email_optional(self):
        assert make_invoice().client_email is None
        assert make_invoice(client_email="client@example.com").client_email == "client@example.com"

    def test_entities_compare_by_id(self):
        first = make_invoice(id=5)
        second = make_invoice(id=5, invoice_number="INV-002")

        assert first == second
        assert make_invoice() != make_invoice()

    def test_entities_hash_by_id(self):
        first = make_invoice(id=5)
        second = make_invoice(id=5, invoice_number="INV-002")

        assert hash(first) == hash(second)
        assert len({first, second, make_invoice(id=6)}) == 2

    def test_to_dict(self):
        invoice = make_invoice(items=[LineItem.of("Design", 2, 50)])
        data = invoice.to_dict()

        assert data["due_date"] == "2024-01-31"
        assert data["status"] == "pending"
        assert data["items"][0]["amount"] == "100.00"
