"""
Unit tests for InvoiceLifecycleService.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime

from billing.domain.models.base import AccountContext, InvalidTransitionError, ValidationError
from billing.domain.models.invoice import InvoiceStatus, LineItem, PaymentTerms
from billing.domain.models.value_objects import round2
from billing.domain.events.invoice_events import InvoicePaid, InvoicePaymentReverted
from billing.domain.services.invoice_lifecycle_service import InvoiceLifecycleService


class TestInvoiceLifecycleService:
    """Test cases for InvoiceLifecycleService."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()
        self.context = AccountContext("acct-1")
        self.admin = AccountContext("ops", roles=("admin",))
        self.items = [
            LineItem.of("Design", 2, 50),
            LineItem.of("Development", 1, 100),
            LineItem.of("Hosting", 3, 20),
        ]

    def _create(self, **overrides):
        data = dict(
            context=self.context,
            client_id=1,
            invoice_number="INV-001",
            items=self.items,
            issue_date=date(2024, 1, 1),
            payment_terms=PaymentTerms.NET_30,
            vat_rate=19,
        )
        data.update(overrides)
        return self.service.create_invoice(**data)

    def test_compute_totals(self):
        """Test subtotal, VAT and total for a typical invoice."""
        totals = self.service.compute_totals(self.items, 19)

        assert str(totals.subtotal) == "260.00"
        assert str(totals.vat_amount) == "49.40"
        assert str(totals.total) == "309.40"

    def test_compute_totals_is_order_independent(self):
        """Test that item order does not change the totals."""
        forward = self.service.compute_totals(self.items, 19)
        backward = self.service.compute_totals(list(reversed(self.items)), 19)

        assert forward == backward

    def test_compute_totals_no_float_drift(self):
        """Test that many small amounts sum exactly."""
        items = [LineItem.of("Tick", 1, 0.1) for _ in range(10)]

        totals = self.service.compute_totals(items, 0)

        assert totals.total == Decimal("1.00")

    def test_compute_totals_rounds_half_up(self):
        """Test that half cents round away from zero."""
        totals = self.service.compute_totals([LineItem.of("Tiny", 1, "0.005")], 0)

        assert totals.subtotal == Decimal("0.01")

    def test_compute_totals_parts_add_up(self):
        """Test that VAT and total derive from the rounded subtotal."""
        totals = self.service.compute_totals([LineItem.of("Hours", "0.333", 1)], 10)

        assert totals.subtotal == Decimal("0.33")
        assert totals.vat_amount == Decimal("0.03")
        assert totals.total == Decimal("0.36")
        assert totals.total == round2(totals.subtotal + totals.subtotal * 10 / 100)
        assert totals.total == totals.subtotal + totals.vat_amount

    @pytest.mark.parametrize("quantity, price, vat_rate", [
        (1, "10.005", "10.5"),
        ("2.5", "33.333", 19),
        ("0.125", "7.77", "21"),
        (3, "0.015", 7),
    ])
    def test_compute_totals_invariant(self, quantity, price, vat_rate):
        """Test that total equals round2(subtotal + subtotal * rate / 100) on the stored subtotal."""
        totals = self.service.compute_totals([LineItem.of("Item", quantity, price)], vat_rate)
        rate = Decimal(str(vat_rate))

        assert totals.subtotal == round2(Decimal(str(quantity)) * Decimal(price))
        assert totals.total == round2(totals.subtotal + totals.subtotal * rate / 100)

    def test_compute_totals_requires_items(self):
        """Test that an empty item list is rejected."""
        with pytest.raises(ValidationError, match="at least one line item"):
            self.service.compute_totals([], 19)

    def test_compute_totals_rejects_negative_vat(self):
        """Test that a negative VAT rate is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            self.service.compute_totals(self.items, -5)
        assert exc_info.value.field == "vat_rate"

    def test_resolve_due_date_net_terms(self):
        """Test due dates for the Net terms."""
        issue = date(2024, 1, 1)

        assert self.service.resolve_due_date(issue, PaymentTerms.NET_30) == date(2024, 1, 31)
        assert self.service.resolve_due_date(issue, "Net 14") == date(2024, 1, 15)
        assert self.service.resolve_due_date(issue, PaymentTerms.NET_7) == date(2024, 1, 8)

    def test_resolve_due_date_net_terms_ignore_explicit(self):
        """Test that Net terms always compute the due date."""
        due = self.service.resolve_due_date(date(2024, 1, 1), "Net 7", date(2024, 6, 1))

        assert due == date(2024, 1, 8)

    def test_resolve_due_date_custom(self):
        """Test that Custom terms keep the explicit due date."""
        due = self.service.resolve_due_date(date(2024, 1, 1), PaymentTerms.CUSTOM, date(2024, 3, 15))

        assert due == date(2024, 3, 15)

    def test_resolve_due_date_custom_requires_date(self):
        """Test that Custom terms without a due date are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            self.service.resolve_due_date(date(2024, 1, 1), "Custom")
        assert exc_info.value.field == "due_date"

    def test_derive_status(self):
        """Test derived status around the due date."""
        due = date(2024, 1, 31)
        derive = InvoiceLifecycleService.derive_status

        assert derive(InvoiceStatus.PENDING, due, date(2024, 1, 30)) == InvoiceStatus.PENDING
        assert derive(InvoiceStatus.PENDING, due, datetime(2024, 1, 31, 23, 59)) == InvoiceStatus.PENDING
        assert derive(InvoiceStatus.PENDING, due, date(2024, 2, 1)) == InvoiceStatus.OVERDUE
        assert derive("paid", due, date(2030, 1, 1)) == InvoiceStatus.PAID

    def test_create_invoice(self):
        """Test creating an invoice computes totals and due date."""
        invoice = self._create()

        assert invoice.account_id == "acct-1"
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.due_date == date(2024, 1, 31)
        assert invoice.total == Decimal("309.40")
        assert invoice.currency == "EUR"
        assert invoice.pull_events() == []

    def test_create_invoice_custom_terms(self):
        """Test creating an invoice with Custom terms."""
        invoice = self._create(payment_terms="Custom", due_date=date(2024, 2, 20))

        assert invoice.due_date == date(2024, 2, 20)

    def test_mark_paid(self):
        """Test marking an invoice as paid."""
        invoice = self._create()

        self.service.mark_paid(invoice, date(2024, 1, 20))

        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_at == date(2024, 1, 20)
        events = invoice.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], InvoicePaid)
        assert events[0].amount_paid == Decimal("309.40")

    def test_mark_paid_overdue_invoice(self):
        """Test that an overdue invoice can be paid."""
        invoice = self._create()
        assert self.service.derive_status(invoice.status, invoice.due_date, date(2024, 3, 1)) == InvoiceStatus.OVERDUE

        self.service.mark_paid(invoice, date(2024, 3, 1))

        assert self.service.derive_status(invoice.status, invoice.due_date, date(2024, 3, 1)) == InvoiceStatus.PAID

    def test_mark_paid_is_idempotent(self):
        """Test that paying twice changes nothing the second time."""
        invoice = self._create()
        self.service.mark_paid(invoice, date(2024, 1, 20))
        version = invoice.version

        self.service.mark_paid(invoice, date(2024, 2, 5))

        assert invoice.paid_at == date(2024, 1, 20)
        assert invoice.version == version
        assert len(invoice.pull_events()) == 1

    def test_revert_payment_requires_admin(self):
        """Test that a regular account cannot revert a payment."""
        invoice = self._create()
        self.service.mark_paid(invoice, date(2024, 1, 20))

        with pytest.raises(InvalidTransitionError, match="administrator"):
            self.service.revert_payment(invoice, self.context)
        assert invoice.is_paid

    def test_revert_payment(self):
        """Test that an admin can revert a payment."""
        invoice = self._create()
        self.service.mark_paid(invoice, date(2024, 1, 20))
        invoice.pull_events()

        self.service.revert_payment(invoice, self.admin)

        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.paid_at is None
        events = invoice.pull_events()
        assert isinstance(events[0], InvoicePaymentReverted)
        assert events[0].previous_paid_at == date(2024, 1, 20)
        assert events[0].reverted_by == "ops"

    def test_revert_unpaid_invoice(self):
        """Test that reverting a pending invoice is rejected."""
        invoice = self._create()

        with pytest.raises(InvalidTransitionError) as exc_info:
            self.service.revert_payment(invoice, self.admin)
        assert exc_info.value.code == "INVALID_TRANSITION"

    def test_custom_admin_roles(self):
        """Test that the admin roles are configurable."""
        service = InvoiceLifecycleService(admin_roles=("billing-admin",))
        invoice = self._create()
        service.mark_paid(invoice)

        with pytest.raises(InvalidTransitionError):
            service.revert_payment(invoice, self.admin)
        service.revert_payment(invoice, AccountContext("ops", roles=("billing-admin",)))
        assert not invoice.is_paid

    def test_reschedule_recomputes_due_date(self):
        """Test that changing the issue date moves the due date."""
        invoice = self._create()

        self.service.reschedule(invoice, issue_date=date(2024, 2, 1))

        assert invoice.due_date == date(2024, 3, 2)

    def test_reschedule_changes_terms(self):
        """Test switching from Custom back to Net terms."""
        invoice = self._create(payment_terms="Custom", due_date=date(2024, 5, 1))

        self.service.reschedule(invoice, payment_terms="Net 7")

        assert invoice.payment_terms == PaymentTerms.NET_7
        assert invoice.due_date == date(2024, 1, 8)

    def test_reschedule_to_custom_keeps_due_date(self):
        """Test switching to Custom keeps the current due date."""
        invoice = self._create()

        self.service.reschedule(invoice, payment_terms=PaymentTerms.CUSTOM)

        assert invoice.due_date == date(2024, 1, 31)

    def test_reschedule_rejects_due_before_issue(self):
        """Test that a Custom due date before the issue date is rejected."""
        invoice = self._create(payment_terms="Custom", due_date=date(2024, 1, 10))

        with pytest.raises(ValidationError):
            self.service.reschedule(invoice, issue_date=date(2024, 2, 1))

    def test_update_items(self):
        """Test replacing items recomputes totals."""
        invoice = self._create()

        self.service.update_items(invoice, [LineItem.of("Retainer", 1, 1000)], vat_rate=0)

        assert invoice.subtotal == Decimal("1000.00")
        assert invoice.total == Decimal("1000.00")
        assert len(invoice.items) == 1

    def test_update_items_on_paid_invoice(self):
        """Test that paid invoices cannot be edited."""
        invoice = self._create()
        self.service.mark_paid(invoice)

        with pytest.raises(InvalidTransitionError):
            self.service.update_items(invoice, [LineItem.of("Retainer", 1, 1000)])
