"""
Invoice lifecycle service.
Computes totals and due dates, derives payment status and applies the
allowed status transitions.
"""

from typing import Iterable, Optional, Sequence, Union
from datetime import date, datetime
from decimal import Decimal

from billing.domain.models.base import (
    AccountContext,
    ValidationError,
    InvalidTransitionError,
)
from billing.domain.models.value_objects import Number, to_decimal, round2, add_days, as_civil_date
from billing.domain.models.invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceTotals,
    LineItem,
    PaymentTerms,
    term_to_days,
)
from billing.domain.events.invoice_events import InvoicePaid, InvoicePaymentReverted


HUNDRED = Decimal("100")


class InvoiceLifecycleService:
    """
    Domain service for invoice calculations and status transitions.

    All methods are synchronous and touch nothing but their arguments, so
    one instance can be shared freely.
    """

    def __init__(self, admin_roles: Sequence[str] = ("admin",)):
        self.admin_roles = tuple(admin_roles)

    def compute_totals(self, items: Iterable[LineItem], vat_rate: Number) -> InvoiceTotals:
        """
        Subtotal, VAT and total for a list of line items.
        The subtotal is rounded first; VAT and total derive from it, so the
        stored parts always add up.
        """
        items = list(items)
        if not items:
            raise ValidationError("Invoice must have at least one line item", "items")

        rate = to_decimal(vat_rate, "vat_rate")
        if rate < 0:
            raise ValidationError("VAT rate cannot be negative", "vat_rate")

        subtotal = Decimal("0")
        for item in items:
            if item.quantity < 0:
                raise ValidationError("Quantity cannot be negative", "quantity")
            if item.unit_price < 0:
                raise ValidationError("Unit price cannot be negative", "unit_price")
            subtotal += item.amount

        subtotal = round2(subtotal)
        vat = subtotal * rate / HUNDRED
        return InvoiceTotals(
            subtotal=subtotal,
            vat_amount=round2(vat),
            total=round2(subtotal + vat),
        )

    def resolve_due_date(
        self,
        issue_date: Union[date, datetime],
        payment_terms: Union[PaymentTerms, str],
        explicit_due_date: Optional[Union[date, datetime]] = None
    ) -> date:
        """Due date from the terms; Custom terms keep the caller's date."""
        days = term_to_days(payment_terms)
        if days is None:
            if explicit_due_date is None:
                raise ValidationError("Custom payment terms require an explicit due date", "due_date")
            return as_civil_date(explicit_due_date)
        return add_days(issue_date, days)

    @staticmethod
    def derive_status(
        stored_status: Union[InvoiceStatus, str],
        due_date: Union[date, datetime],
        now: Union[date, datetime]
    ) -> InvoiceStatus:
        """Paid is terminal; anything else is overdue once the due date has passed."""
        if InvoiceStatus(stored_status) == InvoiceStatus.PAID:
            return InvoiceStatus.PAID
        if as_civil_date(now) > as_civil_date(due_date):
            return InvoiceStatus.OVERDUE
        return InvoiceStatus.PENDING

    def create_invoice(
        self,
        context: AccountContext,
        client_id: int,
        invoice_number: str,
        items: Iterable[LineItem],
        issue_date: Union[date, datetime],
        payment_terms: Union[PaymentTerms, str] = PaymentTerms.NET_30,
        vat_rate: Number = 0,
        due_date: Optional[Union[date, datetime]] = None,
        currency: str = "EUR",
        client_email: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Invoice:
        """Build a new pending invoice owned by the calling account."""
        items = list(items)
        totals = self.compute_totals(items, vat_rate)
        issue_date = as_civil_date(issue_date)
        resolved_due = self.resolve_due_date(issue_date, payment_terms, due_date)

        invoice = Invoice(
            account_id=context.account_id,
            client_id=client_id,
            invoice_number=invoice_number,
            issue_date=issue_date,
            due_date=resolved_due,
            payment_terms=payment_terms,
            vat_rate=vat_rate,
            items=items,
            subtotal=totals.subtotal,
            vat_amount=totals.vat_amount,
            total=totals.total,
            currency=currency,
            client_email=client_email,
            notes=notes,
        )

        return invoice

    def mark_paid(self, invoice: Invoice, paid_on: Optional[Union[date, datetime]] = None) -> Invoice:
        """
        Record payment. Calling it again on a paid invoice changes nothing,
        so callers that retry do not need to check first.
        """
        if invoice.is_paid:
            return invoice

        invoice.status = InvoiceStatus.PAID
        invoice.paid_at = as_civil_date(paid_on) if paid_on else date.today()
        invoice.increment_version()

        invoice.add_event(InvoicePaid(
            invoice_id=invoice.id,
            account_id=invoice.account_id,
            invoice_number=invoice.invoice_number,
            amount_paid=invoice.total,
            currency=invoice.currency,
            paid_at=invoice.paid_at,
        ))
        return invoice

    def revert_payment(self, invoice: Invoice, operator: AccountContext) -> Invoice:
        """Administrative reversal of a payment back to pending."""
        if not any(operator.has_role(role) for role in self.admin_roles):
            raise InvalidTransitionError(
                "Only an administrator can revert a payment",
                InvoiceStatus.PAID.value,
                InvoiceStatus.PENDING.value,
            )
        if not invoice.is_paid:
            raise InvalidTransitionError(
                f"Invoice {invoice.invoice_number} is not paid",
                invoice.status.value,
                InvoiceStatus.PENDING.value,
            )

        previous_paid_at = invoice.paid_at
        invoice.status = InvoiceStatus.PENDING
        invoice.paid_at = None
        invoice.increment_version()

        invoice.add_event(InvoicePaymentReverted(
            invoice_id=invoice.id,
            account_id=invoice.account_id,
            invoice_number=invoice.invoice_number,
            reverted_by=operator.account_id,
            previous_paid_at=previous_paid_at,
        ))
        return invoice

    def reschedule(
        self,
        invoice: Invoice,
        issue_date: Optional[Union[date, datetime]] = None,
        payment_terms: Optional[Union[PaymentTerms, str]] = None,
        due_date: Optional[Union[date, datetime]] = None
    ) -> Invoice:
        """
        Change issue date, terms or (for Custom terms) the due date.
        Under Net terms the due date is always recomputed from the issue date.
        """
        new_issue = as_civil_date(issue_date) if issue_date else invoice.issue_date
        new_terms = PaymentTerms(payment_terms) if payment_terms else invoice.payment_terms

        if new_terms == PaymentTerms.CUSTOM:
            new_due = self.resolve_due_date(new_issue, new_terms, due_date or invoice.due_date)
        else:
            new_due = self.resolve_due_date(new_issue, new_terms)

        if new_due < new_issue:
            raise ValidationError("Due date cannot be before issue date", "due_date")

        invoice.issue_date = new_issue
        invoice.payment_terms = new_terms
        invoice.due_date = new_due
        invoice.increment_version()
        return invoice

    def update_items(
        self,
        invoice: Invoice,
        items: Iterable[LineItem],
        vat_rate: Optional[Number] = None
    ) -> Invoice:
        """Replace line items and recompute totals. Paid invoices are frozen."""
        if invoice.is_paid:
            raise InvalidTransitionError(
                f"Invoice {invoice.invoice_number} is paid and cannot be edited",
                InvoiceStatus.PAID.value,
                InvoiceStatus.PAID.value,
            )

        items = list(items)
        rate = invoice.vat_rate if vat_rate is None else to_decimal(vat_rate, "vat_rate")
        totals = self.compute_totals(items, rate)

        invoice.replace_items(items)
        invoice.vat_rate = rate
        invoice.apply_totals(totals)
        invoice.increment_version()
        return invoice
