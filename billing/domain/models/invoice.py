"""
Invoice domain model.
Represents invoices issued by an account to one of its clients.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional, List, Dict, Any, Iterable
from enum import Enum
from decimal import Decimal

from .base import AggregateRoot, ValidationError
from .value_objects import Number, EmailAddress, InvoiceNumber, to_decimal, round2


class InvoiceStatus(str, Enum):
    """Invoice status. OVERDUE is only ever derived, never stored."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentTerms(str, Enum):
    """Named due-date policies."""
    NET_7 = "Net 7"
    NET_14 = "Net 14"
    NET_30 = "Net 30"
    CUSTOM = "Custom"

    @property
    def days(self) -> Optional[int]:
        """Days between issue and due date, None for custom terms."""
        return _TERM_DAYS[self]


_TERM_DAYS = {
    PaymentTerms.NET_7: 7,
    PaymentTerms.NET_14: 14,
    PaymentTerms.NET_30: 30,
    PaymentTerms.CUSTOM: None,
}


def term_to_days(term) -> Optional[int]:
    """Map payment terms (enum or its string value) to a day count."""
    try:
        return PaymentTerms(term).days
    except ValueError:
        raise ValidationError(f"Unknown payment terms: {term!r}", "payment_terms")


@dataclass(frozen=True)
class LineItem:
    """Individual line item in an invoice."""

    description: str
    quantity: Decimal
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "quantity", to_decimal(self.quantity, "quantity"))
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))
        self.validate()

    @classmethod
    def of(cls, description: str, quantity: Number, unit_price: Number) -> "LineItem":
        return cls(description=description, quantity=quantity, unit_price=unit_price)

    def validate(self) -> None:
        """Validate line item."""
        if self.quantity < 0:
            raise ValidationError("Quantity cannot be negative", "quantity")

        if self.unit_price < 0:
            raise ValidationError("Unit price cannot be negative", "unit_price")

    @property
    def amount(self) -> Decimal:
        """Exact line amount, unrounded."""
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "description": self.description,
            "quantity": str(self.quantity),
            "unit_price": str(self.unit_price),
            "amount": str(round2(self.amount)),
        }


@dataclass(frozen=True)
class InvoiceTotals:
    """Subtotal, VAT and total of an invoice, all rounded to cents."""

    subtotal: Decimal
    vat_amount: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "subtotal": str(self.subtotal),
            "vat_amount": str(self.vat_amount),
            "total": str(self.total),
        }


@dataclass(eq=False, kw_only=True)
class Invoice(AggregateRoot):
    """
    Invoice aggregate root.

    Totals and the due date are computed by InvoiceLifecycleService; the
    aggregate only guards its own consistency. The stored status is either
    PENDING or PAID, overdue is a projection over the due date.
    """

    account_id: str
    client_id: int
    invoice_number: str
    issue_date: date
    due_date: date
    payment_terms: PaymentTerms = PaymentTerms.NET_30
    vat_rate: Decimal = Decimal("0")
    items: List[LineItem] = field(default_factory=list)

    subtotal: Decimal = Decimal("0.00")
    vat_amount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

    status: InvoiceStatus = InvoiceStatus.PENDING
    paid_at: Optional[date] = None

    currency: str = "EUR"
    client_email: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        try:
            self.payment_terms = PaymentTerms(self.payment_terms)
        except ValueError:
            raise ValidationError(f"Unknown payment terms: {self.payment_terms!r}", "payment_terms")
        try:
            self.status = InvoiceStatus(self.status)
        except ValueError:
            raise ValidationError(f"Unknown invoice status: {self.status!r}", "status")
        self.vat_rate = to_decimal(self.vat_rate, "vat_rate")
        self.items = list(self.items)
        if isinstance(self.issue_date, datetime):
            self.issue_date = self.issue_date.date()
        if isinstance(self.due_date, datetime):
            self.due_date = self.due_date.date()
        self.validate()

    def validate(self) -> None:
        """Validate invoice state."""
        if not self.account_id:
            raise ValidationError("Account ID is required", "account_id")

        if self.client_id is None:
            raise ValidationError("Client ID is required", "client_id")

        InvoiceNumber(self.invoice_number)

        if self.client_email is not None and not EmailAddress.is_valid(self.client_email):
            raise ValidationError(f"Invalid client email: {self.client_email!r}", "client_email")

        if self.vat_rate < 0:
            raise ValidationError("VAT rate cannot be negative", "vat_rate")

        if self.due_date < self.issue_date:
            raise ValidationError("Due date cannot be before issue date", "due_date")

        if self.status == InvoiceStatus.OVERDUE:
            raise ValidationError("Overdue is derived from the due date and cannot be stored", "status")

        if self.status == InvoiceStatus.PAID and self.paid_at is None:
            raise ValidationError("Paid invoices require a payment date", "paid_at")

    @property
    def is_paid(self) -> bool:
        """Check if invoice is paid."""
        return self.status == InvoiceStatus.PAID

    @property
    def totals(self) -> InvoiceTotals:
        return InvoiceTotals(self.subtotal, self.vat_amount, self.total)

    def apply_totals(self, totals: InvoiceTotals) -> None:
        """Store freshly computed totals."""
        self.subtotal = totals.subtotal
        self.vat_amount = totals.vat_amount
        self.total = totals.total
        self.mark_as_updated()

    def replace_items(self, items: Iterable[LineItem]) -> None:
        self.items = list(items)
        self.mark_as_updated()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "account_id": self.account_id,
            "client_id": self.client_id,
            "invoice_number": self.invoice_number,
            "issue_date": self.issue_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "payment_terms": self.payment_terms.value,
            "vat_rate": str(self.vat_rate),
            "items": [item.to_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "vat_amount": str(self.vat_amount),
            "total": str(self.total),
            "status": self.status.value,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "currency": self.currency,
            "client_email": self.client_email,
            "notes": self.notes,
            "version": self.version,
        }
