"""
Domain events related to invoices.
Events for invoice lifecycle management and notifications.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .base import DomainEvent


@dataclass
class InvoiceCreated(DomainEvent):
    """Event fired when a new invoice is created."""

    invoice_id: Optional[int]
    client_id: int
    account_id: str
    invoice_number: str
    total: Decimal
    currency: str
    due_date: Optional[date] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "client_id": self.client_id,
            "account_id": self.account_id,
            "invoice_number": self.invoice_number,
            "total": str(self.total),
            "currency": self.currency,
            "due_date": self.due_date.isoformat() if self.due_date else None
        }


@dataclass
class InvoicePaid(DomainEvent):
    """Event fired when an invoice is marked as paid."""

    invoice_id: Optional[int]
    account_id: str
    invoice_number: str
    amount_paid: Decimal
    currency: str
    paid_at: date

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "account_id": self.account_id,
            "invoice_number": self.invoice_number,
            "amount_paid": str(self.amount_paid),
            "currency": self.currency,
            "paid_at": self.paid_at.isoformat()
        }


@dataclass
class InvoicePaymentReverted(DomainEvent):
    """Event fired when an administrator moves a paid invoice back to pending."""

    invoice_id: Optional[int]
    account_id: str
    invoice_number: str
    reverted_by: str
    previous_paid_at: Optional[date] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "account_id": self.account_id,
            "invoice_number": self.invoice_number,
            "reverted_by": self.reverted_by,
            "previous_paid_at": self.previous_paid_at.isoformat() if self.previous_paid_at else None
        }


@dataclass
class InvoiceReminderSent(DomainEvent):
    """Event fired when the reminder job delivers a reminder."""

    invoice_id: Optional[int]
    account_id: str
    invoice_number: str
    reminder_type: str
    recipient: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "account_id": self.account_id,
            "invoice_number": self.invoice_number,
            "reminder_type": self.reminder_type,
            "recipient": self.recipient
        }
