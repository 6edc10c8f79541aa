"""
Domain events for the application.
Event-driven architecture components for notifications and business logic.
"""

from .base import DomainEvent, EventHandler, EventDispatcher, get_event_dispatcher
from .invoice_events import InvoiceCreated, InvoicePaid, InvoicePaymentReverted, InvoiceReminderSent
from .dispatch_events import BulkDispatchCompleted

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "InvoiceCreated",
    "InvoicePaid",
    "InvoicePaymentReverted",
    "InvoiceReminderSent",
    "BulkDispatchCompleted"
]
