"""
Infrastructure event handlers.
Handles domain events for operator visibility.
"""

from .notification_handlers import AuditLogHandler, InvoiceNotificationHandler, DispatchNotificationHandler
from .event_setup import setup_event_handlers

__all__ = [
    "AuditLogHandler",
    "InvoiceNotificationHandler",
    "DispatchNotificationHandler",
    "setup_event_handlers",
]
