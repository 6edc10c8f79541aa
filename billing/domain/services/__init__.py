"""
Domain services.
Business logic that spans more than one entity or talks to collaborators.
"""

from .invoice_lifecycle_service import InvoiceLifecycleService
from .payment_link_service import compose_payment_link, compose_for
from .notification_service import NotificationFeed, derive_notifications, notification_for
from .message_service import OutboundMessageSender, TemplateRenderer
from .dispatch_service import BulkDispatchEngine, CancellationToken, chunk_recipients

__all__ = [
    "InvoiceLifecycleService",
    "compose_payment_link",
    "compose_for",
    "NotificationFeed",
    "derive_notifications",
    "notification_for",
    "OutboundMessageSender",
    "TemplateRenderer",
    "BulkDispatchEngine",
    "CancellationToken",
    "chunk_recipients",
]
