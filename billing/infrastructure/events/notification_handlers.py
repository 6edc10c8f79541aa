"""
Event handlers for operator visibility.
Turns domain events into log records.
"""

import logging

from billing.domain.events.base import EventHandler, DomainEvent
from billing.domain.events.invoice_events import (
    InvoiceCreated,
    InvoicePaid,
    InvoicePaymentReverted,
    InvoiceReminderSent,
)
from billing.domain.events.dispatch_events import BulkDispatchCompleted


logger = logging.getLogger(__name__)


class AuditLogHandler(EventHandler):
    """Logs every event at debug level."""

    async def handle(self, event: DomainEvent) -> None:
        logger.debug(f"Event received: {event.event_type} (ID: {event.event_id})")


class InvoiceNotificationHandler(EventHandler):
    """Handler for invoice lifecycle events."""

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process invoice events."""
        return isinstance(event, (InvoiceCreated, InvoicePaid, InvoicePaymentReverted, InvoiceReminderSent))

    async def handle(self, event: DomainEvent) -> None:
        """Log invoice events."""
        if isinstance(event, InvoiceCreated):
            logger.info(
                f"Invoice {event.invoice_number} created for account {event.account_id}: "
                f"{event.total} {event.currency}, due {event.due_date}"
            )
        elif isinstance(event, InvoicePaid):
            logger.info(f"Invoice {event.invoice_number} paid on {event.paid_at.isoformat()}")
        elif isinstance(event, InvoicePaymentReverted):
            logger.warning(
                f"Payment of invoice {event.invoice_number} reverted by {event.reverted_by}"
            )
        elif isinstance(event, InvoiceReminderSent):
            logger.info(f"Reminder {event.reminder_type} sent for invoice {event.invoice_number}")


class DispatchNotificationHandler(EventHandler):
    """Surfaces failed and partial dispatches to operators."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, BulkDispatchCompleted)

    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, BulkDispatchCompleted):
            return

        if event.overall == "success":
            logger.info(f"Dispatch '{event.subject}' delivered to all {event.attempted} recipients")
            return

        preview = ", ".join(event.failed_recipients[:10])
        logger.warning(
            f"Dispatch '{event.subject}' {event.overall}: "
            f"{len(event.failed_recipients)} of {event.attempted} recipients failed ({preview})"
        )
