"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from typing import Optional

from billing.domain.events.base import EventDispatcher, get_event_dispatcher
from .notification_handlers import (
    AuditLogHandler,
    DispatchNotificationHandler,
    InvoiceNotificationHandler,
)

logger = logging.getLogger(__name__)


def setup_event_handlers(dispatcher: Optional[EventDispatcher] = None) -> EventDispatcher:
    """Set up and register all event handlers."""

    dispatcher = dispatcher or get_event_dispatcher()

    invoice_handler = InvoiceNotificationHandler()
    dispatch_handler = DispatchNotificationHandler()

    # Register global handler for logging
    dispatcher.register_global_handler(AuditLogHandler())

    # Register specific handlers for invoice events
    dispatcher.register_handler("InvoiceCreated", invoice_handler)
    dispatcher.register_handler("InvoicePaid", invoice_handler)
    dispatcher.register_handler("InvoicePaymentReverted", invoice_handler)
    dispatcher.register_handler("InvoiceReminderSent", invoice_handler)

    # Register specific handlers for dispatch events
    dispatcher.register_handler("BulkDispatchCompleted", dispatch_handler)

    logger.info("Event handlers registered successfully")

    # Log registered handlers
    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")

    return dispatcher
