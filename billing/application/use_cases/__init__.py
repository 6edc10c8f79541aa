"""
Application layer use cases.
Business operations of the billing core.
"""

from .base_use_case import (
    UseCaseResult,
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    AdminUseCase,
)
from .invoice_use_cases import (
    ComputeTotalsUseCase,
    CreateInvoiceUseCase,
    ListInvoicesUseCase,
    MarkInvoicePaidUseCase,
    RevertInvoicePaymentUseCase,
    ListNotificationsUseCase,
    ComposePaymentLinkUseCase,
    SendInvoiceReminderUseCase,
)
from .dispatch_use_cases import (
    BroadcastUseCase,
    AnnouncementUseCase,
    SubscribeNewsletterUseCase,
    UnsubscribeNewsletterUseCase,
)
from .reminder_job import InvoiceReminderSender, ReminderJob, reminder_subject

__all__ = [
    # Base Use Cases
    "UseCaseResult",
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "AdminUseCase",

    # Invoice Use Cases
    "ComputeTotalsUseCase",
    "CreateInvoiceUseCase",
    "ListInvoicesUseCase",
    "MarkInvoicePaidUseCase",
    "RevertInvoicePaymentUseCase",
    "ListNotificationsUseCase",
    "ComposePaymentLinkUseCase",
    "SendInvoiceReminderUseCase",

    # Dispatch Use Cases
    "BroadcastUseCase",
    "AnnouncementUseCase",
    "SubscribeNewsletterUseCase",
    "UnsubscribeNewsletterUseCase",
    "InvoiceReminderSender",
    "ReminderJob",
    "reminder_subject",
]
