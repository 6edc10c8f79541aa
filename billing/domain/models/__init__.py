"""
Domain models for the billing core.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    AccountContext,
    DomainException,
    ValidationError,
    ConfigurationError,
    InvalidTransitionError,
    TransportError,
    PermissionDenied,
    EntityNotFoundError,
)

# Value Objects
from .value_objects import (
    EmailAddress,
    InvoiceNumber,
    to_decimal,
    round2,
    add_days,
    days_until,
)

from .invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceTotals,
    LineItem,
    PaymentTerms,
    term_to_days,
)

from .notification import (
    Notification,
    NotificationKind,
)

from .dispatch import (
    ChunkResult,
    DispatchOutcome,
    DispatchRequest,
    DispatchResult,
    FailedRecipient,
    ReasonCode,
)

from .payment import (
    PaymentMethod,
    PaymentMethodType,
    PayPalMethod,
    StripeLinkMethod,
    RevolutMethod,
    BankTransferMethod,
    payment_method_from_dict,
)

from .reminder import (
    Plan,
    ReminderPolicy,
    ReminderType,
)

__all__ = [
    # Base classes
    "BaseEntity",
    "AggregateRoot",
    "AccountContext",
    "DomainException",
    "ValidationError",
    "ConfigurationError",
    "InvalidTransitionError",
    "TransportError",
    "PermissionDenied",
    "EntityNotFoundError",

    # Value objects
    "EmailAddress",
    "InvoiceNumber",
    "to_decimal",
    "round2",
    "add_days",
    "days_until",

    # Invoice
    "Invoice",
    "InvoiceStatus",
    "InvoiceTotals",
    "LineItem",
    "PaymentTerms",
    "term_to_days",

    # Notification
    "Notification",
    "NotificationKind",

    # Dispatch
    "ChunkResult",
    "DispatchOutcome",
    "DispatchRequest",
    "DispatchResult",
    "FailedRecipient",
    "ReasonCode",

    # Payment
    "PaymentMethod",
    "PaymentMethodType",
    "PayPalMethod",
    "StripeLinkMethod",
    "RevolutMethod",
    "BankTransferMethod",
    "payment_method_from_dict",

    # Reminder
    "Plan",
    "ReminderPolicy",
    "ReminderType",
]
