"""
Repository interfaces for the domain layer.
Concrete implementations live in the infrastructure layer.
"""

from .invoice_repository import InvoiceRepository
from .recipient_directory import RecipientDirectory
from .reminder_log_repository import ReminderLogRepository

__all__ = [
    "InvoiceRepository",
    "RecipientDirectory",
    "ReminderLogRepository",
]
