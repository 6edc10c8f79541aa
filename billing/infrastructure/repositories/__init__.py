"""
Infrastructure repositories module.
Contains in-memory implementations of domain repositories.
"""

from .invoice_repository import InMemoryInvoiceRepository
from .recipient_directory import InMemoryRecipientDirectory
from .reminder_log_repository import InMemoryReminderLogRepository

__all__ = [
    "InMemoryInvoiceRepository",
    "InMemoryRecipientDirectory",
    "InMemoryReminderLogRepository"
]
