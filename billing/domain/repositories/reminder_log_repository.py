"""Reminder log repository interface.
Remembers which reminder types were already sent for which invoice.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from billing.domain.models.reminder import ReminderType


class ReminderLogRepository(ABC):
    """Append-only log of delivered reminders."""

    @abstractmethod
    async def has_sent(self, invoice_id: int, reminder_type: ReminderType) -> bool:
        """Check whether this reminder type was already sent for the invoice."""
        pass

    @abstractmethod
    async def record(self, invoice_id: int, reminder_type: ReminderType, sent_at: datetime) -> None:
        """Record a delivered reminder."""
        pass
