"""
In-memory reminder log.
"""

from datetime import datetime
from typing import Dict, Tuple

from billing.domain.models.reminder import ReminderType
from billing.domain.repositories.reminder_log_repository import ReminderLogRepository


class InMemoryReminderLogRepository(ReminderLogRepository):
    """Keeps one entry per (invoice, reminder type)."""

    def __init__(self):
        self._entries: Dict[Tuple[int, ReminderType], datetime] = {}

    async def has_sent(self, invoice_id: int, reminder_type: ReminderType) -> bool:
        return (invoice_id, ReminderType(reminder_type)) in self._entries

    async def record(self, invoice_id: int, reminder_type: ReminderType, sent_at: datetime) -> None:
        self._entries.setdefault((invoice_id, ReminderType(reminder_type)), sent_at)

    def sent_at(self, invoice_id: int, reminder_type: ReminderType):
        """When a reminder was sent, or None."""
        return self._entries.get((invoice_id, ReminderType(reminder_type)))
