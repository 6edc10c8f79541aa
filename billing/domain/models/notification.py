"""
Notification domain model.
Notifications are derived from the invoice set on every query and are never persisted.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any


class NotificationKind(str, Enum):
    """Kinds of actionable alerts."""
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"


@dataclass(frozen=True)
class Notification:
    """An actionable alert about one invoice."""

    kind: NotificationKind
    invoice_ref: Optional[int]
    invoice_number: str
    message: str
    urgency_date: date
    days_until_due: int

    @property
    def days_overdue(self) -> int:
        return max(0, -self.days_until_due)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "invoice_ref": self.invoice_ref,
            "invoice_number": self.invoice_number,
            "message": self.message,
            "urgency_date": self.urgency_date.isoformat(),
            "days_until_due": self.days_until_due,
        }
