"""
Notification DTOs.
"""

from typing import List, Optional
from datetime import date
from pydantic import Field

from billing.domain.models.notification import Notification, NotificationKind
from .base_dto import ResponseDTO


class NotificationResponseDTO(ResponseDTO):
    """One derived alert."""

    kind: NotificationKind
    invoice_ref: Optional[int]
    invoice_number: str
    message: str
    urgency_date: date
    days_until_due: int

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationResponseDTO":
        return cls(
            kind=notification.kind,
            invoice_ref=notification.invoice_ref,
            invoice_number=notification.invoice_number,
            message=notification.message,
            urgency_date=notification.urgency_date,
            days_until_due=notification.days_until_due,
        )


class NotificationListResponseDTO(ResponseDTO):
    """Alerts, most time-critical first."""

    notifications: List[NotificationResponseDTO] = Field(default_factory=list)
    overdue_count: int = 0
    due_soon_count: int = 0
