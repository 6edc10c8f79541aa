"""
Notification derivation.
Turns an invoice set into a prioritized list of actionable alerts.
Nothing is stored: the feed is recomputed from the invoices and the clock.
"""

from typing import Iterable, Iterator, List, Optional, Union
from datetime import date, datetime

from billing.domain.models.invoice import Invoice, InvoiceStatus
from billing.domain.models.notification import Notification, NotificationKind
from billing.domain.models.value_objects import days_until
from .invoice_lifecycle_service import InvoiceLifecycleService


DEFAULT_DUE_SOON_WINDOW = 3


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _amount(invoice: Invoice) -> str:
    return f"{invoice.total} {invoice.currency}"


def _overdue_message(invoice: Invoice, days_overdue: int) -> str:
    return f"Invoice {invoice.invoice_number} is overdue by {_plural(days_overdue, 'day')} - {_amount(invoice)}"


def _due_soon_message(invoice: Invoice, days_left: int) -> str:
    if days_left == 0:
        return f"Invoice {invoice.invoice_number} is due today - {_amount(invoice)}"
    return f"Invoice {invoice.invoice_number} is due in {_plural(days_left, 'day')} - {_amount(invoice)}"


def notification_for(
    invoice: Invoice,
    now: Union[date, datetime],
    window_days: int = DEFAULT_DUE_SOON_WINDOW
) -> Optional[Notification]:
    """The single alert for one invoice, or None when nothing is actionable."""
    status = InvoiceLifecycleService.derive_status(invoice.status, invoice.due_date, now)
    remaining = days_until(invoice.due_date, now)

    if status == InvoiceStatus.OVERDUE:
        return Notification(
            kind=NotificationKind.OVERDUE,
            invoice_ref=invoice.id,
            invoice_number=invoice.invoice_number,
            message=_overdue_message(invoice, -remaining),
            urgency_date=invoice.due_date,
            days_until_due=remaining,
        )

    if status == InvoiceStatus.PENDING and 0 <= remaining <= window_days:
        return Notification(
            kind=NotificationKind.DUE_SOON,
            invoice_ref=invoice.id,
            invoice_number=invoice.invoice_number,
            message=_due_soon_message(invoice, remaining),
            urgency_date=invoice.due_date,
            days_until_due=remaining,
        )

    return None


def _sort_key(notification: Notification):
    # Descending urgency date, then ascending invoice id and number
    return (
        -notification.urgency_date.toordinal(),
        notification.invoice_ref if notification.invoice_ref is not None else 0,
        notification.invoice_number,
    )


class NotificationFeed:
    """
    Lazy, restartable sequence of notifications.
    Each iteration re-derives the alerts from the same invoices and instant.
    """

    def __init__(self, invoices: Iterable[Invoice], now: Union[date, datetime], window_days: int):
        self._invoices = list(invoices)
        self._now = now
        self._window_days = window_days

    def __iter__(self) -> Iterator[Notification]:
        derived = (notification_for(invoice, self._now, self._window_days) for invoice in self._invoices)
        return iter(sorted((n for n in derived if n is not None), key=_sort_key))

    def to_list(self) -> List[Notification]:
        return list(self)

    def __len__(self) -> int:
        return sum(1 for _ in self)


def derive_notifications(
    invoices: Iterable[Invoice],
    now: Union[date, datetime],
    window_days: int = DEFAULT_DUE_SOON_WINDOW
) -> NotificationFeed:
    """Alerts for the caller's invoices, most time-critical first."""
    if window_days < 0:
        raise ValueError("window_days cannot be negative")
    return NotificationFeed(invoices, now, window_days)
