"""
Reminder policy and reminder types.
Decides which automated reminder, if any, an invoice is due for on a given day.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .base import ValidationError


class Plan(str, Enum):
    """Subscription plans. Reminder automation depends on the plan."""
    FREE = "FREE"
    STARTER = "STARTER"
    PRO = "PRO"


class ReminderType(str, Enum):
    """Reminder types, each sent at most once per invoice."""
    BEFORE_DUE = "before_due"
    ON_DUE = "on_due"
    AFTER_1 = "after_1"
    AFTER_2 = "after_2"
    AFTER_3 = "after_3"
    MANUAL = "manual"


_AFTER_TYPES = (ReminderType.AFTER_1, ReminderType.AFTER_2, ReminderType.AFTER_3)


@dataclass(frozen=True)
class ReminderPolicy:
    """
    Per-account reminder settings.

    days_before: send a reminder this many days before the due date (PRO).
    on_due_date: send a reminder on the due date itself (PRO).
    days_after: up to three offsets after the due date; STARTER only gets the first.
    """

    plan: Plan = Plan.FREE
    days_before: Optional[int] = None
    on_due_date: bool = False
    days_after: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.plan, Plan):
            try:
                object.__setattr__(self, "plan", Plan(str(self.plan).upper()))
            except ValueError:
                raise ValidationError(f"Unknown plan: {self.plan!r}", "plan")
        object.__setattr__(self, "days_after", tuple(self.days_after))
        if len(self.days_after) > 3:
            raise ValidationError("At most three after-due reminders are supported", "days_after")
        if any(d <= 0 for d in self.days_after):
            raise ValidationError("After-due offsets must be positive", "days_after")
        if self.days_before is not None and self.days_before <= 0:
            raise ValidationError("Before-due offset must be positive", "days_before")

    @property
    def automated(self) -> bool:
        return self.plan != Plan.FREE

    def reminder_for(self, days_until_due: int) -> Optional[ReminderType]:
        """
        Pick the reminder type matching today's offset from the due date.
        A negative days_until_due means the invoice is that many days overdue.
        """
        if not self.automated:
            return None

        is_pro = self.plan == Plan.PRO

        if is_pro and self.days_before and days_until_due == self.days_before:
            return ReminderType.BEFORE_DUE
        if is_pro and self.on_due_date and days_until_due == 0:
            return ReminderType.ON_DUE

        days_overdue = -days_until_due
        allowed = self.days_after if is_pro else self.days_after[:1]
        for reminder_type, offset in zip(_AFTER_TYPES, allowed):
            if offset and days_overdue == offset:
                return reminder_type
        return None
