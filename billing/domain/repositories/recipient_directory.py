"""Recipient directory interface.
Resolves audiences (platform users, newsletter subscribers, an account's
clients) to lists of addresses for bulk dispatch.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from billing.domain.models.reminder import ReminderPolicy


class RecipientDirectory(ABC):
    """Who can be contacted, plus newsletter subscription management."""

    @abstractmethod
    async def platform_users(self) -> List[str]:
        """Email addresses of every platform user."""
        pass

    @abstractmethod
    async def newsletter_subscribers(self) -> List[str]:
        """Email addresses of active newsletter subscribers."""
        pass

    @abstractmethod
    async def subscribe(self, email: str) -> bool:
        """Add a newsletter subscriber. Returns False if already subscribed."""
        pass

    @abstractmethod
    async def unsubscribe(self, email: str) -> bool:
        """Remove a newsletter subscriber. Returns False if not subscribed."""
        pass

    @abstractmethod
    async def account_clients(self, account_id: str) -> List[str]:
        """Email addresses of an account's clients."""
        pass

    @abstractmethod
    async def reminder_policy(self, account_id: str) -> Optional[ReminderPolicy]:
        """Reminder settings of an account, None when not configured."""
        pass
