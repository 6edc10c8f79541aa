"""
In-memory recipient directory.
"""

from typing import Dict, Iterable, List, Optional

from billing.domain.models.reminder import ReminderPolicy
from billing.domain.repositories.recipient_directory import RecipientDirectory


class InMemoryRecipientDirectory(RecipientDirectory):
    """Audience lists kept in memory, seeded at construction or via the add_* helpers."""

    def __init__(
        self,
        users: Optional[Iterable[str]] = None,
        subscribers: Optional[Iterable[str]] = None,
        clients: Optional[Dict[str, Iterable[str]]] = None,
        policies: Optional[Dict[str, ReminderPolicy]] = None
    ):
        self._users: List[str] = list(users or [])
        self._subscribers: List[str] = list(subscribers or [])
        self._clients: Dict[str, List[str]] = {k: list(v) for k, v in (clients or {}).items()}
        self._policies: Dict[str, ReminderPolicy] = dict(policies or {})

    def add_user(self, email: str) -> None:
        self._users.append(email)

    def add_subscriber(self, email: str) -> None:
        self._subscribers.append(email)

    def add_client(self, account_id: str, email: str) -> None:
        self._clients.setdefault(account_id, []).append(email)

    def set_reminder_policy(self, account_id: str, policy: ReminderPolicy) -> None:
        self._policies[account_id] = policy

    async def platform_users(self) -> List[str]:
        return list(self._users)

    async def newsletter_subscribers(self) -> List[str]:
        return list(self._subscribers)

    async def subscribe(self, email: str) -> bool:
        if email in self._subscribers:
            return False
        self._subscribers.append(email)
        return True

    async def unsubscribe(self, email: str) -> bool:
        if email not in self._subscribers:
            return False
        self._subscribers.remove(email)
        return True

    async def account_clients(self, account_id: str) -> List[str]:
        return list(self._clients.get(account_id, []))

    async def reminder_policy(self, account_id: str) -> Optional[ReminderPolicy]:
        return self._policies.get(account_id)
