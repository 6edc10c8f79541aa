"""
Domain events related to bulk message dispatch.
"""

from typing import Dict, Any, List
from dataclasses import dataclass, field

from .base import DomainEvent


@dataclass
class BulkDispatchCompleted(DomainEvent):
    """Event fired after a bulk dispatch finishes, cancelled or not."""

    subject: str
    attempted: int
    succeeded: int
    overall: str
    chunks_attempted: int
    cancelled: bool = False
    failed_recipients: List[str] = field(default_factory=list)

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed_count": len(self.failed_recipients),
            "overall": self.overall,
            "chunks_attempted": self.chunks_attempted,
            "cancelled": self.cancelled
        }
