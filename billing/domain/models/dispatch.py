"""
Dispatch domain model.
Requests, per-chunk outcomes and the aggregated report of a bulk send.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Mapping, Tuple


class ReasonCode(str, Enum):
    """Why a recipient was not delivered."""
    TRANSPORT_ERROR = "TransportError"
    PROVIDER_ERROR = "ProviderError"


class DispatchOutcome(str, Enum):
    """Overall outcome of a dispatch."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchRequest:
    """
    One bulk send: the same subject and body to every recipient.

    When template_id is set the body is rendered from that template with
    variables, otherwise body_template is used verbatim. chunk_size None
    means the configured default.
    """

    recipients: Tuple[str, ...]
    subject: str
    body_template: str = ""
    chunk_size: Optional[int] = None
    template_id: Optional[str] = None
    variables: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "recipients", tuple(self.recipients))
        object.__setattr__(self, "variables", dict(self.variables))


@dataclass(frozen=True)
class FailedRecipient:
    """A recipient that could not be delivered, with a structured reason."""

    recipient: str
    reason_code: ReasonCode
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "reason_code": self.reason_code.value,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ChunkResult:
    """
    Provider answer for one chunk that reached the provider.
    rejected maps each refused recipient to the provider's reason.
    """

    rejected: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def accepted_all(cls) -> "ChunkResult":
        return cls()


@dataclass
class DispatchResult:
    """Aggregated report of a bulk send."""

    attempted: int = 0
    failed: List[FailedRecipient] = field(default_factory=list)
    chunks_attempted: int = 0
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return self.attempted - len(self.failed)

    @property
    def overall(self) -> DispatchOutcome:
        if not self.failed:
            return DispatchOutcome.SUCCESS
        if len(self.failed) < self.attempted:
            return DispatchOutcome.PARTIAL
        return DispatchOutcome.FAILED

    @property
    def failed_recipients(self) -> List[str]:
        return [failure.recipient for failure in self.failed]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": [failure.to_dict() for failure in self.failed],
            "overall": self.overall.value,
            "chunks_attempted": self.chunks_attempted,
            "cancelled": self.cancelled,
        }
