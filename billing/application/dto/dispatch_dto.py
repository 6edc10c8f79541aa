"""
Bulk dispatch DTOs.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import Field

from billing.domain.models.dispatch import DispatchResult
from .base_dto import RequestDTO, ResponseDTO


class BroadcastRequestDTO(RequestDTO):
    """Admin broadcast to platform users or newsletter subscribers."""

    audience: Literal["users", "subscribers"] = Field(default="users")
    subject: str = Field(description="Message subject")
    body: str = Field(default="", description="Plain message body")
    template_id: Optional[str] = Field(default=None, description="Render the body from this template")
    variables: Dict[str, Any] = Field(default_factory=dict)
    chunk_size: Optional[int] = Field(default=None, description="Recipients per provider call")


class AnnouncementRequestDTO(RequestDTO):
    """Announcement from an account to its own clients."""

    subject: str
    body: str = Field(default="")
    template_id: Optional[str] = Field(default=None)
    variables: Dict[str, Any] = Field(default_factory=dict)
    chunk_size: Optional[int] = Field(default=None)


class NewsletterSubscriptionRequestDTO(RequestDTO):
    """Newsletter subscribe or unsubscribe request."""

    email: str = Field(min_length=1, max_length=254)


class NewsletterSubscriptionResponseDTO(ResponseDTO):
    email: str
    subscribed: bool


class FailedRecipientDTO(ResponseDTO):
    recipient: str
    reason_code: str
    detail: Optional[str] = None


class DispatchResultResponseDTO(ResponseDTO):
    """Aggregated outcome of a bulk send."""

    attempted: int
    succeeded: int
    failed: List[FailedRecipientDTO]
    overall: str
    chunks_attempted: int
    cancelled: bool = False

    @classmethod
    def from_domain(cls, result: DispatchResult) -> "DispatchResultResponseDTO":
        return cls(
            attempted=result.attempted,
            succeeded=result.succeeded,
            failed=[
                FailedRecipientDTO(
                    recipient=failure.recipient,
                    reason_code=failure.reason_code.value,
                    detail=failure.detail,
                )
                for failure in result.failed
            ],
            overall=result.overall.value,
            chunks_attempted=result.chunks_attempted,
            cancelled=result.cancelled,
        )


class ReminderRunResponseDTO(ResponseDTO):
    """Summary of one reminder job run."""

    accounts_processed: int = 0
    reminders_sent: int = 0
    reminders_failed: int = 0
    reminders_skipped: int = 0
