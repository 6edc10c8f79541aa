"""
Bulk dispatch use cases.
Resolve an audience, build a DispatchRequest and hand it to the engine.
Also manages the newsletter audience.
"""

import logging
from typing import List, Optional

from billing.application.use_cases.base_use_case import AdminUseCase, CommandUseCase
from billing.application.dto.dispatch_dto import (
    AnnouncementRequestDTO,
    BroadcastRequestDTO,
    DispatchResultResponseDTO,
    NewsletterSubscriptionRequestDTO,
    NewsletterSubscriptionResponseDTO,
)
from billing.domain.models.base import AccountContext, EntityNotFoundError, ValidationError
from billing.domain.models.dispatch import DispatchRequest
from billing.domain.models.value_objects import EmailAddress
from billing.domain.repositories.recipient_directory import RecipientDirectory
from billing.domain.services.dispatch_service import BulkDispatchEngine, CancellationToken


logger = logging.getLogger(__name__)

ANNOUNCEMENT_TEMPLATE = "announcement"
NEWSLETTER_TEMPLATE = "newsletter"


def _unique(recipients: List[str]) -> List[str]:
    """Drop duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(recipients))


class _DispatchUseCase(CommandUseCase):
    """Shared plumbing for audience-based dispatch."""

    def __init__(
        self,
        engine: BulkDispatchEngine,
        directory: RecipientDirectory,
        cancellation: Optional[CancellationToken] = None
    ):
        super().__init__()
        self.engine = engine
        self.directory = directory
        self.cancellation = cancellation

    async def _send(
        self,
        recipients: List[str],
        subject: str,
        body: str,
        template_id: Optional[str],
        variables: dict,
        chunk_size: Optional[int],
        audience: str
    ) -> DispatchResultResponseDTO:
        recipients = _unique(recipients)
        if not recipients:
            raise ValidationError(f"No recipients found for {audience}", "recipients")

        logger.info(f"Sending '{subject}' to {len(recipients)} {audience}")
        request = DispatchRequest(
            recipients=tuple(recipients),
            subject=subject,
            body_template=body,
            chunk_size=chunk_size,
            template_id=template_id,
            variables=variables,
        )
        result = await self.engine.dispatch(request, self.cancellation)
        return DispatchResultResponseDTO.from_domain(result)


class BroadcastUseCase(AdminUseCase, _DispatchUseCase):
    """Admin broadcast to every platform user or to newsletter subscribers."""

    async def _execute_command_logic(
        self, context: AccountContext, request: BroadcastRequestDTO
    ) -> DispatchResultResponseDTO:
        if request.audience == "subscribers":
            recipients = await self.directory.newsletter_subscribers()
            audience = "newsletter subscribers"
        else:
            recipients = await self.directory.platform_users()
            audience = "platform users"

        template_id = request.template_id
        variables = dict(request.variables)
        if template_id is None and request.audience == "subscribers" and request.body.strip():
            # Newsletter bodies are wrapped in the newsletter layout
            template_id = NEWSLETTER_TEMPLATE
            variables.setdefault("title", request.subject)
            variables.setdefault("content", request.body)

        return await self._send(
            recipients,
            request.subject,
            request.body,
            template_id,
            variables,
            request.chunk_size,
            audience,
        )


class AnnouncementUseCase(_DispatchUseCase):
    """An account announces something to all of its clients."""

    async def _execute_command_logic(
        self, context: AccountContext, request: AnnouncementRequestDTO
    ) -> DispatchResultResponseDTO:
        recipients = await self.directory.account_clients(context.account_id)

        template_id = request.template_id
        variables = dict(request.variables)
        if template_id is None and request.body.strip():
            template_id = ANNOUNCEMENT_TEMPLATE
            variables.setdefault("subject", request.subject)
            variables.setdefault("message", request.body)

        return await self._send(
            recipients,
            request.subject,
            request.body,
            template_id,
            variables,
            request.chunk_size,
            "clients",
        )


class SubscribeNewsletterUseCase(CommandUseCase[NewsletterSubscriptionRequestDTO, NewsletterSubscriptionResponseDTO]):
    """Add an address to the newsletter audience."""

    def __init__(self, directory: RecipientDirectory):
        super().__init__()
        self.directory = directory

    async def _execute_command_logic(
        self, context: AccountContext, request: NewsletterSubscriptionRequestDTO
    ) -> NewsletterSubscriptionResponseDTO:
        email = request.email.strip()
        if not EmailAddress.is_valid(email):
            raise ValidationError(f"Invalid email address: {email!r}", "email")
        if not await self.directory.subscribe(email):
            raise ValidationError("Email already subscribed", "email")

        logger.info("New newsletter subscriber")
        return NewsletterSubscriptionResponseDTO(email=email, subscribed=True)


class UnsubscribeNewsletterUseCase(CommandUseCase[NewsletterSubscriptionRequestDTO, NewsletterSubscriptionResponseDTO]):
    """Remove an address from the newsletter audience."""

    def __init__(self, directory: RecipientDirectory):
        super().__init__()
        self.directory = directory

    async def _execute_command_logic(
        self, context: AccountContext, request: NewsletterSubscriptionRequestDTO
    ) -> NewsletterSubscriptionResponseDTO:
        email = request.email.strip()
        if not await self.directory.unsubscribe(email):
            raise EntityNotFoundError("Newsletter subscriber", email)
        return NewsletterSubscriptionResponseDTO(email=email, subscribed=False)
