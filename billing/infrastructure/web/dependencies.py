"""
Dependencies for the FastAPI adapter.
The caller's identity arrives explicitly in headers (issued upstream by the
authentication layer) and is turned into an AccountContext per request.
"""

from dataclasses import dataclass, field
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from billing.config import Settings, settings as default_settings
from billing.application.use_cases.reminder_job import InvoiceReminderSender
from billing.domain.events.base import EventDispatcher
from billing.domain.models.base import AccountContext, ValidationError
from billing.domain.repositories.invoice_repository import InvoiceRepository
from billing.domain.repositories.recipient_directory import RecipientDirectory
from billing.domain.repositories.reminder_log_repository import ReminderLogRepository
from billing.domain.services.dispatch_service import BulkDispatchEngine
from billing.domain.services.invoice_lifecycle_service import InvoiceLifecycleService
from billing.domain.services.message_service import OutboundMessageSender, TemplateRenderer
from billing.infrastructure.email import get_email_sender, EmailTemplateLoader
from billing.infrastructure.repositories import (
    InMemoryInvoiceRepository,
    InMemoryRecipientDirectory,
    InMemoryReminderLogRepository,
)


# Caller identity for endpoints open to anonymous visitors
PUBLIC_CONTEXT = AccountContext(account_id="public")


@dataclass
class ServiceContainer:
    """Collaborators shared by every request of one application instance."""

    settings: Settings
    invoice_repository: InvoiceRepository
    recipient_directory: RecipientDirectory
    reminder_log: ReminderLogRepository
    sender: OutboundMessageSender
    renderer: TemplateRenderer
    event_dispatcher: EventDispatcher = field(default_factory=EventDispatcher)

    @property
    def lifecycle(self) -> InvoiceLifecycleService:
        return InvoiceLifecycleService(admin_roles=self.settings.admin_roles)

    def dispatch_engine(self) -> BulkDispatchEngine:
        return BulkDispatchEngine(
            sender=self.sender,
            renderer=self.renderer,
            default_chunk_size=self.settings.dispatch_default_chunk_size,
            max_chunk_size=self.settings.dispatch_max_chunk_size,
            event_dispatcher=self.event_dispatcher,
        )

    def reminder_sender(self) -> InvoiceReminderSender:
        return InvoiceReminderSender(self.dispatch_engine(), self.reminder_log, self.event_dispatcher)


def build_container(
    config: Optional[Settings] = None,
    sender: Optional[OutboundMessageSender] = None,
    invoice_repository: Optional[InvoiceRepository] = None,
    recipient_directory: Optional[RecipientDirectory] = None,
    reminder_log: Optional[ReminderLogRepository] = None,
    renderer: Optional[TemplateRenderer] = None
) -> ServiceContainer:
    """Wire the default collaborators, letting callers override any of them."""
    config = config or default_settings
    return ServiceContainer(
        settings=config,
        invoice_repository=invoice_repository or InMemoryInvoiceRepository(),
        recipient_directory=recipient_directory or InMemoryRecipientDirectory(),
        reminder_log=reminder_log or InMemoryReminderLogRepository(),
        sender=sender or get_email_sender(),
        renderer=renderer or EmailTemplateLoader(app_name=config.email_from_name),
    )


def get_container(request: Request) -> ServiceContainer:
    """Dependency to get the application's service container."""
    return request.app.state.container


async def get_account_context(
    x_account_id: Annotated[Optional[str], Header()] = None,
    x_account_roles: Annotated[Optional[str], Header()] = None
) -> AccountContext:
    """
    FastAPI dependency building the caller's AccountContext.

    Raises:
        HTTPException: If the account header is missing
    """
    if not x_account_id or not x_account_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Account-Id header required",
        )
    roles = tuple(role.strip() for role in (x_account_roles or "").split(",") if role.strip())
    try:
        return AccountContext(account_id=x_account_id.strip(), roles=roles)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]
AccountDep = Annotated[AccountContext, Depends(get_account_context)]
