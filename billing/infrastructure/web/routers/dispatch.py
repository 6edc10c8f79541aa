"""
Bulk dispatch router.
Broadcasts, client announcements and the reminder job trigger.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from billing.infrastructure.web.dependencies import AccountDep, ContainerDep
from billing.application.use_cases.dispatch_use_cases import AnnouncementUseCase, BroadcastUseCase
from billing.application.use_cases.reminder_job import ReminderJob
from billing.application.dto.dispatch_dto import (
    AnnouncementRequestDTO,
    BroadcastRequestDTO,
    DispatchResultResponseDTO,
    ReminderRunResponseDTO,
)
from billing.domain.models.base import PermissionDenied


router = APIRouter()


def dispatch_response(dto: DispatchResultResponseDTO) -> JSONResponse:
    """A dispatch where every recipient failed is reported as a bad gateway."""
    status_code = status.HTTP_502_BAD_GATEWAY if dto.overall == "failed" else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=dto.model_dump(mode="json"))


@router.post("/broadcast", response_model=DispatchResultResponseDTO)
async def broadcast(
    request: BroadcastRequestDTO,
    context: AccountDep,
    container: ContainerDep
):
    """
    Send a message to every platform user or newsletter subscriber. Administrators only.

    The response lists every failed recipient with its reason code; check
    **overall** to tell a partial delivery from a full one.
    """
    use_case = BroadcastUseCase(container.dispatch_engine(), container.recipient_directory)
    use_case.admin_roles = container.settings.admin_roles
    result = await use_case.execute(context, request)
    return dispatch_response(result.unwrap())


@router.post("/announcement", response_model=DispatchResultResponseDTO)
async def announcement(
    request: AnnouncementRequestDTO,
    context: AccountDep,
    container: ContainerDep
):
    """
    Send an announcement from the calling account to all of its clients.
    """
    use_case = AnnouncementUseCase(container.dispatch_engine(), container.recipient_directory)
    result = await use_case.execute(context, request)
    return dispatch_response(result.unwrap())


@router.post("/reminders/run", response_model=ReminderRunResponseDTO)
async def run_reminders(
    context: AccountDep,
    container: ContainerDep,
    as_of: Optional[datetime] = Query(None, description="Run as if at this instant (default: now)")
):
    """
    Run the automated reminder job once. Administrators only.
    """
    if not any(context.has_role(role) for role in container.settings.admin_roles):
        raise PermissionDenied("Administrator role required")

    job = ReminderJob(
        container.invoice_repository,
        container.recipient_directory,
        container.reminder_log,
        container.dispatch_engine(),
        container.event_dispatcher,
        window_days=container.settings.due_soon_window_days,
    )
    return await job.run(as_of)
