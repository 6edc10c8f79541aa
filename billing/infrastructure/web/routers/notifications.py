"""
Notifications router.
Serves the alerts derived from the caller's invoices.
"""

from typing import Optional
from datetime import datetime
from fastapi import APIRouter, Query

from billing.infrastructure.web.dependencies import AccountDep, ContainerDep
from billing.application.use_cases.invoice_use_cases import ListNotificationsUseCase
from billing.application.dto.notification_dto import NotificationListResponseDTO


router = APIRouter()


@router.get("", response_model=NotificationListResponseDTO)
async def list_notifications(
    context: AccountDep,
    container: ContainerDep,
    as_of: Optional[datetime] = Query(None, description="Derive alerts at this instant (default: now)")
):
    """
    Overdue and due-soon alerts, most time-critical first.
    """
    use_case = ListNotificationsUseCase(
        container.invoice_repository,
        window_days=container.settings.due_soon_window_days,
    )
    result = await use_case.execute(context, as_of)
    return result.unwrap()
