"""
Invoice management router.
Handles invoice creation, totals preview and payment tracking.
Also sends manual reminders to the invoice's client.
"""

from typing import Optional
from datetime import date, datetime
from fastapi import APIRouter, Query, status

from billing.infrastructure.web.dependencies import AccountDep, ContainerDep
from billing.infrastructure.web.routers.dispatch import dispatch_response
from billing.application.use_cases.invoice_use_cases import (
    ComputeTotalsUseCase,
    CreateInvoiceUseCase,
    ListInvoicesUseCase,
    MarkInvoicePaidUseCase,
    RevertInvoicePaymentUseCase,
    SendInvoiceReminderUseCase,
)
from billing.application.dto.dispatch_dto import DispatchResultResponseDTO
from billing.application.dto.invoice_dto import (
    ComputeTotalsRequestDTO,
    CreateInvoiceRequestDTO,
    InvoiceIdRequestDTO,
    InvoiceListResponseDTO,
    InvoiceResponseDTO,
    InvoiceTotalsResponseDTO,
    MarkPaidRequestDTO,
)


router = APIRouter()


@router.post("/totals", response_model=InvoiceTotalsResponseDTO)
async def compute_totals(
    request: ComputeTotalsRequestDTO,
    context: AccountDep,
    container: ContainerDep
):
    """
    Preview subtotal, VAT and total for a list of line items.
    Nothing is stored.
    """
    use_case = ComputeTotalsUseCase(container.lifecycle)
    result = await use_case.execute(context, request)
    return result.unwrap()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    request: CreateInvoiceRequestDTO,
    context: AccountDep,
    container: ContainerDep
):
    """
    Create a new invoice.

    - **client_id**: Client to invoice (required)
    - **invoice_number**: Invoice number (required, unique per account)
    - **items**: Line items (at least one)
    - **issue_date**: Invoice issue date (default: today)
    - **payment_terms**: Net 7, Net 14, Net 30 or Custom (default: Net 30)
    - **due_date**: Required for Custom terms, ignored otherwise
    - **vat_rate**: VAT percentage (default: 0)
    """
    use_case = CreateInvoiceUseCase(
        container.invoice_repository,
        container.lifecycle,
        container.event_dispatcher,
        default_currency=container.settings.default_currency,
    )
    result = await use_case.execute(context, request)
    return result.unwrap()


@router.get("", response_model=InvoiceListResponseDTO)
async def list_invoices(
    context: AccountDep,
    container: ContainerDep,
    as_of: Optional[datetime] = Query(None, description="Derive status at this instant (default: now)")
):
    """
    List invoices of the calling account with their derived status.
    """
    use_case = ListInvoicesUseCase(container.invoice_repository)
    result = await use_case.execute(context, as_of)
    return result.unwrap()


@router.post("/{invoice_id}/paid", response_model=InvoiceResponseDTO)
async def mark_invoice_paid(
    invoice_id: int,
    context: AccountDep,
    container: ContainerDep,
    paid_on: Optional[date] = Query(None, description="Payment date (default: today)")
):
    """
    Record payment of an invoice. Repeating the call is harmless.
    """
    use_case = MarkInvoicePaidUseCase(
        container.invoice_repository,
        container.lifecycle,
        container.event_dispatcher,
    )
    result = await use_case.execute(context, MarkPaidRequestDTO(invoice_id=invoice_id, paid_on=paid_on))
    return result.unwrap()


@router.post("/{invoice_id}/revert", response_model=InvoiceResponseDTO)
async def revert_invoice_payment(
    invoice_id: int,
    context: AccountDep,
    container: ContainerDep
):
    """
    Move a paid invoice back to pending. Administrators only.
    """
    use_case = RevertInvoicePaymentUseCase(
        container.invoice_repository,
        container.lifecycle,
        container.event_dispatcher,
    )
    result = await use_case.execute(context, InvoiceIdRequestDTO(invoice_id=invoice_id))
    return result.unwrap()


@router.post("/{invoice_id}/send", response_model=DispatchResultResponseDTO)
async def send_invoice_reminder(
    invoice_id: int,
    context: AccountDep,
    container: ContainerDep
):
    """
    Email a reminder for the invoice to its client now.

    The send is recorded as a manual reminder and does not affect the
    automated schedule.
    """
    use_case = SendInvoiceReminderUseCase(container.invoice_repository, container.reminder_sender())
    result = await use_case.execute(context, InvoiceIdRequestDTO(invoice_id=invoice_id))
    return dispatch_response(result.unwrap())
