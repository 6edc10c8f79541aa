"""
Invoice use cases for the application layer.
Implements invoicing operations on top of the lifecycle service.
"""

from typing import Callable, Optional
from datetime import datetime

from billing.application.use_cases.base_use_case import CommandUseCase, QueryUseCase
from billing.application.use_cases.reminder_job import InvoiceReminderSender
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
from billing.application.dto.notification_dto import NotificationListResponseDTO, NotificationResponseDTO
from billing.application.dto.payment_dto import PaymentLinkRequestDTO, PaymentLinkResponseDTO
from billing.domain.models.base import AccountContext, EntityNotFoundError
from billing.domain.models.invoice import Invoice
from billing.domain.models.notification import NotificationKind
from billing.domain.models.payment import BankTransferMethod
from billing.domain.models.reminder import ReminderType
from billing.domain.events.base import EventDispatcher
from billing.domain.events.invoice_events import InvoiceCreated
from billing.domain.repositories.invoice_repository import InvoiceRepository
from billing.domain.services.invoice_lifecycle_service import InvoiceLifecycleService
from billing.domain.services.notification_service import derive_notifications, DEFAULT_DUE_SOON_WINDOW
from billing.domain.services.payment_link_service import compose_for


Clock = Callable[[], datetime]


def _to_response(invoice: Invoice, now: datetime) -> InvoiceResponseDTO:
    status = InvoiceLifecycleService.derive_status(invoice.status, invoice.due_date, now)
    return InvoiceResponseDTO.from_domain(invoice, status)


async def _load_owned(repository: InvoiceRepository, context: AccountContext, invoice_id: int) -> Invoice:
    invoice = await repository.find_by_id(context.account_id, invoice_id)
    if invoice is None:
        raise EntityNotFoundError("Invoice", invoice_id)
    return invoice


class ComputeTotalsUseCase(QueryUseCase[ComputeTotalsRequestDTO, InvoiceTotalsResponseDTO]):
    """Preview totals for a set of line items without storing anything."""

    def __init__(self, lifecycle: InvoiceLifecycleService):
        self.lifecycle = lifecycle

    async def _execute_business_logic(
        self, context: AccountContext, request: ComputeTotalsRequestDTO
    ) -> InvoiceTotalsResponseDTO:
        items = [item.to_domain() for item in request.items]
        return InvoiceTotalsResponseDTO.from_domain(self.lifecycle.compute_totals(items, request.vat_rate))


class CreateInvoiceUseCase(CommandUseCase[CreateInvoiceRequestDTO, InvoiceResponseDTO]):
    """Use case for creating a new invoice."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle: InvoiceLifecycleService,
        event_dispatcher: Optional[EventDispatcher] = None,
        default_currency: str = "EUR",
        clock: Clock = datetime.utcnow
    ):
        super().__init__(event_dispatcher)
        self.invoice_repository = invoice_repository
        self.lifecycle = lifecycle
        self.default_currency = default_currency
        self.clock = clock

    async def _execute_command_logic(
        self, context: AccountContext, request: CreateInvoiceRequestDTO
    ) -> InvoiceResponseDTO:
        invoice = self.lifecycle.create_invoice(
            context,
            client_id=request.client_id,
            invoice_number=request.invoice_number,
            items=[item.to_domain() for item in request.items],
            issue_date=request.issue_date,
            payment_terms=request.payment_terms,
            vat_rate=request.vat_rate,
            due_date=request.due_date,
            currency=request.currency or self.default_currency,
            client_email=request.client_email,
            notes=request.notes,
        )
        saved = await self.invoice_repository.save_invoice(invoice)

        self.collect_events(saved.pull_events())
        self.collect_events([InvoiceCreated(
            invoice_id=saved.id,
            client_id=saved.client_id,
            account_id=saved.account_id,
            invoice_number=saved.invoice_number,
            total=saved.total,
            currency=saved.currency,
            due_date=saved.due_date,
        )])
        return _to_response(saved, self.clock())


class ListInvoicesUseCase(QueryUseCase[Optional[datetime], InvoiceListResponseDTO]):
    """List an account's invoices with their derived status."""

    def __init__(self, invoice_repository: InvoiceRepository, clock: Clock = datetime.utcnow):
        self.invoice_repository = invoice_repository
        self.clock = clock

    async def _execute_business_logic(
        self, context: AccountContext, request: Optional[datetime]
    ) -> InvoiceListResponseDTO:
        now = request or self.clock()
        invoices = await self.invoice_repository.load_invoices(context.account_id)
        return InvoiceListResponseDTO(
            invoices=[_to_response(invoice, now) for invoice in invoices],
            total=len(invoices),
        )


class MarkInvoicePaidUseCase(CommandUseCase[MarkPaidRequestDTO, InvoiceResponseDTO]):
    """Record a payment. Repeating the call on a paid invoice is harmless."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle: InvoiceLifecycleService,
        event_dispatcher: Optional[EventDispatcher] = None,
        clock: Clock = datetime.utcnow
    ):
        super().__init__(event_dispatcher)
        self.invoice_repository = invoice_repository
        self.lifecycle = lifecycle
        self.clock = clock

    async def _execute_command_logic(
        self, context: AccountContext, request: MarkPaidRequestDTO
    ) -> InvoiceResponseDTO:
        invoice = await _load_owned(self.invoice_repository, context, request.invoice_id)
        now = self.clock()

        if not invoice.is_paid:
            self.lifecycle.mark_paid(invoice, request.paid_on or now.date())
            invoice = await self.invoice_repository.save_invoice(invoice)
            self.collect_events(invoice.pull_events())

        return _to_response(invoice, now)


class RevertInvoicePaymentUseCase(CommandUseCase[InvoiceIdRequestDTO, InvoiceResponseDTO]):
    """Administrative reversal of a recorded payment."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle: InvoiceLifecycleService,
        event_dispatcher: Optional[EventDispatcher] = None,
        clock: Clock = datetime.utcnow
    ):
        super().__init__(event_dispatcher)
        self.invoice_repository = invoice_repository
        self.lifecycle = lifecycle
        self.clock = clock

    async def _execute_command_logic(
        self, context: AccountContext, request: InvoiceIdRequestDTO
    ) -> InvoiceResponseDTO:
        invoice = await _load_owned(self.invoice_repository, context, request.invoice_id)
        self.lifecycle.revert_payment(invoice, context)
        invoice = await self.invoice_repository.save_invoice(invoice)
        self.collect_events(invoice.pull_events())
        return _to_response(invoice, self.clock())


class SendInvoiceReminderUseCase(CommandUseCase[InvoiceIdRequestDTO, DispatchResultResponseDTO]):
    """
    Send a reminder for one invoice on demand.
    Unlike automated reminders, a manual reminder may be repeated.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        sender: InvoiceReminderSender,
        clock: Clock = datetime.utcnow
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.sender = sender
        self.clock = clock

    async def _execute_command_logic(
        self, context: AccountContext, request: InvoiceIdRequestDTO
    ) -> DispatchResultResponseDTO:
        invoice = await _load_owned(self.invoice_repository, context, request.invoice_id)
        result = await self.sender.send(invoice, ReminderType.MANUAL, self.clock())
        return DispatchResultResponseDTO.from_domain(result)


class ListNotificationsUseCase(QueryUseCase[Optional[datetime], NotificationListResponseDTO]):
    """Derive the account's actionable alerts at a given instant."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        window_days: int = DEFAULT_DUE_SOON_WINDOW,
        clock: Clock = datetime.utcnow
    ):
        self.invoice_repository = invoice_repository
        self.window_days = window_days
        self.clock = clock

    async def _execute_business_logic(
        self, context: AccountContext, request: Optional[datetime]
    ) -> NotificationListResponseDTO:
        now = request or self.clock()
        invoices = await self.invoice_repository.load_invoices(context.account_id)
        feed = derive_notifications(invoices, now, self.window_days)

        notifications = [NotificationResponseDTO.from_domain(n) for n in feed]
        return NotificationListResponseDTO(
            notifications=notifications,
            overdue_count=sum(1 for n in notifications if n.kind == NotificationKind.OVERDUE),
            due_soon_count=sum(1 for n in notifications if n.kind == NotificationKind.DUE_SOON),
        )


class ComposePaymentLinkUseCase(QueryUseCase[PaymentLinkRequestDTO, PaymentLinkResponseDTO]):
    """Build the pay link for an invoice from the account's payment method."""

    async def _execute_business_logic(
        self, context: AccountContext, request: PaymentLinkRequestDTO
    ) -> PaymentLinkResponseDTO:
        method = request.payment_method.to_domain()
        return PaymentLinkResponseDTO(
            method=method.method.value,
            invoice_number=request.invoice_number,
            payment_link=compose_for(method, request.invoice_number),
            instructions=method.instructions if isinstance(method, BankTransferMethod) else None,
        )
