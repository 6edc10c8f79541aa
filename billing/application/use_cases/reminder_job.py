"""
Automated invoice reminders.
Periodically derives notifications per account and sends the reminder each
invoice is due for, according to the account's plan and reminder settings.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from billing.application.dto.dispatch_dto import ReminderRunResponseDTO
from billing.domain.models.base import DomainException, ValidationError
from billing.domain.models.dispatch import DispatchOutcome, DispatchRequest, DispatchResult
from billing.domain.models.invoice import Invoice
from billing.domain.models.reminder import ReminderPolicy, ReminderType
from billing.domain.events.base import EventDispatcher
from billing.domain.events.invoice_events import InvoiceReminderSent
from billing.domain.repositories.invoice_repository import InvoiceRepository
from billing.domain.repositories.recipient_directory import RecipientDirectory
from billing.domain.repositories.reminder_log_repository import ReminderLogRepository
from billing.domain.services.dispatch_service import BulkDispatchEngine
from billing.domain.services.notification_service import derive_notifications, DEFAULT_DUE_SOON_WINDOW


logger = logging.getLogger(__name__)

REMINDER_TEMPLATE = "invoice_reminder"

REMINDER_SUBJECTS: Dict[ReminderType, str] = {
    ReminderType.BEFORE_DUE: "Upcoming Due Date: Invoice #{number}",
    ReminderType.ON_DUE: "Due Today: Invoice #{number}",
    ReminderType.AFTER_1: "Overdue: Invoice #{number}",
    ReminderType.AFTER_2: "Payment Reminder: Invoice #{number}",
    ReminderType.AFTER_3: "Urgent: Invoice #{number} Overdue",
    ReminderType.MANUAL: "Reminder: Invoice #{number}",
}


def reminder_subject(reminder_type: ReminderType, invoice_number: str) -> str:
    return REMINDER_SUBJECTS[reminder_type].format(number=invoice_number)


class InvoiceReminderSender:
    """
    Sends one reminder for one invoice through the dispatch engine.

    The reminder log entry and the InvoiceReminderSent event are written
    only when the engine reports a full delivery.
    """

    def __init__(
        self,
        engine: BulkDispatchEngine,
        reminder_log: ReminderLogRepository,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.engine = engine
        self.reminder_log = reminder_log
        self.event_dispatcher = event_dispatcher

    async def send(self, invoice: Invoice, reminder_type: ReminderType, now: datetime) -> DispatchResult:
        """
        Raises:
            ValidationError: If the invoice has no client email
            DomainException: If the engine rejects the request before sending
        """
        if not invoice.client_email:
            raise ValidationError("Client has no email address", "client_email")

        request = DispatchRequest(
            recipients=(invoice.client_email,),
            subject=reminder_subject(reminder_type, invoice.invoice_number),
            template_id=REMINDER_TEMPLATE,
            variables={
                "invoice_number": invoice.invoice_number,
                "total": invoice.total,
                "currency": invoice.currency,
                "due_date": invoice.due_date,
                "reminder_type": reminder_type.value,
            },
            chunk_size=1,
        )
        result = await self.engine.dispatch(request)

        if result.overall != DispatchOutcome.SUCCESS:
            logger.warning(
                f"Reminder {reminder_type.value} for invoice {invoice.invoice_number} not delivered: "
                f"{result.failed[0].reason_code.value}"
            )
            return result

        await self.reminder_log.record(invoice.id, reminder_type, now)
        if self.event_dispatcher is not None:
            await self.event_dispatcher.dispatch(InvoiceReminderSent(
                invoice_id=invoice.id,
                account_id=invoice.account_id,
                invoice_number=invoice.invoice_number,
                reminder_type=reminder_type.value,
                recipient=invoice.client_email,
            ))
        return result


class ReminderJob:
    """
    One pass over every account with invoices.

    Each (invoice, reminder type) pair is sent at most once; the reminder
    log is written only after a successful delivery so a failed send is
    retried on the next run.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        directory: RecipientDirectory,
        reminder_log: ReminderLogRepository,
        engine: BulkDispatchEngine,
        event_dispatcher: Optional[EventDispatcher] = None,
        window_days: int = DEFAULT_DUE_SOON_WINDOW
    ):
        self.invoice_repository = invoice_repository
        self.directory = directory
        self.reminder_log = reminder_log
        self.sender = InvoiceReminderSender(engine, reminder_log, event_dispatcher)
        self.window_days = window_days

    async def run(self, now: Optional[datetime] = None) -> ReminderRunResponseDTO:
        now = now or datetime.utcnow()
        summary = ReminderRunResponseDTO()
        logger.info(f"Running reminder job for {now.date().isoformat()}")

        for account_id in await self.invoice_repository.list_account_ids():
            policy = await self.directory.reminder_policy(account_id)
            if policy is None or not policy.automated:
                continue
            summary.accounts_processed += 1
            await self._process_account(account_id, policy, now, summary)

        logger.info(
            f"Reminder job finished: {summary.reminders_sent} sent, "
            f"{summary.reminders_failed} failed, {summary.reminders_skipped} skipped "
            f"across {summary.accounts_processed} account(s)"
        )
        return summary

    async def _process_account(
        self,
        account_id: str,
        policy: ReminderPolicy,
        now: datetime,
        summary: ReminderRunResponseDTO
    ) -> None:
        invoices = await self.invoice_repository.load_invoices(account_id)
        by_id = {invoice.id: invoice for invoice in invoices}
        window = max(self.window_days, policy.days_before or 0)

        for notification in derive_notifications(invoices, now, window):
            reminder_type = policy.reminder_for(notification.days_until_due)
            if reminder_type is None:
                continue

            invoice = by_id.get(notification.invoice_ref)
            if invoice is None or invoice.id is None:
                continue

            if not invoice.client_email:
                logger.warning(f"Invoice {invoice.invoice_number} has no client email; reminder skipped")
                summary.reminders_skipped += 1
                continue

            if await self.reminder_log.has_sent(invoice.id, reminder_type):
                summary.reminders_skipped += 1
                continue

            if await self._send(invoice, reminder_type, now):
                summary.reminders_sent += 1
            else:
                summary.reminders_failed += 1

    async def _send(self, invoice: Invoice, reminder_type: ReminderType, now: datetime) -> bool:
        try:
            result = await self.sender.send(invoice, reminder_type, now)
        except DomainException as exc:
            logger.error(f"Reminder for invoice {invoice.invoice_number} rejected: {exc.message}")
            return False
        return result.overall == DispatchOutcome.SUCCESS
