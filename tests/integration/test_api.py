"""
Integration tests for the HTTP API.
"""

from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

from billing.config import Settings
from billing.domain.models.base import TransportError
from billing.domain.models.reminder import Plan, ReminderPolicy
from billing.domain.services.message_service import OutboundMessageSender
from billing.infrastructure.email import LoggingEmailSender
from billing.infrastructure.repositories import InMemoryRecipientDirectory
from billing.infrastructure.web.dependencies import build_container
from billing.main import create_application


API = "/api/v1"
ACCOUNT = {"X-Account-Id": "acct-1"}
ADMIN = {"X-Account-Id": "ops", "X-Account-Roles": "admin"}

INVOICE = {
    "client_id": 1,
    "invoice_number": "INV-001",
    "items": [
        {"description": "Design", "quantity": 2, "unit_price": 50},
        {"description": "Development", "quantity": 1, "unit_price": 100},
        {"description": "Hosting", "quantity": 3, "unit_price": 20},
    ],
    "issue_date": "2024-01-01",
    "payment_terms": "Net 30",
    "vat_rate": 19,
    "client_email": "client@example.com",
}


def make_client(sender=None, directory=None) -> TestClient:
    container = build_container(
        Settings(),
        sender=sender or LoggingEmailSender(),
        recipient_directory=directory or InMemoryRecipientDirectory(),
    )
    return TestClient(create_application(container))


class TestInvoiceApi:
    """Test cases for the invoice endpoints."""

    def setup_method(self):
        self.client = make_client()

    def test_health(self):
        response = self.client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_account_header_required(self):
        response = self.client.get(f"{API}/invoices")

        assert response.status_code == 401

    def test_compute_totals(self):
        response = self.client.post(
            f"{API}/invoices/totals",
            json={"items": INVOICE["items"], "vat_rate": 19},
            headers=ACCOUNT,
        )

        assert response.status_code == 200
        assert response.json() == {"subtotal": "260.00", "vat_amount": "49.40", "total": "309.40"}

    def test_compute_totals_without_items(self):
        response = self.client.post(f"{API}/invoices/totals", json={"items": []}, headers=ACCOUNT)

        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_create_and_list(self):
        created = self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT)
        listed = self.client.get(f"{API}/invoices", params={"as_of": "2024-02-01T09:00:00"}, headers=ACCOUNT)

        assert created.status_code == 201
        assert created.json()["due_date"] == "2024-01-31"
        assert created.json()["total"] == "309.40"
        assert listed.json()["total"] == 1
        assert listed.json()["invoices"][0]["status"] == "overdue"

    def test_custom_terms_require_due_date(self):
        response = self.client.post(
            f"{API}/invoices", json={**INVOICE, "payment_terms": "Custom"}, headers=ACCOUNT
        )

        assert response.status_code == 422

    def test_duplicate_invoice_number(self):
        self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT)

        response = self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT)

        assert response.status_code == 422
        assert response.json()["details"]["field"] == "invoice_number"

    def test_invalid_client_email(self):
        response = self.client.post(
            f"{API}/invoices", json={**INVOICE, "client_email": "not-an-email"}, headers=ACCOUNT
        )

        assert response.status_code == 422
        assert response.json()["details"]["field"] == "client_email"

    def test_mark_paid_and_revert(self):
        invoice_id = self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT).json()["id"]
        paid_url = f"{API}/invoices/{invoice_id}/paid"

        first = self.client.post(paid_url, params={"paid_on": "2024-01-20"}, headers=ACCOUNT)
        second = self.client.post(paid_url, headers=ACCOUNT)
        denied = self.client.post(f"{API}/invoices/{invoice_id}/revert", headers=ACCOUNT)
        reverted = self.client.post(
            f"{API}/invoices/{invoice_id}/revert",
            headers={**ACCOUNT, "X-Account-Roles": "admin"},
        )

        assert first.json()["status"] == "paid"
        assert second.status_code == 200
        assert second.json()["paid_at"] == "2024-01-20"
        assert denied.status_code == 409
        assert reverted.status_code == 200
        assert reverted.json()["status"] != "paid"
        assert reverted.json()["paid_at"] is None

    def test_unknown_invoice(self):
        response = self.client.post(f"{API}/invoices/99/paid", headers=ACCOUNT)

        assert response.status_code == 404
        assert response.json()["error"] == "ENTITY_NOT_FOUND"

    def test_notifications(self):
        self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT)

        response = self.client.get(
            f"{API}/notifications", params={"as_of": "2024-02-01T09:00:00"}, headers=ACCOUNT
        )

        body = response.json()
        assert body["overdue_count"] == 1
        assert body["notifications"][0]["message"] == "Invoice INV-001 is overdue by 1 day - 309.40 EUR"

    def test_payment_links(self):
        paypal = self.client.post(
            f"{API}/payment-links",
            json={
                "payment_method": {"method": "paypal", "base_link": "https://paypal.me/acme"},
                "invoice_number": "INV 7",
            },
            headers=ACCOUNT,
        )
        bank = self.client.post(
            f"{API}/payment-links",
            json={
                "payment_method": {"method": "bank_transfer", "instructions": "IBAN DE89"},
                "invoice_number": "INV-7",
            },
            headers=ACCOUNT,
        )

        assert paypal.json()["payment_link"] == "https://paypal.me/acme?invoice=INV%207"
        assert bank.json()["payment_link"] is None

    def test_unknown_payment_method(self):
        response = self.client.post(
            f"{API}/payment-links",
            json={"payment_method": {"method": "cash"}, "invoice_number": "INV-7"},
            headers=ACCOUNT,
        )

        assert response.status_code == 422


class TestDispatchApi:
    """Test cases for the dispatch endpoints."""

    def setup_method(self):
        self.sender = LoggingEmailSender()
        self.directory = InMemoryRecipientDirectory(
            users=[f"user{i}@example.com" for i in range(5)],
            clients={"acct-1": ["client@example.com"]},
        )
        self.client = make_client(self.sender, self.directory)

    def test_broadcast_requires_admin(self):
        response = self.client.post(
            f"{API}/dispatch/broadcast", json={"subject": "Hi", "body": "Hello"}, headers=ACCOUNT
        )

        assert response.status_code == 403
        assert self.sender.get_sent_emails() == []

    def test_broadcast(self):
        response = self.client.post(
            f"{API}/dispatch/broadcast",
            json={"subject": "Maintenance", "body": "Tonight", "chunk_size": 2},
            headers=ADMIN,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["attempted"] == 5
        assert body["chunks_attempted"] == 3
        assert body["overall"] == "success"

    def test_broadcast_chunk_size_too_large(self):
        response = self.client.post(
            f"{API}/dispatch/broadcast",
            json={"subject": "Maintenance", "body": "Tonight", "chunk_size": 500},
            headers=ADMIN,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "CONFIGURATION_ERROR"

    def test_announcement_without_clients(self):
        response = self.client.post(
            f"{API}/dispatch/announcement",
            json={"subject": "Hi", "body": "Hello"},
            headers={"X-Account-Id": "acct-9"},
        )

        assert response.status_code == 422

    def test_failed_dispatch_is_bad_gateway(self):
        sender = Mock(spec=OutboundMessageSender)
        sender.send_chunk = AsyncMock(side_effect=TransportError("SMTP down"))
        client = make_client(sender, self.directory)

        response = client.post(
            f"{API}/dispatch/announcement", json={"subject": "Hi", "body": "Hello"}, headers=ACCOUNT
        )

        assert response.status_code == 502
        assert response.json()["failed"][0]["reason_code"] == "TransportError"

    def test_run_reminders(self):
        self.directory.set_reminder_policy("acct-1", ReminderPolicy(plan=Plan.STARTER, days_after=(1,)))
        self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT)

        denied = self.client.post(f"{API}/dispatch/reminders/run", headers=ACCOUNT)
        response = self.client.post(
            f"{API}/dispatch/reminders/run", params={"as_of": "2024-02-01T09:00:00"}, headers=ADMIN
        )

        assert denied.status_code == 403
        assert response.json()["reminders_sent"] == 1
        assert self.sender.get_sent_emails()[0]["subject"] == "Overdue: Invoice #INV-001"

    def test_send_invoice_reminder(self):
        invoice_id = self.client.post(f"{API}/invoices", json=INVOICE, headers=ACCOUNT).json()["id"]

        response = self.client.post(f"{API}/invoices/{invoice_id}/send", headers=ACCOUNT)
        other = self.client.post(f"{API}/invoices/{invoice_id}/send", headers={"X-Account-Id": "acct-2"})

        assert response.status_code == 200
        assert response.json()["succeeded"] == 1
        assert self.sender.get_sent_emails()[0]["to"] == ["client@example.com"]
        assert self.sender.get_sent_emails()[0]["subject"] == "Reminder: Invoice #INV-001"
        assert other.status_code == 404

    def test_send_invoice_reminder_without_client_email(self):
        invoice = {key: value for key, value in INVOICE.items() if key != "client_email"}
        invoice_id = self.client.post(f"{API}/invoices", json=invoice, headers=ACCOUNT).json()["id"]

        response = self.client.post(f"{API}/invoices/{invoice_id}/send", headers=ACCOUNT)

        assert response.status_code == 422
        assert response.json()["details"]["field"] == "client_email"

    def test_newsletter_subscription(self):
        subscribed = self.client.post(f"{API}/newsletter/subscribe", json={"email": "reader@example.com"})
        duplicate = self.client.post(f"{API}/newsletter/subscribe", json={"email": "reader@example.com"})
        broadcast = self.client.post(
            f"{API}/dispatch/broadcast",
            json={"audience": "subscribers", "subject": "News", "body": "Hello"},
            headers=ADMIN,
        )
        unsubscribed = self.client.post(f"{API}/newsletter/unsubscribe", json={"email": "reader@example.com"})
        missing = self.client.post(f"{API}/newsletter/unsubscribe", json={"email": "reader@example.com"})

        assert subscribed.status_code == 201
        assert duplicate.status_code == 422
        assert broadcast.json()["attempted"] == 1
        assert unsubscribed.json() == {"email": "reader@example.com", "subscribed": False}
        assert missing.status_code == 404

    def test_lifespan_registers_handlers(self):
        container = build_container(Settings(), sender=self.sender)

        with TestClient(create_application(container)):
            assert container.event_dispatcher.get_registered_handlers()
