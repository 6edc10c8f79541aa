"""
In-memory invoice repository.
Used by the default application wiring and by tests; storage engines are
out of scope and plug in behind the same interface.
"""

import asyncio
from itertools import count
from typing import Dict, List, Optional

from billing.domain.models.base import ValidationError
from billing.domain.models.invoice import Invoice
from billing.domain.repositories.invoice_repository import InvoiceRepository as InvoiceRepositoryInterface


class InMemoryInvoiceRepository(InvoiceRepositoryInterface):
    """Dictionary-backed implementation of invoice repository."""

    def __init__(self):
        self._invoices: Dict[int, Invoice] = {}
        self._ids = count(1)
        self._lock = asyncio.Lock()

    async def save_invoice(self, invoice: Invoice) -> Invoice:
        """Save an invoice entity, assigning an ID to new ones."""
        async with self._lock:
            duplicate = next(
                (
                    existing for existing in self._invoices.values()
                    if existing.account_id == invoice.account_id
                    and existing.invoice_number == invoice.invoice_number
                    and existing.id != invoice.id
                ),
                None
            )
            if duplicate is not None:
                raise ValidationError(
                    f"Invoice number {invoice.invoice_number} already exists",
                    "invoice_number"
                )

            if invoice.is_new:
                invoice.id = next(self._ids)
            self._invoices[invoice.id] = invoice
            return invoice

    async def load_invoices(self, account_id: str) -> List[Invoice]:
        """Get all invoices of an account in creation order."""
        return [invoice for invoice in self._invoices.values() if invoice.account_id == account_id]

    async def find_by_id(self, account_id: str, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID, scoped to the owning account."""
        invoice = self._invoices.get(invoice_id)
        if invoice is None or invoice.account_id != account_id:
            return None
        return invoice

    async def list_account_ids(self) -> List[str]:
        return list(dict.fromkeys(invoice.account_id for invoice in self._invoices.values()))
