"""Invoice repository interface.
Defines the contract for invoice data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from billing.domain.models.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice aggregate.
    The core never assumes a specific storage engine.
    """

    @abstractmethod
    async def load_invoices(self, account_id: str) -> List[Invoice]:
        """
        Load every invoice owned by an account.
        """
        pass

    @abstractmethod
    async def save_invoice(self, invoice: Invoice) -> Invoice:
        """
        Insert or update an invoice.
        Returns the saved invoice with its identity assigned.
        """
        pass

    @abstractmethod
    async def find_by_id(self, account_id: str, invoice_id: int) -> Optional[Invoice]:
        """
        Find an invoice of an account by its ID.
        Returns None if not found or owned by another account.
        """
        pass

    @abstractmethod
    async def list_account_ids(self) -> List[str]:
        """
        Accounts that own at least one invoice. Used by the reminder job.
        """
        pass
