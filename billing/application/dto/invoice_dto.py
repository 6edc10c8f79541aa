"""
Invoice DTOs for the application layer.
Data Transfer Objects for invoice and billing operations.
"""

from typing import Optional, List
from datetime import date
from decimal import Decimal
from pydantic import Field, model_validator

from billing.domain.models.invoice import Invoice, InvoiceStatus, LineItem, PaymentTerms, InvoiceTotals
from .base_dto import RequestDTO, ResponseDTO


class InvoiceItemRequestDTO(RequestDTO):
    """DTO for invoice item in requests."""

    description: str = Field(min_length=1, max_length=500, description="Item description")
    quantity: Decimal = Field(description="Quantity")
    unit_price: Decimal = Field(description="Unit price")

    def to_domain(self) -> LineItem:
        return LineItem(description=self.description, quantity=self.quantity, unit_price=self.unit_price)


class InvoiceItemResponseDTO(ResponseDTO):
    """DTO for invoice item in responses."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal


class ComputeTotalsRequestDTO(RequestDTO):
    """DTO for a totals preview."""

    items: List[InvoiceItemRequestDTO] = Field(description="Line items")
    vat_rate: Decimal = Field(default=Decimal("0"), description="VAT percentage")


class InvoiceTotalsResponseDTO(ResponseDTO):
    """DTO for invoice totals."""

    subtotal: Decimal
    vat_amount: Decimal
    total: Decimal

    @classmethod
    def from_domain(cls, totals: InvoiceTotals) -> "InvoiceTotalsResponseDTO":
        return cls(subtotal=totals.subtotal, vat_amount=totals.vat_amount, total=totals.total)


class CreateInvoiceRequestDTO(RequestDTO):
    """DTO for creating a new invoice."""

    client_id: int = Field(ge=1, description="Client ID")
    invoice_number: str = Field(min_length=1, max_length=50, description="Invoice number")
    items: List[InvoiceItemRequestDTO] = Field(description="Line items")
    issue_date: date = Field(default_factory=date.today, description="Issue date")
    payment_terms: PaymentTerms = Field(default=PaymentTerms.NET_30, description="Payment terms")
    due_date: Optional[date] = Field(default=None, description="Due date, required for Custom terms")
    vat_rate: Decimal = Field(default=Decimal("0"), description="VAT percentage")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3, description="Currency code")
    client_email: Optional[str] = Field(default=None, description="Client contact for reminders")
    notes: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def check_custom_due_date(self):
        if self.payment_terms == PaymentTerms.CUSTOM and self.due_date is None:
            raise ValueError("due_date is required for Custom payment terms")
        return self


class MarkPaidRequestDTO(RequestDTO):
    """DTO for recording a payment."""

    invoice_id: int = Field(ge=1)
    paid_on: Optional[date] = Field(default=None, description="Payment date, defaults to today")


class InvoiceIdRequestDTO(RequestDTO):
    """DTO addressing one invoice."""

    invoice_id: int = Field(ge=1)


class InvoiceResponseDTO(ResponseDTO):
    """DTO for invoice response; status is the derived one."""

    id: Optional[int]
    account_id: str
    client_id: int
    invoice_number: str
    issue_date: date
    due_date: date
    payment_terms: PaymentTerms
    vat_rate: Decimal
    items: List[InvoiceItemResponseDTO]
    subtotal: Decimal
    vat_amount: Decimal
    total: Decimal
    status: InvoiceStatus
    paid_at: Optional[date] = None
    currency: str
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, invoice: Invoice, status: InvoiceStatus) -> "InvoiceResponseDTO":
        return cls(
            id=invoice.id,
            account_id=invoice.account_id,
            client_id=invoice.client_id,
            invoice_number=invoice.invoice_number,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            payment_terms=invoice.payment_terms,
            vat_rate=invoice.vat_rate,
            items=[
                InvoiceItemResponseDTO(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    amount=item.amount,
                )
                for item in invoice.items
            ],
            subtotal=invoice.subtotal,
            vat_amount=invoice.vat_amount,
            total=invoice.total,
            status=status,
            paid_at=invoice.paid_at,
            currency=invoice.currency,
            notes=invoice.notes,
        )


class InvoiceListResponseDTO(ResponseDTO):
    """DTO for an account's invoices."""

    invoices: List[InvoiceResponseDTO]
    total: int
