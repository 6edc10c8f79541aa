"""
Application DTOs.
Request and response models exchanged with the web layer.
"""

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, HealthCheckResponseDTO, ErrorResponseDTO
from .invoice_dto import (
    InvoiceItemRequestDTO,
    InvoiceItemResponseDTO,
    ComputeTotalsRequestDTO,
    InvoiceTotalsResponseDTO,
    CreateInvoiceRequestDTO,
    MarkPaidRequestDTO,
    InvoiceIdRequestDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
)
from .notification_dto import NotificationResponseDTO, NotificationListResponseDTO
from .payment_dto import PaymentMethodDTO, PaymentLinkRequestDTO, PaymentLinkResponseDTO
from .dispatch_dto import (
    BroadcastRequestDTO,
    AnnouncementRequestDTO,
    FailedRecipientDTO,
    DispatchResultResponseDTO,
    ReminderRunResponseDTO,
)

__all__ = [
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "HealthCheckResponseDTO",
    "ErrorResponseDTO",
    "InvoiceItemRequestDTO",
    "InvoiceItemResponseDTO",
    "ComputeTotalsRequestDTO",
    "InvoiceTotalsResponseDTO",
    "CreateInvoiceRequestDTO",
    "MarkPaidRequestDTO",
    "InvoiceIdRequestDTO",
    "InvoiceResponseDTO",
    "InvoiceListResponseDTO",
    "NotificationResponseDTO",
    "NotificationListResponseDTO",
    "PaymentMethodDTO",
    "PaymentLinkRequestDTO",
    "PaymentLinkResponseDTO",
    "BroadcastRequestDTO",
    "AnnouncementRequestDTO",
    "FailedRecipientDTO",
    "DispatchResultResponseDTO",
    "ReminderRunResponseDTO",
]
