"""
Payment link DTOs.
The payment method is a discriminated union keyed on "method".
"""

from typing import Annotated, Literal, Optional, Union
from pydantic import Field

from billing.domain.models.payment import (
    PaymentMethod,
    PayPalMethod,
    StripeLinkMethod,
    RevolutMethod,
    BankTransferMethod,
)
from .base_dto import RequestDTO, ResponseDTO


class PayPalMethodDTO(RequestDTO):
    method: Literal["paypal"]
    base_link: str = Field(min_length=1)

    def to_domain(self) -> PaymentMethod:
        return PayPalMethod(base_link=self.base_link)


class StripeLinkMethodDTO(RequestDTO):
    method: Literal["stripe_link"]
    base_link: str = Field(min_length=1)

    def to_domain(self) -> PaymentMethod:
        return StripeLinkMethod(base_link=self.base_link)


class RevolutMethodDTO(RequestDTO):
    method: Literal["revolut"]
    base_link: str = Field(min_length=1)

    def to_domain(self) -> PaymentMethod:
        return RevolutMethod(base_link=self.base_link)


class BankTransferMethodDTO(RequestDTO):
    method: Literal["bank_transfer"]
    instructions: str = Field(min_length=1)

    def to_domain(self) -> PaymentMethod:
        return BankTransferMethod(instructions=self.instructions)


PaymentMethodDTO = Annotated[
    Union[PayPalMethodDTO, StripeLinkMethodDTO, RevolutMethodDTO, BankTransferMethodDTO],
    Field(discriminator="method"),
]


class PaymentLinkRequestDTO(RequestDTO):
    """DTO for composing a payment link."""

    payment_method: PaymentMethodDTO
    invoice_number: str = Field(min_length=1, max_length=50)


class PaymentLinkResponseDTO(ResponseDTO):
    """Composed link; None for offline methods."""

    method: str
    invoice_number: str
    payment_link: Optional[str] = None
    instructions: Optional[str] = None
