"""
Payment method configuration.
One variant per method, each carrying only the fields that method needs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union, Dict, Any, Optional
from urllib.parse import urlsplit

from .base import ValidationError


class PaymentMethodType(str, Enum):
    """Supported payment methods."""
    PAYPAL = "paypal"
    STRIPE_LINK = "stripe_link"
    REVOLUT = "revolut"
    BANK_TRANSFER = "bank_transfer"


def _validate_base_link(base_link: str) -> None:
    if not base_link or not base_link.strip():
        raise ValidationError("Payment link base URL is required", "base_link")
    parts = urlsplit(base_link)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError(f"Invalid payment link URL: {base_link!r}", "base_link")


@dataclass(frozen=True)
class _LinkPaymentMethod:
    base_link: str

    def __post_init__(self):
        _validate_base_link(self.base_link)

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method.value, "base_link": self.base_link}


@dataclass(frozen=True)
class PayPalMethod(_LinkPaymentMethod):
    method = PaymentMethodType.PAYPAL


@dataclass(frozen=True)
class StripeLinkMethod(_LinkPaymentMethod):
    method = PaymentMethodType.STRIPE_LINK


@dataclass(frozen=True)
class RevolutMethod(_LinkPaymentMethod):
    method = PaymentMethodType.REVOLUT


@dataclass(frozen=True)
class BankTransferMethod:
    """Offline payment; the payer follows textual instructions."""

    instructions: str
    method = PaymentMethodType.BANK_TRANSFER

    def __post_init__(self):
        if not self.instructions or not self.instructions.strip():
            raise ValidationError("Bank transfer instructions are required", "instructions")

    @property
    def base_link(self) -> Optional[str]:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method.value, "instructions": self.instructions}


PaymentMethod = Union[PayPalMethod, StripeLinkMethod, RevolutMethod, BankTransferMethod]

_LINK_METHODS = {
    PaymentMethodType.PAYPAL: PayPalMethod,
    PaymentMethodType.STRIPE_LINK: StripeLinkMethod,
    PaymentMethodType.REVOLUT: RevolutMethod,
}


def payment_method_from_dict(data: Dict[str, Any]) -> PaymentMethod:
    """Build the matching variant from a stored settings mapping."""
    try:
        method = PaymentMethodType(data.get("method"))
    except ValueError:
        raise ValidationError(f"Unknown payment method: {data.get('method')!r}", "method")

    if method == PaymentMethodType.BANK_TRANSFER:
        return BankTransferMethod(instructions=data.get("instructions") or "")
    return _LINK_METHODS[method](base_link=data.get("base_link") or "")
