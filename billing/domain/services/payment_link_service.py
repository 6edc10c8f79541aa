"""
Payment link composition.
Pure string building; no network access and no reachability checks.
"""

from typing import Optional, Union
from urllib.parse import quote, urlsplit, urlunsplit

from billing.domain.models.payment import PaymentMethod, PaymentMethodType


def compose_payment_link(
    base_link: Optional[str],
    method: Union[PaymentMethodType, str],
    invoice_number: str
) -> Optional[str]:
    """
    Append the invoice number to the provider link.

    Returns None for bank transfers and when no base link is configured.
    """
    if PaymentMethodType(method) == PaymentMethodType.BANK_TRANSFER:
        return None
    if not base_link or not base_link.strip():
        return None

    parts = urlsplit(base_link.strip())
    param = f"invoice={quote(str(invoice_number), safe='')}"
    query = parts.query.rstrip("&")
    # The parameter goes into the query, ahead of any fragment
    query = f"{query}&{param}" if query else param
    return urlunsplit(parts._replace(query=query))


def compose_for(payment_method: PaymentMethod, invoice_number: str) -> Optional[str]:
    """Same as compose_payment_link, taking a validated payment method."""
    return compose_payment_link(payment_method.base_link, payment_method.method, invoice_number)
