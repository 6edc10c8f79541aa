"""
Payment link router.
"""

from fastapi import APIRouter

from billing.infrastructure.web.dependencies import AccountDep
from billing.application.use_cases.invoice_use_cases import ComposePaymentLinkUseCase
from billing.application.dto.payment_dto import PaymentLinkRequestDTO, PaymentLinkResponseDTO


router = APIRouter()


@router.post("", response_model=PaymentLinkResponseDTO)
async def compose_payment_link(request: PaymentLinkRequestDTO, context: AccountDep):
    """
    Compose the pay link for an invoice.

    Bank transfers have no link; their instructions are returned instead.
    """
    result = await ComposePaymentLinkUseCase().execute(context, request)
    return result.unwrap()
