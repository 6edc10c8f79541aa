"""
Newsletter router.
Public subscribe and unsubscribe endpoints; sending goes through the
admin broadcast.
"""

from fastapi import APIRouter, status

from billing.infrastructure.web.dependencies import ContainerDep, PUBLIC_CONTEXT
from billing.application.use_cases.dispatch_use_cases import (
    SubscribeNewsletterUseCase,
    UnsubscribeNewsletterUseCase,
)
from billing.application.dto.dispatch_dto import (
    NewsletterSubscriptionRequestDTO,
    NewsletterSubscriptionResponseDTO,
)


router = APIRouter()


@router.post("/subscribe", status_code=status.HTTP_201_CREATED, response_model=NewsletterSubscriptionResponseDTO)
async def subscribe(request: NewsletterSubscriptionRequestDTO, container: ContainerDep):
    """
    Subscribe an address to the newsletter. No account required.
    """
    use_case = SubscribeNewsletterUseCase(container.recipient_directory)
    result = await use_case.execute(PUBLIC_CONTEXT, request)
    return result.unwrap()


@router.post("/unsubscribe", response_model=NewsletterSubscriptionResponseDTO)
async def unsubscribe(request: NewsletterSubscriptionRequestDTO, container: ContainerDep):
    """
    Remove an address from the newsletter.
    """
    use_case = UnsubscribeNewsletterUseCase(container.recipient_directory)
    result = await use_case.execute(PUBLIC_CONTEXT, request)
    return result.unwrap()
