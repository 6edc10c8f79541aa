"""
Global error handling for the FastAPI application.
Maps the domain error taxonomy to HTTP statuses and formats all errors consistently.
"""

import logging
import traceback
from typing import Any, Dict

from fastapi import FastAPI, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from billing.config import settings
from billing.application.dto.base_dto import ErrorResponseDTO
from billing.domain.models.base import (
    DomainException,
    ValidationError,
    ConfigurationError,
    InvalidTransitionError,
    PermissionDenied,
    EntityNotFoundError,
)

logger = logging.getLogger(__name__)


STATUS_BY_EXCEPTION = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConfigurationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception."""
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def domain_error_response(exc: DomainException) -> JSONResponse:
    body = ErrorResponseDTO(error=exc.code, message=exc.message, details=exc.to_dict())
    return JSONResponse(status_code=status_for(exc), content=body.model_dump(mode="json"))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Exception handler for domain errors raised from routes."""
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code}: {exc.message}")
    return domain_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        if isinstance(exc, DomainException):
            return domain_error_response(exc)

        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = self.format_error_response(exc)

        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.pop("status_code"),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        error_response = {
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        if isinstance(exc, ValueError):
            error_response.update({
                "error": "BAD_REQUEST",
                "message": str(exc),
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, TimeoutError):
            error_response.update({
                "error": "REQUEST_TIMEOUT",
                "message": "The request took too long to process",
                "status_code": status.HTTP_408_REQUEST_TIMEOUT
            })

        return error_response
