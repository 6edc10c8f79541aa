"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List, Sequence
from dataclasses import dataclass
from datetime import datetime

from billing.domain.models.base import AccountContext, DomainException, PermissionDenied
from billing.domain.events.base import DomainEvent, EventDispatcher


T = TypeVar('T')
R = TypeVar('R')

logger = logging.getLogger(__name__)


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    exception: Optional[Exception] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, DomainException):
            result = cls.error_result(exc.message, exc.code)
        else:
            result = cls.error_result(str(exc), "UNKNOWN_ERROR")
        result.exception = exc
        return result

    def unwrap(self) -> T:
        """Return the data or re-raise the exception that produced the error."""
        if self.success:
            return self.data
        if self.exception is not None:
            raise self.exception
        raise DomainException(self.error or "Unknown error", self.error_code)


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    The caller's identity is passed explicitly on every call.
    """

    async def execute(self, context: AccountContext, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        started = datetime.utcnow()

        try:
            await self._check_authorization(context, request)
            result = await self._execute_business_logic(context, request)

            finished = datetime.utcnow()
            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": (finished - started).total_seconds(),
                    "executed_at": finished.isoformat()
                }
            )

        except DomainException as exc:
            logger.info(f"{self.__class__.__name__} rejected: {exc.code}: {exc.message}")
            return self._failure(exc, started)
        except Exception as exc:
            logger.exception(f"{self.__class__.__name__} failed unexpectedly")
            return self._failure(exc, started)

    def _failure(self, exc: Exception, started: datetime) -> UseCaseResult[R]:
        finished = datetime.utcnow()
        error_result = UseCaseResult.from_exception(exc)
        error_result.metadata = {
            "execution_time_seconds": (finished - started).total_seconds(),
            "failed_at": finished.isoformat(),
            "exception_type": type(exc).__name__
        }
        return error_result

    async def _check_authorization(self, context: AccountContext, request: T) -> None:
        """Check if the caller is authorized. Override in subclasses."""
        pass

    @abstractmethod
    async def _execute_business_logic(self, context: AccountContext, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Publishes the domain events collected while executing.
    """

    def __init__(self, event_dispatcher: Optional[EventDispatcher] = None):
        self.event_dispatcher = event_dispatcher
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, context: AccountContext, request: T) -> R:
        result = await self._execute_command_logic(context, request)
        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, context: AccountContext, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def collect_events(self, events: Sequence[DomainEvent]) -> None:
        self.events.extend(events)

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        events, self.events = self.events, []
        if self.event_dispatcher is not None:
            await self.event_dispatcher.publish_all(events)


class AdminUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases restricted to administrators.
    """

    admin_roles: Sequence[str] = ("admin",)

    async def _check_authorization(self, context: AccountContext, request: T) -> None:
        await super()._check_authorization(context, request)
        if not any(context.has_role(role) for role in self.admin_roles):
            raise PermissionDenied("Administrator role required")
