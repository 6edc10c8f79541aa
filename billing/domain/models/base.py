"""
Base entity and exceptions for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime
from typing import Optional, Any, Dict, List
from abc import ABC
from dataclasses import dataclass, field


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """

    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List[Any] = field(default_factory=list, init=False, repr=False, compare=False)

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.utcnow()

    def add_event(self, event: Any) -> None:
        """Add a domain event."""
        self._events.append(event)

    def pull_events(self) -> List[Any]:
        """Get and clear all domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    @property
    def is_new(self) -> bool:
        """Check if entity is new (not persisted)."""
        return self.id is None

    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass


@dataclass(eq=False)
class AggregateRoot(BaseEntity):
    """
    Base class for aggregate roots.
    Aggregate roots are the entry points to aggregates and handle domain events.
    """

    version: int = field(default=1)

    def increment_version(self) -> None:
        """Increment the aggregate version for optimistic locking."""
        self.version += 1
        self.mark_as_updated()


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {"code": self.code, "message": self.message}


class ValidationError(DomainException):
    """Exception raised when input or entity validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class ConfigurationError(DomainException):
    """Exception raised when required content or settings are missing."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message, "CONFIGURATION_ERROR")
        self.setting = setting


class InvalidTransitionError(DomainException):
    """Exception raised when a state change is not allowed."""

    def __init__(self, message: str, from_state: Optional[str] = None, to_state: Optional[str] = None):
        super().__init__(message, "INVALID_TRANSITION")
        self.from_state = from_state
        self.to_state = to_state


class TransportError(DomainException):
    """
    Raised by an outbound message sender when a whole send call fails
    (network outage, authentication, provider unavailable).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "TRANSPORT_ERROR")
        self.cause = cause


class PermissionDenied(DomainException):
    """Exception raised when the caller lacks the required role."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, "PERMISSION_DENIED")


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


@dataclass(frozen=True)
class AccountContext:
    """
    Identity of the caller, passed explicitly to every core operation.
    """

    account_id: str
    roles: tuple = ()

    def __post_init__(self):
        if not self.account_id or not str(self.account_id).strip():
            raise ValidationError("Account ID is required", "account_id")
        object.__setattr__(self, "roles", tuple(self.roles))

    def has_role(self, role: str) -> bool:
        """Check if the caller has a specific role."""
        return role in self.roles

    def require_role(self, role: str) -> None:
        """Raise PermissionDenied unless the caller has the role."""
        if not self.has_role(role):
            raise PermissionDenied(f"Role '{role}' required")
