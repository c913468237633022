"""Domain error codes for the sanctuary core.

Callers branch on ``ErrorCode`` only. Store-specific failure codes never
leave the service layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    CONFLICT = "CONFLICT"
    UNAVAILABLE = "UNAVAILABLE"
    RATE_LIMITED = "RATE_LIMITED"


RETRYABLE_CODES = frozenset(
    {ErrorCode.CONFLICT, ErrorCode.UNAVAILABLE, ErrorCode.RATE_LIMITED}
)


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        """Whether the operation may be retried after a backoff."""
        return self.code in RETRYABLE_CODES

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationFailedError(DomainError):
    """Raised when caller input is rejected."""

    def __init__(
        self,
        message: str = "Invalid input",
        errors: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message=message,
            details={"errors": errors} if errors else {},
        )
        self.errors = errors or {}


class PermissionDeniedError(DomainError):
    """Raised when the caller is not allowed to perform an operation."""

    def __init__(self, message: str = "You don't have permission to perform this action") -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    entity = "Document"

    def __init__(self, entity_id: str | None = None) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=f"{self.entity} not found")
        self.entity_id = entity_id


class EventNotFoundError(NotFoundError):
    entity = "Event"


class ProductNotFoundError(NotFoundError):
    entity = "Product"


class OrderNotFoundError(NotFoundError):
    entity = "Order"


class PrayerRequestNotFoundError(NotFoundError):
    entity = "Prayer request"


class DevotionalNotFoundError(NotFoundError):
    entity = "Devotional"


class CapacityExceededError(DomainError):
    """Raised when a write would push registrations past capacity."""

    def __init__(self, event_id: str, message: str = "Event is at full capacity") -> None:
        super().__init__(code=ErrorCode.CAPACITY_EXCEEDED, message=message)
        self.event_id = event_id


class ConflictError(DomainError):
    """Raised when a transaction lost a race with a concurrent writer."""

    def __init__(self, message: str = "The data changed while saving. Please try again") -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message)


class UnavailableError(DomainError):
    """Raised when the store cannot be reached or timed out."""

    def __init__(
        self,
        message: str = "The service is currently unavailable. Please try again later",
    ) -> None:
        super().__init__(code=ErrorCode.UNAVAILABLE, message=message)


class RateLimitedError(DomainError):
    """Raised when the caller exceeded a write quota."""

    def __init__(
        self,
        retry_after: int | None = None,
        message: str = "You've reached the rate limit. Please try again later",
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=message,
            details={"retry_after": retry_after} if retry_after is not None else {},
        )
        self.retry_after = retry_after
