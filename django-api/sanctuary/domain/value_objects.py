"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def of(cls, value: Decimal | str | int | float) -> Self:
        return cls(amount=Decimal(str(value)))

    def __mul__(self, quantity: int) -> "Money":
        return Money(self.amount * quantity)

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    def admits(self, registrations: int) -> bool:
        """Return True if one more registration still fits."""
        return registrations < self.value


class EventStatus(Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_final(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PrayerStatus(Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class DevotionalStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class RoleState(Enum):
    """Per-user authorization lifecycle."""

    UNKNOWN = "unknown"
    ROLE_MISSING = "role_missing"
    ROLE_ASSIGNED = "role_assigned"
