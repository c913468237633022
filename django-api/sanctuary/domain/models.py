"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in sanctuary/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time

from sanctuary.domain.value_objects import (
    Capacity,
    DevotionalStatus,
    EventStatus,
    Money,
    OrderStatus,
    PrayerStatus,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: str
    title: str
    date: date
    time: time
    location: str
    category: str
    description: str
    capacity: Capacity
    registrations: int = 0
    registration_open: bool = True
    featured: bool = False
    status: EventStatus = EventStatus.UPCOMING
    image: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.registrations < 0:
            raise ValueError("Registrations cannot be negative")
        if self.registrations > self.capacity.value:
            raise ValueError("Registrations cannot exceed capacity")

    @property
    def remaining(self) -> int:
        return self.capacity.value - self.registrations

    @property
    def is_full(self) -> bool:
        return not self.capacity.admits(self.registrations)

    @property
    def accepts_registrations(self) -> bool:
        return self.registration_open and self.status is EventStatus.UPCOMING


@dataclass(frozen=True)
class EventRegistration:
    """A user's seat at an event. Created only by the registration transaction."""

    id: str
    event_id: str
    user_id: str
    registered_at: datetime | None = None


@dataclass(frozen=True)
class Product:
    """Domain representation of a shop Product."""

    id: str
    name: str
    price: Money
    category: str
    description: str
    stock: int = 0
    original_price: Money | None = None
    sale: bool = False
    featured: bool = False
    image: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    price: Money
    quantity: int
    image: str = ""

    @property
    def subtotal(self) -> Money:
        return self.price * self.quantity


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str


@dataclass(frozen=True)
class Order:
    """Domain representation of a shop Order."""

    id: str
    user_id: str
    user_email: str
    user_name: str
    items: tuple[OrderItem, ...]
    total: Money
    status: OrderStatus
    shipping_address: ShippingAddress
    payment_method: str
    payment_id: str | None = None
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PrayerRequest:
    id: str
    name: str
    request: str
    is_anonymous: bool = False
    user_id: str | None = None
    prayer_count: int = 0
    status: PrayerStatus = PrayerStatus.ACTIVE
    date: datetime | None = None


@dataclass(frozen=True)
class PrayerRecord:
    """Marks that a user prayed for a request."""

    id: str
    request_id: str
    user_id: str
    prayed_at: datetime | None = None


@dataclass(frozen=True)
class DevotionalAuthor:
    id: str
    name: str
    image: str = ""


@dataclass(frozen=True)
class Devotional:
    id: str
    title: str
    verse: str
    verse_text: str
    content: str
    author: DevotionalAuthor
    category: str = ""
    status: DevotionalStatus = DevotionalStatus.DRAFT
    likes: int = 0
    comments: int = 0
    date: datetime | None = None


@dataclass(frozen=True)
class Bookmark:
    """A devotional saved by a user. Keyed ``{user_id}:{devotional_id}``."""

    id: str
    user_id: str
    devotional_id: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class User:
    """Profile data synced from the identity provider."""

    id: str
    email: str
    display_name: str = ""
    photo_url: str = ""
    phone_number: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_sign_in_at: datetime | None = None


@dataclass(frozen=True)
class UserRole:
    """Per-user authorization record. The id is the user's uid."""

    id: str
    is_admin: bool = False
    permissions: tuple[str, ...] = field(default_factory=tuple)
