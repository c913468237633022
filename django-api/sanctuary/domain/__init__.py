from sanctuary.domain.models import (
    Bookmark,
    Devotional,
    DevotionalAuthor,
    Event,
    EventRegistration,
    Order,
    OrderItem,
    PrayerRecord,
    PrayerRequest,
    Product,
    ShippingAddress,
    User,
    UserRole,
)
from sanctuary.domain.value_objects import (
    Capacity,
    DevotionalStatus,
    EventStatus,
    Money,
    OrderStatus,
    PrayerStatus,
    RoleState,
)

__all__ = [
    "Event",
    "EventRegistration",
    "Product",
    "Order",
    "OrderItem",
    "ShippingAddress",
    "PrayerRequest",
    "PrayerRecord",
    "Devotional",
    "DevotionalAuthor",
    "Bookmark",
    "User",
    "UserRole",
    "Money",
    "Capacity",
    "EventStatus",
    "OrderStatus",
    "PrayerStatus",
    "DevotionalStatus",
    "RoleState",
]
