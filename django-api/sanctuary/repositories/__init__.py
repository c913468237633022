from sanctuary.repositories.base import Repository
from sanctuary.repositories.devotionals import BookmarkRepository, DevotionalRepository
from sanctuary.repositories.events import EventRegistrationRepository, EventRepository
from sanctuary.repositories.orders import OrderRepository
from sanctuary.repositories.prayers import PrayerRecordRepository, PrayerRequestRepository
from sanctuary.repositories.products import ProductRepository
from sanctuary.repositories.users import UserRepository, UserRoleRepository

__all__ = [
    "Repository",
    "EventRepository",
    "EventRegistrationRepository",
    "ProductRepository",
    "OrderRepository",
    "PrayerRequestRepository",
    "PrayerRecordRepository",
    "DevotionalRepository",
    "BookmarkRepository",
    "UserRepository",
    "UserRoleRepository",
]
