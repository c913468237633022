from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.devotional_service import DevotionalService
from sanctuary.services.errors import translate_store_error, translated_store_errors
from sanctuary.services.event_service import EventService
from sanctuary.services.order_service import OrderService
from sanctuary.services.prayer_service import PrayerService
from sanctuary.services.product_service import ProductService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.retry import call_with_retry

__all__ = [
    "AuthorizationGate",
    "Identity",
    "EventService",
    "ProductService",
    "OrderService",
    "PrayerService",
    "DevotionalService",
    "RateLimiter",
    "call_with_retry",
    "translate_store_error",
    "translated_store_errors",
]
