"""Service wiring.

Everything is built from one DocumentStore handed in by the caller; the app
config builds the production set in ``ready()`` and tests build their own.
"""

from dataclasses import dataclass

from django.apps import apps

from sanctuary.repositories import (
    BookmarkRepository,
    DevotionalRepository,
    EventRegistrationRepository,
    EventRepository,
    OrderRepository,
    PrayerRecordRepository,
    PrayerRequestRepository,
    ProductRepository,
    UserRepository,
    UserRoleRepository,
)
from sanctuary.services import (
    AuthorizationGate,
    DevotionalService,
    EventService,
    OrderService,
    PrayerService,
    ProductService,
    RateLimiter,
)
from sanctuary.stores.interfaces import DocumentStore


@dataclass(frozen=True)
class Services:
    store: DocumentStore
    gate: AuthorizationGate
    events: EventService
    products: ProductService
    orders: OrderService
    prayers: PrayerService
    devotionals: DevotionalService
    rate_limiter: RateLimiter | None = None


def build_services(
    store: DocumentStore,
    rate_limiter: RateLimiter | None = None,
    event_delete_policy: str | None = None,
) -> Services:
    gate = AuthorizationGate(store, UserRepository(store), UserRoleRepository(store), rate_limiter)
    return Services(
        store=store,
        gate=gate,
        events=EventService(
            store,
            gate,
            EventRepository(store),
            EventRegistrationRepository(store),
            rate_limiter,
            delete_policy=event_delete_policy,
        ),
        products=ProductService(store, gate, ProductRepository(store), rate_limiter),
        orders=OrderService(store, gate, OrderRepository(store), rate_limiter),
        prayers=PrayerService(
            store,
            gate,
            PrayerRequestRepository(store),
            PrayerRecordRepository(store),
            rate_limiter,
        ),
        devotionals=DevotionalService(
            store,
            gate,
            DevotionalRepository(store),
            BookmarkRepository(store),
            rate_limiter,
        ),
        rate_limiter=rate_limiter,
    )


def get_services() -> Services:
    """Return the services built by the app config."""
    return apps.get_app_config("sanctuary").services
