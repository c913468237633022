"""Pytest configuration and shared fixtures."""

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from sanctuary.container import build_services
from sanctuary.services import Identity, RateLimiter
from sanctuary.stores import DocumentRef, MemoryDocumentStore, collections

ADMIN_UID = "admin-uid"
MEMBER_UID = "member-uid"


def grant_admin(store, uid: str) -> None:
    store.run_transaction(
        lambda tx: tx.set(
            DocumentRef(collections.USER_ROLES, uid),
            {"is_admin": True, "permissions": []},
        )
    )


def verify_test_token(token: str) -> str | None:
    """Accepts ``token-<uid>``."""
    if token.startswith("token-"):
        return token.removeprefix("token-")
    return None


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def services(store):
    grant_admin(store, ADMIN_UID)
    return build_services(store)


@pytest.fixture
def admin() -> Identity:
    return Identity(uid=ADMIN_UID)


@pytest.fixture
def member() -> Identity:
    return Identity(uid=MEMBER_UID)


@pytest.fixture
def event_input():
    def make(**overrides):
        data = {
            "title": "Christmas Eve Service",
            "date": "2026-12-24",
            "time": "19:00",
            "location": "Main Sanctuary",
            "category": "Worship",
            "description": "Candlelight carols and communion for the whole family.",
            "capacity": 50,
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def product_input():
    def make(**overrides):
        data = {
            "name": "Journal",
            "price": "24.99",
            "category": "Books",
            "description": "Lined prayer journal with a linen cover.",
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def app_services(settings):
    """Point the HTTP layer at an in-memory store and accept test tokens."""
    settings.SANCTUARY = {"IDENTITY_VERIFIER": verify_test_token}
    store = MemoryDocumentStore()
    grant_admin(store, ADMIN_UID)
    built = build_services(store, rate_limiter=RateLimiter())
    config = apps.get_app_config("sanctuary")
    original = config.services
    config.services = built
    yield built
    config.services = original


@pytest.fixture
def admin_client(app_services) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer token-{ADMIN_UID}")
    return client


@pytest.fixture
def member_client(app_services) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer token-{MEMBER_UID}")
    return client


@pytest.fixture
def make_admin():
    return grant_admin
