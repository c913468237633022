"""App settings with defaults, overridable through ``settings.SANCTUARY``."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "TRANSACTION_MAX_ATTEMPTS": 5,
    "TRANSACTION_TIMEOUT": 10.0,
    # "cascade" deletes an event's registrations with it, "forbid" refuses
    # to delete an event that has registrations.
    "EVENT_DELETE_POLICY": "cascade",
    "RATE_LIMIT_WINDOW": 60,
    "DEFAULT_RATE_LIMIT": 100,
    "RATE_LIMITS": {
        "events": 50,
        "products": 50,
        "users": 30,
        "user_roles": 30,
        "orders": 20,
        "event_registrations": 30,
        "prayer_requests": 10,
    },
    "CACHE_TIMEOUT": 300,
    # Dotted path or callable taking a bearer token and returning a uid or None.
    "IDENTITY_VERIFIER": None,
}


def app_setting(name: str) -> Any:
    overrides = getattr(settings, "SANCTUARY", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
