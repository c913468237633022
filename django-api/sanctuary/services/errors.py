"""Translation of store failures into domain errors.

This is the only place that inspects store-specific error codes.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sanctuary.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitedError,
    UnavailableError,
    ValidationFailedError,
)
from sanctuary.stores.interfaces import StoreError

logger = logging.getLogger(__name__)

_TRANSLATIONS: dict[str, type[DomainError]] = {
    StoreError.PERMISSION_DENIED: PermissionDeniedError,
    StoreError.UNAUTHENTICATED: PermissionDeniedError,
    StoreError.UNAVAILABLE: UnavailableError,
    StoreError.DEADLINE_EXCEEDED: UnavailableError,
    StoreError.INTERNAL: UnavailableError,
    StoreError.RESOURCE_EXHAUSTED: RateLimitedError,
    StoreError.NOT_FOUND: NotFoundError,
    StoreError.ABORTED: ConflictError,
    StoreError.ALREADY_EXISTS: ConflictError,
    StoreError.INVALID_ARGUMENT: ValidationFailedError,
    StoreError.FAILED_PRECONDITION: ValidationFailedError,
}


def translate_store_error(error: StoreError) -> DomainError:
    """Map a store failure onto the domain taxonomy. Unknown codes are Unavailable."""
    return _TRANSLATIONS.get(error.code, UnavailableError)()


@contextmanager
def translated_store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except StoreError as exc:
        error = translate_store_error(exc)
        logger.warning("Store %s error (%s): %s", operation, exc.code, error.code.value)
        raise error from exc
