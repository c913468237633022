"""Bounded retry for retry-safe domain errors."""

import logging
import random
import time
from collections.abc import Callable
from typing import Any, TypeVar

from sanctuary.domain.errors import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Jittered exponential delay before retry number ``attempt``."""
    return min(max_delay, base_delay * 2 ** (attempt - 1)) * random.uniform(0.5, 1.0)


def call_with_retry(
    fn: Callable[..., T],
    *args: Any,
    attempts: int = 3,
    base_delay: float = 0.05,
    max_delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """Call ``fn``, retrying Conflict/Unavailable/RateLimited with backoff.

    Terminal errors (NotFound, CapacityExceeded, ...) are raised immediately,
    as is the last retryable error once ``attempts`` is used up.
    """
    attempt = 1
    while True:
        try:
            return fn(*args, **kwargs)
        except DomainError as exc:
            if not exc.retryable or attempt >= attempts:
                raise
            retry_after = getattr(exc, "retry_after", None)
            delay = min(max_delay, retry_after) if retry_after else backoff_delay(attempt, base_delay, max_delay)
            logger.debug("Retrying after %s (attempt %d/%d)", exc.code.value, attempt, attempts)
            sleep(delay)
            attempt += 1
