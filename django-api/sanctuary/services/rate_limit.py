"""Per-caller write quotas kept in the Django cache.

Each ``collection:operation`` pair gets a fixed window of
``RATE_LIMIT_WINDOW`` seconds and a limit from ``RATE_LIMITS``.
"""

import logging
import time

from django.core.cache import caches

from sanctuary.conf import app_setting
from sanctuary.domain.errors import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(
        self,
        cache_alias: str = "default",
        window: int | None = None,
        limits: dict[str, int] | None = None,
        default_limit: int | None = None,
    ) -> None:
        self._cache_alias = cache_alias
        self.window = window or app_setting("RATE_LIMIT_WINDOW")
        self.limits = limits if limits is not None else app_setting("RATE_LIMITS")
        self.default_limit = default_limit or app_setting("DEFAULT_RATE_LIMIT")

    def limit_for(self, collection: str) -> int:
        return self.limits.get(collection, self.default_limit)

    def hit(self, caller: str, collection: str, operation: str) -> int:
        """Count one operation. Returns the remaining quota.

        Raises:
            RateLimitedError: If the caller is over the limit for this window.
        """
        cache = caches[self._cache_alias]
        now = time.time()
        bucket = int(now // self.window)
        key = f"ratelimit:{caller}:{collection}:{operation}:{bucket}"
        cache.add(key, 0, timeout=self.window)
        try:
            count = cache.incr(key)
        except ValueError:
            # Expired between add and incr.
            cache.set(key, 1, timeout=self.window)
            count = 1
        limit = self.limit_for(collection)
        if count > limit:
            retry_after = max(1, int(self.window - (now % self.window)))
            logger.info("Rate limited %s on %s:%s", caller, collection, operation)
            raise RateLimitedError(retry_after=retry_after)
        return limit - count
