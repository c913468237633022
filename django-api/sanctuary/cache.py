"""Read-through cache for public catalog reads.

Keys: ``events:list``, ``events:{id}``, ``products:list``, ``products:{id}``.
Entries are dropped by sanctuary.signals whenever a document changes.
"""

from collections.abc import Callable
from typing import Any

from django.core.cache import cache

from sanctuary.conf import app_setting
from sanctuary.stores import collections

CACHED_COLLECTIONS = (collections.EVENTS, collections.PRODUCTS)


def list_key(collection: str) -> str:
    return f"{collection}:list"


def detail_key(collection: str, entity_id: str) -> str:
    return f"{collection}:{entity_id}"


def cached(key: str, compute: Callable[[], Any]) -> Any:
    """Return the cached value for ``key``, computing and storing it on a miss."""
    value = cache.get(key)
    if value is None:
        value = compute()
        cache.set(key, value, timeout=app_setting("CACHE_TIMEOUT"))
    return value


def invalidate(collection: str, entity_id: str) -> None:
    if collection not in CACHED_COLLECTIONS:
        return
    cache.delete_many([list_key(collection), detail_key(collection, entity_id)])
