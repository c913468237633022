"""Shared plumbing for the transactional mutation services."""

from collections.abc import Callable

from sanctuary.services.authorization import AuthorizationGate, Identity, caller_key
from sanctuary.services.errors import translated_store_errors
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.stores.interfaces import DocumentStore, T, Transaction


class MutationService:
    """Runs multi-step writes atomically and translates store failures."""

    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._store = store
        self._gate = gate
        self._rate_limiter = rate_limiter

    def _throttle(
        self,
        identity: Identity | None,
        collection: str,
        operation: str,
        client: str | None = None,
    ) -> None:
        """Count one write against the caller's quota.

        Anonymous callers share a quota per ``client`` address.
        """
        if self._rate_limiter is not None:
            self._rate_limiter.hit(caller_key(identity, client), collection, operation)

    def _transact(self, operation: str, body: Callable[[Transaction], T]) -> T:
        with translated_store_errors(operation):
            return self._store.run_transaction(body)

    def _read(self, operation: str, fn: Callable[[], T]) -> T:
        with translated_store_errors(operation):
            return fn()
