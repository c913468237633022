"""In-process document store.

Same optimistic semantics as the Django store, with commits serialised by a
lock. Used for local development and for concurrency tests.
"""

import copy
import logging
import operator
import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from sanctuary.stores.interfaces import (
    DocumentRef,
    Filter,
    Query,
    Snapshot,
    StoreError,
    documents_changed,
)
from sanctuary.stores.transaction import (
    DELETE,
    SET,
    BufferedTransaction,
    CommitConflict,
    OptimisticStore,
    resolve_server_timestamps,
)

logger = logging.getLogger(__name__)

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
}


def _matches(data: dict[str, Any], condition: Filter) -> bool:
    if condition.field not in data:
        return False
    try:
        return bool(_OPERATORS[condition.op](data[condition.field], condition.value))
    except TypeError:
        return False


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


class MemoryDocumentStore(OptimisticStore):
    """Dictionary-backed store with optimistic transactions."""

    def __init__(self, *, max_attempts: int = 5, timeout: float = 10.0) -> None:
        super().__init__(max_attempts=max_attempts, timeout=timeout)
        self._documents: dict[DocumentRef, tuple[dict[str, Any], int]] = {}
        self._clock = 0
        self._lock = threading.Lock()
        self._watchers: list[tuple[Query, Callable[[Sequence[Snapshot]], None]]] = []

    def _load(self, ref: DocumentRef) -> tuple[dict[str, Any] | None, int | None]:
        with self._lock:
            current = self._documents.get(ref)
        if current is None:
            return None, None
        data, version = current
        return copy.deepcopy(data), version

    def _commit(self, tx: BufferedTransaction) -> frozenset[DocumentRef]:
        now = datetime.now(timezone.utc)
        with self._lock:
            for ref, version in tx.reads.items():
                current = self._documents.get(ref)
                if (current[1] if current else None) != version:
                    raise CommitConflict(ref)

            # Stage everything first so a failing write leaves no partial commit.
            staged: dict[DocumentRef, tuple[dict[str, Any], int] | None] = {}
            for ref, write in tx.writes.items():
                if write.kind == DELETE:
                    staged[ref] = None
                    continue
                data = resolve_server_timestamps(write.data, now)
                self._clock += 1
                if write.kind == SET:
                    staged[ref] = (copy.deepcopy(data), self._clock)
                    continue
                current = staged[ref] if ref in staged else self._documents.get(ref)
                if current is None:
                    raise StoreError(StoreError.NOT_FOUND, f"No document to update: {ref}")
                staged[ref] = ({**current[0], **copy.deepcopy(data)}, self._clock)

            for ref, document in staged.items():
                if document is None:
                    self._documents.pop(ref, None)
                else:
                    self._documents[ref] = document
        return frozenset(staged)

    def _changed(self, refs: frozenset[DocumentRef]) -> None:
        collections = {ref.collection for ref in refs}
        for query, callback in list(self._watchers):
            if query.collection in collections:
                callback(self.query(query))
        documents_changed.send(sender=type(self), store=self, refs=refs)

    def get(self, ref: DocumentRef) -> Snapshot:
        data, version = self._load(ref)
        return Snapshot(ref=ref, data=data, version=version)

    def query(self, query: Query) -> list[Snapshot]:
        with self._lock:
            documents = [
                (ref, copy.deepcopy(data), version)
                for ref, (data, version) in self._documents.items()
                if ref.collection == query.collection
            ]
        matching = [
            Snapshot(ref=ref, data=data, version=version)
            for ref, data, version in documents
            if all(_matches(data, condition) for condition in query.filters)
        ]
        for order in reversed(query.order_by):
            matching.sort(key=lambda snap: _sort_key(snap.data.get(order.field)), reverse=order.descending)
        if query.limit is not None:
            matching = matching[: query.limit]
        return matching

    def watch(
        self, query: Query, callback: Callable[[Sequence[Snapshot]], None]
    ) -> Callable[[], None]:
        entry = (query, callback)
        self._watchers.append(entry)
        callback(self.query(query))

        def unsubscribe() -> None:
            if entry in self._watchers:
                self._watchers.remove(entry)

        return unsubscribe
