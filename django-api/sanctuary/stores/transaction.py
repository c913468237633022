"""Optimistic transaction machinery shared by the store backends.

A transaction body runs against a ``BufferedTransaction``: every read records
the version it saw, every write is buffered. The backend then commits the
buffer atomically, failing with ``CommitConflict`` if any recorded version is
stale, in which case the whole body is run again.
"""

import copy
import logging
import random
import time
import uuid
from abc import abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sanctuary.stores.interfaces import (
    SERVER_TIMESTAMP,
    DocumentRef,
    DocumentStore,
    Snapshot,
    StoreError,
    T,
    Transaction,
)

logger = logging.getLogger(__name__)

SET = "set"
UPDATE = "update"
DELETE = "delete"

Loader = Callable[[DocumentRef], tuple[dict[str, Any] | None, int | None]]


@dataclass(frozen=True)
class Write:
    kind: str
    data: dict[str, Any] | None = None


class CommitConflict(Exception):
    """A document read by the transaction changed before it could commit."""

    def __init__(self, ref: DocumentRef) -> None:
        super().__init__(f"{ref} was modified concurrently")
        self.ref = ref


def resolve_server_timestamps(data: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    return {key: now if value is SERVER_TIMESTAMP else value for key, value in data.items()}


class BufferedTransaction(Transaction):
    """Records read versions and buffers writes until commit."""

    def __init__(self, load: Loader) -> None:
        self._load = load
        self._snapshots: dict[DocumentRef, dict[str, Any] | None] = {}
        self.reads: dict[DocumentRef, int | None] = {}
        self.writes: dict[DocumentRef, Write] = {}

    def _read(self, ref: DocumentRef) -> dict[str, Any] | None:
        # Repeated reads return the first snapshot so the body sees one state.
        if ref not in self._snapshots:
            data, version = self._load(ref)
            self._snapshots[ref] = data
            self.reads[ref] = version
        return self._snapshots[ref]

    def get(self, ref: DocumentRef) -> Snapshot:
        write = self.writes.get(ref)
        if write is None:
            data = self._read(ref)
        elif write.kind == DELETE:
            data = None
        elif write.kind == SET:
            data = write.data
        else:
            base = self._read(ref)
            data = None if base is None else {**base, **write.data}
        return Snapshot(ref=ref, data=copy.deepcopy(data), version=self.reads.get(ref))

    def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        self.writes[ref] = Write(SET, dict(data))

    def update(self, ref: DocumentRef, fields: Mapping[str, Any]) -> None:
        previous = self.writes.get(ref)
        if previous is None:
            self.writes[ref] = Write(UPDATE, dict(fields))
        elif previous.kind == DELETE:
            raise StoreError(StoreError.NOT_FOUND, f"{ref} was deleted in this transaction")
        else:
            self.writes[ref] = Write(previous.kind, {**previous.data, **fields})

    def delete(self, ref: DocumentRef) -> None:
        self.writes[ref] = Write(DELETE)


class OptimisticStore(DocumentStore):
    """Base for stores that re-run transaction bodies on commit conflicts."""

    retry_backoff = 0.005

    def __init__(self, *, max_attempts: int = 5, timeout: float = 10.0) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.timeout = timeout

    def new_ref(self, collection: str) -> DocumentRef:
        return DocumentRef(collection=collection, id=uuid.uuid4().hex)

    def run_transaction(self, body: Callable[[Transaction], T]) -> T:
        deadline = time.monotonic() + self.timeout
        for attempt in range(1, self.max_attempts + 1):
            tx = BufferedTransaction(self._load)
            result = body(tx)
            if time.monotonic() > deadline:
                raise StoreError(StoreError.DEADLINE_EXCEEDED, "Transaction timed out")
            try:
                changed = self._commit(tx)
            except CommitConflict as exc:
                logger.debug(
                    "Transaction attempt %d/%d conflicted on %s",
                    attempt,
                    self.max_attempts,
                    exc.ref,
                )
                if attempt < self.max_attempts:
                    time.sleep(random.uniform(0, self.retry_backoff * attempt))
                continue
            if changed:
                self._changed(changed)
            return result
        raise StoreError(
            StoreError.ABORTED,
            f"Transaction aborted after {self.max_attempts} conflicting attempts",
        )

    @abstractmethod
    def _load(self, ref: DocumentRef) -> tuple[dict[str, Any] | None, int | None]:
        """Return the current data and version of a document."""
        ...

    @abstractmethod
    def _commit(self, tx: BufferedTransaction) -> frozenset[DocumentRef]:
        """Atomically validate reads and apply writes. Return changed refs."""
        ...

    @abstractmethod
    def _changed(self, refs: frozenset[DocumentRef]) -> None:
        """Notify live queries about committed changes."""
        ...
