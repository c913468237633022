"""Typed repositories over the document store (repository pattern).

Repositories map documents to domain models and return domain models. Writes
always go through a transaction handle; reads come in two flavours:
``get`` for plain reads and ``get_within_transaction`` for reads that must
take part in the transaction's conflict detection.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from sanctuary.stores.interfaces import (
    DocumentRef,
    DocumentStore,
    Filter,
    OrderBy,
    Query,
    Snapshot,
    Transaction,
)

EntityT = TypeVar("EntityT")


class Repository(ABC, Generic[EntityT]):
    """Base CRUD accessor for one collection."""

    collection: str

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @abstractmethod
    def from_snapshot(self, snapshot: Snapshot) -> EntityT:
        """Build the domain model for an existing document."""
        ...

    def to_document(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Convert domain field values to storable document values."""
        return dict(fields)

    def ref(self, entity_id: str) -> DocumentRef:
        return DocumentRef(self.collection, entity_id)

    def _entity(self, snapshot: Snapshot) -> EntityT | None:
        return self.from_snapshot(snapshot) if snapshot.exists else None

    def get(self, entity_id: str) -> EntityT | None:
        """Return an entity by ID, or None if not found."""
        return self._entity(self._store.get(self.ref(entity_id)))

    def get_within_transaction(self, tx: Transaction, entity_id: str) -> EntityT | None:
        """Read through ``tx`` so a concurrent change aborts the transaction."""
        return self._entity(tx.get(self.ref(entity_id)))

    def _query(
        self,
        filters: Iterable[Filter] = (),
        order_by: Iterable[OrderBy] = (),
        limit: int | None = None,
    ) -> Query:
        return Query(
            collection=self.collection,
            filters=tuple(filters),
            order_by=tuple(order_by),
            limit=limit,
        )

    def list(
        self,
        filters: Iterable[Filter] = (),
        order_by: Iterable[OrderBy] = (),
        limit: int | None = None,
    ) -> list[EntityT]:
        snapshots = self._store.query(self._query(filters, order_by, limit))
        return [self.from_snapshot(snapshot) for snapshot in snapshots]

    def watch(
        self,
        callback: Callable[[Sequence[EntityT]], None],
        filters: Iterable[Filter] = (),
        order_by: Iterable[OrderBy] = (),
        limit: int | None = None,
    ) -> Callable[[], None]:
        """Live query: ``callback`` gets the full list now and after each change."""

        def push(snapshots: Sequence[Snapshot]) -> None:
            callback([self.from_snapshot(snapshot) for snapshot in snapshots])

        return self._store.watch(self._query(filters, order_by, limit), push)

    def create(self, tx: Transaction, fields: Mapping[str, Any], entity_id: str | None = None) -> str:
        ref = self.ref(entity_id) if entity_id else self._store.new_ref(self.collection)
        tx.set(ref, self.to_document(fields))
        return ref.id

    def update(self, tx: Transaction, entity_id: str, fields: Mapping[str, Any]) -> None:
        tx.update(self.ref(entity_id), self.to_document(fields))

    def delete(self, tx: Transaction, entity_id: str) -> None:
        tx.delete(self.ref(entity_id))
