"""Django ORM implementation of the DocumentStore.

Each collection maps to one table (see sanctuary.models.COLLECTION_MODELS).
Transaction bodies read outside the database transaction; the commit step
locks and re-checks every version that was read, then applies the buffered
writes inside ``transaction.atomic()``.
"""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import partial
from typing import Any

from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, OperationalError, transaction
from django.db.models import F, Model, QuerySet
from django.utils import timezone

from sanctuary.conf import app_setting
from sanctuary.models import COLLECTION_MODELS
from sanctuary.stores.interfaces import (
    DocumentRef,
    Query,
    Snapshot,
    StoreError,
    documents_changed,
)
from sanctuary.stores.transaction import (
    DELETE,
    UPDATE,
    BufferedTransaction,
    CommitConflict,
    OptimisticStore,
    Write,
    resolve_server_timestamps,
)

logger = logging.getLogger(__name__)

_LOOKUPS = {
    "==": "exact",
    "<": "lt",
    "<=": "lte",
    ">": "gt",
    ">=": "gte",
    "in": "in",
}
_RESERVED = ("id", "version")


@contextmanager
def database_errors() -> Iterator[None]:
    """Re-raise Django database errors as StoreError codes."""
    try:
        yield
    except OperationalError as exc:
        raise StoreError(StoreError.UNAVAILABLE, str(exc)) from exc
    except IntegrityError as exc:
        raise StoreError(StoreError.ABORTED, str(exc)) from exc
    except DatabaseError as exc:
        raise StoreError(StoreError.INTERNAL, str(exc)) from exc


class DjangoDocumentStore(OptimisticStore):
    """Relational-database-backed document store using Django ORM."""

    def __init__(
        self,
        models: Mapping[str, type[Model]] | None = None,
        *,
        using: str = DEFAULT_DB_ALIAS,
        max_attempts: int | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            max_attempts=max_attempts or app_setting("TRANSACTION_MAX_ATTEMPTS"),
            timeout=timeout if timeout is not None else app_setting("TRANSACTION_TIMEOUT"),
        )
        self._models = dict(models if models is not None else COLLECTION_MODELS)
        self.using = using

    def _model(self, collection: str) -> type[Model]:
        try:
            return self._models[collection]
        except KeyError:
            raise StoreError(StoreError.INVALID_ARGUMENT, f"Unknown collection {collection!r}") from None

    def _rows(self, collection: str) -> QuerySet:
        return self._model(collection)._default_manager.using(self.using)

    @staticmethod
    def _field_names(model: type[Model]) -> set[str]:
        return {f.attname for f in model._meta.concrete_fields if f.attname not in _RESERVED}

    def _columns(self, model: type[Model], data: Mapping[str, Any], complete: bool = False) -> dict[str, Any]:
        names = self._field_names(model)
        unknown = set(data) - names
        if unknown:
            raise StoreError(
                StoreError.INVALID_ARGUMENT,
                f"Unknown fields for {model.__name__}: {', '.join(sorted(unknown))}",
            )
        if not complete:
            return dict(data)
        # A set replaces the whole document: omitted fields fall back to defaults.
        instance = model(**data)
        return {name: getattr(instance, name) for name in names}

    @staticmethod
    def _to_data(row: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in row.items() if key not in _RESERVED}

    def _load(self, ref: DocumentRef) -> tuple[dict[str, Any] | None, int | None]:
        with database_errors():
            row = self._rows(ref.collection).filter(pk=ref.id).values().first()
        if row is None:
            return None, None
        return self._to_data(row), row["version"]

    def _commit(self, tx: BufferedTransaction) -> frozenset[DocumentRef]:
        now = timezone.now()
        with database_errors(), transaction.atomic(using=self.using):
            self._check_reads(tx.reads)
            for ref, write in tx.writes.items():
                self._apply(ref, write, tx.reads.get(ref), now)
        return frozenset(tx.writes)

    def _check_reads(self, reads: Mapping[DocumentRef, int | None]) -> None:
        expected: dict[str, dict[str, int | None]] = defaultdict(dict)
        for ref, version in reads.items():
            expected[ref.collection][ref.id] = version
        for collection, versions in expected.items():
            current = dict(
                self._rows(collection)
                .select_for_update()
                .filter(pk__in=list(versions))
                .values_list("pk", "version")
            )
            for doc_id, version in versions.items():
                if current.get(doc_id) != version:
                    raise CommitConflict(DocumentRef(collection, doc_id))

    def _apply(self, ref: DocumentRef, write: Write, read_version: int | None, now) -> None:
        model = self._model(ref.collection)
        rows = self._rows(ref.collection).filter(pk=ref.id)
        if read_version is not None:
            rows = rows.filter(version=read_version)

        if write.kind == DELETE:
            rows.delete()
            return

        data = resolve_server_timestamps(write.data, now)
        if write.kind == UPDATE:
            if rows.update(**self._columns(model, data), version=F("version") + 1) == 0:
                if read_version is not None:
                    raise CommitConflict(ref)
                raise StoreError(StoreError.NOT_FOUND, f"No document to update: {ref}")
            return

        columns = self._columns(model, data, complete=True)
        if rows.update(**columns, version=F("version") + 1) == 0:
            if read_version is not None:
                raise CommitConflict(ref)
            self._insert(model, ref, columns)

    def _insert(self, model: type[Model], ref: DocumentRef, columns: Mapping[str, Any]) -> None:
        # bulk_create skips model signals; change notification happens on commit.
        try:
            with transaction.atomic(using=self.using):
                self._rows(ref.collection).bulk_create([model(pk=ref.id, version=1, **columns)])
        except IntegrityError:
            # Another transaction created the document after this one read it.
            if self._rows(ref.collection).filter(pk=ref.id).exists():
                raise CommitConflict(ref) from None
            raise

    def _changed(self, refs: frozenset[DocumentRef]) -> None:
        transaction.on_commit(
            partial(documents_changed.send, sender=type(self), store=self, refs=refs),
            using=self.using,
        )

    def get(self, ref: DocumentRef) -> Snapshot:
        data, version = self._load(ref)
        return Snapshot(ref=ref, data=data, version=version)

    def query(self, query: Query) -> list[Snapshot]:
        model = self._model(query.collection)
        rows = self._rows(query.collection)
        for condition in query.filters:
            self._columns(model, {condition.field: None})
            if condition.op == "!=":
                rows = rows.exclude(**{condition.field: condition.value})
            else:
                rows = rows.filter(**{f"{condition.field}__{_LOOKUPS[condition.op]}": condition.value})
        if query.order_by:
            rows = rows.order_by(*[("-" if o.descending else "") + o.field for o in query.order_by])
        if query.limit is not None:
            rows = rows[: query.limit]
        with database_errors():
            results = list(rows.values())
        return [
            Snapshot(
                ref=DocumentRef(query.collection, row["id"]),
                data=self._to_data(row),
                version=row["version"],
            )
            for row in results
        ]

    def watch(
        self, query: Query, callback: Callable[[Sequence[Snapshot]], None]
    ) -> Callable[[], None]:
        def receiver(sender, refs=frozenset(), store=None, **kwargs):
            if store is not None and store is not self:
                return
            if any(ref.collection == query.collection for ref in refs):
                callback(self.query(query))

        documents_changed.connect(receiver, weak=False)
        callback(self.query(query))

        def unsubscribe() -> None:
            documents_changed.disconnect(receiver)

        return unsubscribe
