"""Store interfaces (document store pattern).

Stores must be swappable. Repositories depend on these types only, never on
a concrete backend.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from django.dispatch import Signal

T = TypeVar("T")

# Sent after a transaction commits. Receivers get ``store`` and ``refs``
# (frozenset of DocumentRef). Admin edits send it too, see sanctuary.admin.
documents_changed = Signal()


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP: Any = _ServerTimestamp()
"""Sentinel resolved to the commit time by the store."""


class StoreError(Exception):
    """Low-level store failure carrying a store-specific code."""

    PERMISSION_DENIED = "permission-denied"
    UNAUTHENTICATED = "unauthenticated"
    UNAVAILABLE = "unavailable"
    DEADLINE_EXCEEDED = "deadline-exceeded"
    RESOURCE_EXHAUSTED = "resource-exhausted"
    NOT_FOUND = "not-found"
    ALREADY_EXISTS = "already-exists"
    ABORTED = "aborted"
    INVALID_ARGUMENT = "invalid-argument"
    FAILED_PRECONDITION = "failed-precondition"
    INTERNAL = "internal"

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class DocumentRef:
    """Address of a document: collection name plus opaque id."""

    collection: str
    id: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.id}"


@dataclass(frozen=True)
class Snapshot:
    """A document as read at one point in time. ``data`` is None if absent."""

    ref: DocumentRef
    data: dict[str, Any] | None
    version: int | None = None

    @property
    def exists(self) -> bool:
        return self.data is not None

    @property
    def id(self) -> str:
        return self.ref.id


FILTER_OPERATORS = ("==", "!=", "<", "<=", ">", ">=", "in")


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPERATORS:
            raise StoreError(StoreError.INVALID_ARGUMENT, f"Unsupported operator {self.op!r}")


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Query:
    """Non-transactional collection query."""

    collection: str
    filters: tuple[Filter, ...] = field(default_factory=tuple)
    order_by: tuple[OrderBy, ...] = field(default_factory=tuple)
    limit: int | None = None


class Transaction(ABC):
    """Handle passed to a transaction body.

    Reads through the handle take part in conflict detection. Writes are
    buffered and applied atomically when the body returns.
    """

    @abstractmethod
    def get(self, ref: DocumentRef) -> Snapshot:
        """Read a document, observing this transaction's own writes."""
        ...

    @abstractmethod
    def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        """Create or overwrite a document."""
        ...

    @abstractmethod
    def update(self, ref: DocumentRef, fields: Mapping[str, Any]) -> None:
        """Merge fields into an existing document."""
        ...

    @abstractmethod
    def delete(self, ref: DocumentRef) -> None:
        """Delete a document if it exists."""
        ...


class DocumentStore(ABC):
    """Interface for document persistence with atomic transactions."""

    @abstractmethod
    def new_ref(self, collection: str) -> DocumentRef:
        """Return a reference with a freshly assigned id."""
        ...

    @abstractmethod
    def run_transaction(self, body: Callable[[Transaction], T]) -> T:
        """Run ``body`` atomically, re-running it on commit conflicts.

        The body must not have side effects outside the transaction handle.
        """
        ...

    @abstractmethod
    def get(self, ref: DocumentRef) -> Snapshot:
        """Read a document outside any transaction."""
        ...

    @abstractmethod
    def query(self, query: Query) -> list[Snapshot]:
        """Return the documents matching ``query``."""
        ...

    @abstractmethod
    def watch(
        self, query: Query, callback: Callable[[Sequence[Snapshot]], None]
    ) -> Callable[[], None]:
        """Push fresh results to ``callback`` now and after every change.

        Returns a function that cancels the subscription.
        """
        ...
