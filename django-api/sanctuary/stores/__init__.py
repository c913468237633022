from sanctuary.stores.interfaces import (
    SERVER_TIMESTAMP,
    DocumentRef,
    DocumentStore,
    Filter,
    OrderBy,
    Query,
    Snapshot,
    StoreError,
    Transaction,
    documents_changed,
)
from sanctuary.stores.memory_store import MemoryDocumentStore

__all__ = [
    "SERVER_TIMESTAMP",
    "DocumentRef",
    "DocumentStore",
    "Filter",
    "OrderBy",
    "Query",
    "Snapshot",
    "StoreError",
    "Transaction",
    "documents_changed",
    "MemoryDocumentStore",
]
