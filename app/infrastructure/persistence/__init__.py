"""Persistence layer: document store interface and backends.

    from infrastructure.persistence import DocumentStore, SERVER_TIMESTAMP, Increment

Backends:
    FirestoreDocumentStore: hosted Firestore through firebase_admin
    MemoryDocumentStore: in-process store for tests and local development
"""

from infrastructure.persistence.firestore import FirestoreDocumentStore
from infrastructure.persistence.memory import MemoryDocumentStore
from infrastructure.persistence.store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentChange,
    DocumentStore,
    Filter,
    Increment,
    Unsubscribe,
    WriteBatch,
)

__all__ = [
    "DocumentStore",
    "WriteBatch",
    "Document",
    "DocumentChange",
    "Filter",
    "Increment",
    "SERVER_TIMESTAMP",
    "Unsubscribe",
    "FirestoreDocumentStore",
    "MemoryDocumentStore",
]
