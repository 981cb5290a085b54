"""Document store interface consumed by the fan-out and the inbox queue.

The store is treated as an opaque document database with collection/document
semantics: single reads, filtered queries, single-document updates, atomic
write batches and live query subscriptions. Adapters translate the
store-neutral field sentinels below into their backend's equivalents.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence, Tuple

from infrastructure.operations import OperationResult

# (field, operator, value); operators supported: "==", "!=", "in", "array_contains"
Filter = Tuple[str, str, Any]

ChangeType = Literal["added", "modified", "removed"]


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()
"""Sentinel replaced by the backend's commit time."""


@dataclass(frozen=True)
class Increment:
    """Sentinel that adds ``amount`` to the stored numeric field (missing = 0)."""

    amount: int = 1


@dataclass
class Document:
    """A document snapshot: id plus field data."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DocumentChange:
    """One change delivered by a live query subscription."""

    type: ChangeType
    document: Document


OnChange = Callable[[List[DocumentChange]], None]
OnError = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class WriteBatch(ABC):
    """Staged writes applied atomically by a single commit."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Stage a partial update of an existing document."""

    @abstractmethod
    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> None:
        """Stage a create-or-replace (or merge) of a document."""

    @abstractmethod
    def commit(self) -> OperationResult:
        """Apply every staged write at once.

        Returns:
            OperationResult.success(data=<write count>) or the classified error.
            Never raises.
        """

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of staged writes."""


class DocumentStore(ABC):
    """Abstract document store.

    Read operations return OperationResult so callers can tell a missing
    document (NOT_FOUND) from a failed lookup without catching SDK errors.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> OperationResult:
        """Read one document.

        Returns:
            success(data=dict) | NOT_FOUND | error result
        """

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> OperationResult:
        """Run a filtered query.

        Returns:
            success(data=List[Document]) | error result
        """

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> OperationResult:
        """Create a document with a generated id.

        Returns:
            success(data=<new id>) | error result
        """

    @abstractmethod
    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> OperationResult:
        """Partially update an existing document (NOT_FOUND if missing)."""

    @abstractmethod
    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> OperationResult:
        """Create or replace a document (merge=True keeps unspecified fields)."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> OperationResult:
        """Delete a document; deleting a missing document succeeds."""

    @abstractmethod
    def batch(self) -> WriteBatch:
        """Start a new atomic write batch."""

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        filters: Sequence[Filter],
        on_change: OnChange,
        on_error: OnError,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Unsubscribe:
        """Listen to a live query.

        ``on_change`` receives the changes of each snapshot, the first one
        listing every matching document as ``added``. Callbacks may run on a
        backend thread.

        Returns:
            A callable that stops the subscription; calling it twice is a no-op.
        """
