"""In-memory document store.

Backs the unit tests and local development. Live query subscriptions are
re-evaluated after every write so ordering and ``limit`` windows behave like
the hosted store: a document outside the window produces no change until it
enters it.
"""

import copy
import itertools
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.persistence.store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentChange,
    DocumentStore,
    Filter,
    Increment,
    OnChange,
    OnError,
    Unsubscribe,
    WriteBatch,
)

logger = get_module_logger()

_id_counter = itertools.count(1)


def _matches(data: Dict[str, Any], filters: Sequence[Filter]) -> bool:
    for field_name, op, value in filters:
        current = data.get(field_name)
        if op == "==":
            ok = current == value
        elif op == "!=":
            ok = current != value
        elif op == "in":
            ok = current in value
        elif op == "array_contains":
            ok = isinstance(current, list) and value in current
        else:
            raise ValueError(f"Unsupported filter operator: {op}")
        if not ok:
            return False
    return True


def _resolve(current: Any, value: Any, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, Increment):
        return (current or 0) + value.amount
    return value


class _Subscription:
    def __init__(self, collection, filters, order_by, descending, limit, on_change, on_error):
        self.collection = collection
        self.filters = list(filters)
        self.order_by = order_by
        self.descending = descending
        self.limit = limit
        self.on_change = on_change
        self.on_error = on_error
        self.window: Dict[str, Dict[str, Any]] = {}
        self.active = True


class MemoryDocumentStore(DocumentStore):
    """Thread-safe dict-backed DocumentStore.

    Args:
        initial: Optional ``{collection: {doc_id: data}}`` seed data.
    """

    def __init__(self, initial: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = copy.deepcopy(
            initial or {}
        )
        self._lock = threading.RLock()
        self._subscriptions: List[_Subscription] = []
        self.commit_count = 0

    # Reads

    def get(self, collection: str, doc_id: str) -> OperationResult:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            if data is None:
                return OperationResult.not_found(f"{collection}/{doc_id} not found")
            return OperationResult.success(data=copy.deepcopy(data))

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> OperationResult:
        try:
            with self._lock:
                docs = self._run_query(collection, filters, order_by, descending, limit)
        except ValueError as exc:
            return OperationResult.permanent_error(str(exc), error_code="INVALID_QUERY")
        return OperationResult.success(data=docs)

    def _run_query(self, collection, filters, order_by, descending, limit) -> List[Document]:
        docs = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
            if _matches(data, filters)
        ]
        if order_by:
            present = [d for d in docs if d.data.get(order_by) is not None]
            present.sort(key=lambda d: d.data[order_by], reverse=descending)
            docs = present
        if limit is not None:
            docs = docs[:limit]
        return docs

    # Writes

    def add(self, collection: str, data: Dict[str, Any]) -> OperationResult:
        doc_id = f"doc-{next(_id_counter)}"
        with self._lock:
            now = datetime.now(timezone.utc)
            self._collections.setdefault(collection, {})[doc_id] = {
                k: _resolve(None, v, now) for k, v in data.items()
            }
        self._notify(collection)
        return OperationResult.success(data=doc_id)

    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> OperationResult:
        batch = self.batch()
        batch.update(collection, doc_id, data)
        result = batch.commit()
        if result.is_success:
            return OperationResult.success()
        return result

    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> OperationResult:
        batch = self.batch()
        batch.set(collection, doc_id, data, merge=merge)
        return batch.commit()

    def delete(self, collection: str, doc_id: str) -> OperationResult:
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)
        self._notify(collection)
        return OperationResult.success()

    def batch(self) -> "MemoryWriteBatch":
        return MemoryWriteBatch(self)

    def _apply(self, writes: List[Tuple[str, str, str, Dict[str, Any], bool]]) -> OperationResult:
        with self._lock:
            for kind, collection, doc_id, _, _ in writes:
                if kind == "update" and doc_id not in self._collections.get(collection, {}):
                    return OperationResult.not_found(
                        f"No document to update: {collection}/{doc_id}"
                    )
            now = datetime.now(timezone.utc)
            touched = set()
            for kind, collection, doc_id, data, merge in writes:
                docs = self._collections.setdefault(collection, {})
                base = docs.get(doc_id, {}) if (kind == "update" or merge) else {}
                updated = dict(base)
                for key, value in data.items():
                    updated[key] = _resolve(base.get(key), value, now)
                docs[doc_id] = updated
                touched.add(collection)
            self.commit_count += 1
        for collection in touched:
            self._notify(collection)
        return OperationResult.success(data=len(writes))

    # Live queries

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
        sub = _Subscription(collection, filters, order_by, descending, limit, on_change, on_error)
        with self._lock:
            self._subscriptions.append(sub)
        self._evaluate(sub)

        def unsubscribe() -> None:
            with self._lock:
                sub.active = False
                if sub in self._subscriptions:
                    self._subscriptions.remove(sub)

        return unsubscribe

    def fail_subscriptions(self, exc: Exception) -> None:
        """Deliver ``exc`` to every active listener's error callback."""
        for sub in list(self._subscriptions):
            if sub.active:
                sub.on_error(exc)

    def _notify(self, collection: str) -> None:
        for sub in list(self._subscriptions):
            if sub.active and sub.collection == collection:
                self._evaluate(sub)

    def _evaluate(self, sub: _Subscription) -> None:
        try:
            with self._lock:
                docs = self._run_query(
                    sub.collection, sub.filters, sub.order_by, sub.descending, sub.limit
                )
        except ValueError as exc:
            sub.on_error(exc)
            return
        current = {d.id: d for d in docs}
        changes: List[DocumentChange] = []
        for doc in docs:
            previous = sub.window.get(doc.id)
            if previous is None:
                changes.append(DocumentChange(type="added", document=doc))
            elif previous != doc.data:
                changes.append(DocumentChange(type="modified", document=doc))
        for doc_id, data in sub.window.items():
            if doc_id not in current:
                changes.append(
                    DocumentChange(type="removed", document=Document(id=doc_id, data=data))
                )
        sub.window = {d.id: d.data for d in docs}
        if changes and sub.active:
            sub.on_change(changes)


class MemoryWriteBatch(WriteBatch):
    """WriteBatch applied under the store lock in one step."""

    def __init__(self, store: MemoryDocumentStore):
        self._store = store
        self._writes: List[Tuple[str, str, str, Dict[str, Any], bool]] = []

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._writes.append(("update", collection, doc_id, dict(data), True))

    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> None:
        self._writes.append(("set", collection, doc_id, dict(data), merge))

    def commit(self) -> OperationResult:
        result = self._store._apply(self._writes)
        if not result.is_success:
            logger.warning("memory_batch_commit_failed", error=result.message)
        return result

    @property
    def size(self) -> int:
        return len(self._writes)
