"""Firestore-backed document store.

Adapter from the DocumentStore interface onto the google-cloud-firestore
client obtained through firebase_admin. SDK exceptions are classified into
OperationResult values; store-neutral sentinels are translated into
firestore.SERVER_TIMESTAMP and firestore.Increment.
"""

from typing import Any, Dict, List, Optional, Sequence

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from core.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_firebase_error
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

_OPERATORS = {"==": "==", "!=": "!=", "in": "in", "array_contains": "array_contains"}


def _to_firestore(data: Dict[str, Any]) -> Dict[str, Any]:
    converted = {}
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            converted[key] = firestore.SERVER_TIMESTAMP
        elif isinstance(value, Increment):
            converted[key] = firestore.Increment(value.amount)
        else:
            converted[key] = value
    return converted


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore over a Firestore client.

    Args:
        client: google.cloud.firestore.Client (see FirebaseAppProvider.firestore_client)
    """

    def __init__(self, client) -> None:
        self._client = client

    def _build_query(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: Optional[str],
        descending: bool,
        limit: Optional[int],
    ):
        query = self._client.collection(collection)
        for field_name, op, value in filters:
            query = query.where(filter=FieldFilter(field_name, _OPERATORS[op], value))
        if order_by:
            direction = (
                firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            )
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return query

    def get(self, collection: str, doc_id: str) -> OperationResult:
        try:
            snapshot = self._client.collection(collection).document(doc_id).get()
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.warning(
                "firestore_get_failed",
                collection=collection,
                doc_id=doc_id,
                error=result.message,
            )
            return result
        if not snapshot.exists:
            return OperationResult.not_found(f"{collection}/{doc_id} not found")
        return OperationResult.success(data=snapshot.to_dict() or {})

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> OperationResult:
        try:
            query = self._build_query(collection, filters, order_by, descending, limit)
            docs = [
                Document(id=snap.id, data=snap.to_dict() or {})
                for snap in query.stream()
            ]
        except KeyError as exc:
            return OperationResult.permanent_error(
                f"Unsupported filter operator: {exc}", error_code="INVALID_QUERY"
            )
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.warning(
                "firestore_query_failed", collection=collection, error=result.message
            )
            return result
        return OperationResult.success(data=docs)

    def add(self, collection: str, data: Dict[str, Any]) -> OperationResult:
        try:
            _, ref = self._client.collection(collection).add(_to_firestore(data))
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.warning(
                "firestore_add_failed", collection=collection, error=result.message
            )
            return result
        return OperationResult.success(data=ref.id)

    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> OperationResult:
        try:
            self._client.collection(collection).document(doc_id).update(
                _to_firestore(data)
            )
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.warning(
                "firestore_update_failed",
                collection=collection,
                doc_id=doc_id,
                error=result.message,
            )
            return result
        return OperationResult.success()

    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> OperationResult:
        try:
            self._client.collection(collection).document(doc_id).set(
                _to_firestore(data), merge=merge
            )
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.warning(
                "firestore_set_failed",
                collection=collection,
                doc_id=doc_id,
                error=result.message,
            )
            return result
        return OperationResult.success()

    def delete(self, collection: str, doc_id: str) -> OperationResult:
        try:
            self._client.collection(collection).document(doc_id).delete()
        except Exception as exc:
            return classify_firebase_error(exc)
        return OperationResult.success()

    def batch(self) -> "FirestoreWriteBatch":
        return FirestoreWriteBatch(self._client)

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
        query = self._build_query(collection, filters, order_by, descending, limit)

        def _on_snapshot(_snapshots, changes, _read_time) -> None:
            try:
                converted: List[DocumentChange] = [
                    DocumentChange(
                        type=change.type.name.lower(),
                        document=Document(
                            id=change.document.id,
                            data=change.document.to_dict() or {},
                        ),
                    )
                    for change in changes
                ]
                if converted:
                    on_change(converted)
            except Exception as exc:
                on_error(exc)

        watch = query.on_snapshot(_on_snapshot)
        stopped = False

        def unsubscribe() -> None:
            nonlocal stopped
            if stopped:
                return
            stopped = True
            watch.unsubscribe()

        return unsubscribe


class FirestoreWriteBatch(WriteBatch):
    """Wraps firestore WriteBatch; commit never raises."""

    def __init__(self, client) -> None:
        self._client = client
        self._batch = client.batch()
        self._size = 0

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ref = self._client.collection(collection).document(doc_id)
        self._batch.update(ref, _to_firestore(data))
        self._size += 1

    def set(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> None:
        ref = self._client.collection(collection).document(doc_id)
        self._batch.set(ref, _to_firestore(data), merge=merge)
        self._size += 1

    def commit(self) -> OperationResult:
        try:
            self._batch.commit()
        except Exception as exc:
            result = classify_firebase_error(exc)
            logger.error(
                "firestore_batch_commit_failed",
                writes=self._size,
                error=result.message,
                exc_info=True,
            )
            return result
        return OperationResult.success(data=self._size)

    @property
    def size(self) -> int:
        return self._size
