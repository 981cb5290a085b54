"""Firestore idempotency cache implementation."""

import json
import time
from typing import Any, Dict, Optional

from core.logging import get_module_logger
from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.operations import OperationStatus
from infrastructure.persistence.store import DocumentStore

logger = get_module_logger()


class FirestoreCache(IdempotencyCache):
    """Document-store-backed idempotency cache shared by all instances.

    Each entry is one document in ``collection``:
    - id: idempotency key
    - response_json: serialized result
    - expires_at: epoch seconds (also usable as a Firestore TTL policy field)
    - created_at: epoch seconds

    Cache failures are logged and treated as a miss; they never block a trigger.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str = "trigger_idempotency",
        ttl_seconds: int = 3600,
    ):
        self.store = store
        self.collection = collection
        self.ttl_seconds = ttl_seconds
        logger.info(
            "initialized_firestore_idempotency_cache",
            collection=collection,
            ttl_seconds=ttl_seconds,
        )

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        result = self.store.get(self.collection, key)
        if result.status == OperationStatus.NOT_FOUND:
            logger.debug("idempotency_cache_miss", key=key)
            return None
        if not result.is_success:
            logger.warning("idempotency_cache_get_failed", key=key, error=result.message)
            return None

        item = result.data or {}
        if item.get("expires_at", 0) <= int(time.time()):
            logger.debug("idempotency_cache_expired", key=key)
            return None
        try:
            cached = json.loads(item["response_json"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("idempotency_cache_corrupt_entry", key=key, error=str(e))
            return None
        logger.debug("idempotency_cache_hit", key=key)
        return cached

    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds
        try:
            response_json = json.dumps(response)
        except (TypeError, ValueError) as e:
            logger.error("idempotency_cache_serialization_error", key=key, error=str(e))
            return

        now = int(time.time())
        result = self.store.set(
            self.collection,
            key,
            {
                "response_json": response_json,
                "expires_at": now + ttl_seconds,
                "created_at": now,
            },
        )
        if result.is_success:
            logger.debug("idempotency_cache_set_success", key=key, ttl_seconds=ttl_seconds)
        else:
            logger.error("idempotency_cache_set_failed", key=key, error=result.message)

    def clear(self) -> None:
        logger.warning("idempotency_cache_clear_called", backend="firestore")
        result = self.store.query(self.collection)
        if not result.is_success:
            logger.error("idempotency_cache_clear_query_failed", error=result.message)
            return
        for doc in result.data:
            self.store.delete(self.collection, doc.id)
        logger.info("idempotency_cache_cleared", items_deleted=len(result.data))

    def get_stats(self) -> Dict[str, Any]:
        return {
            "backend": "firestore",
            "collection": self.collection,
            "ttl_seconds": self.ttl_seconds,
        }
