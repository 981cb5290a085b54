"""Unit tests for the document-store-backed idempotency cache."""

import json
import time
from unittest.mock import MagicMock

import pytest

from infrastructure.idempotency import FirestoreCache
from infrastructure.operations import OperationResult


@pytest.mark.unit
class TestFirestoreCache:
    """Tests for FirestoreCache over MemoryDocumentStore."""

    def test_round_trip(self, memory_store):
        """Entries are stored as JSON with expiry metadata."""
        cache = FirestoreCache(memory_store, collection="trigger_idempotency", ttl_seconds=60)

        cache.set("fanout:order.created:abc", {"outcome": {"event_id": "e1"}})

        stored = memory_store.get("trigger_idempotency", "fanout:order.created:abc").data
        assert json.loads(stored["response_json"]) == {"outcome": {"event_id": "e1"}}
        assert stored["expires_at"] == stored["created_at"] + 60
        assert cache.get("fanout:order.created:abc") == {"outcome": {"event_id": "e1"}}

    def test_expired_entry_is_a_miss(self, memory_store):
        """Entries past expires_at are ignored."""
        memory_store.set(
            "trigger_idempotency",
            "k",
            {"response_json": "{}", "expires_at": int(time.time()) - 1, "created_at": 0},
        )

        assert FirestoreCache(memory_store).get("k") is None

    def test_corrupt_entry_is_a_miss(self, memory_store):
        """Unparseable JSON is treated as a miss."""
        memory_store.set(
            "trigger_idempotency",
            "k",
            {"response_json": "{oops", "expires_at": int(time.time()) + 60, "created_at": 0},
        )

        assert FirestoreCache(memory_store).get("k") is None

    def test_store_failure_is_a_miss(self):
        """A failed read never blocks the caller."""
        store = MagicMock()
        store.get.return_value = OperationResult.transient_error("unavailable")

        assert FirestoreCache(store).get("k") is None

    def test_unserializable_response_is_not_stored(self, memory_store):
        """Responses that are not JSON-serializable are skipped."""
        FirestoreCache(memory_store).set("k", {"when": object()})

        assert memory_store.query("trigger_idempotency").data == []

    def test_clear(self, memory_store):
        """clear() deletes every entry."""
        cache = FirestoreCache(memory_store)
        cache.set("a", {})
        cache.set("b", {})

        cache.clear()

        assert memory_store.query("trigger_idempotency").data == []
