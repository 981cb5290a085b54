"""Unit tests for the Firestore document store adapter.

Tests cover:
- get/query/add/update against a mocked Firestore client
- Translation of SERVER_TIMESTAMP and Increment sentinels
- Error classification into OperationResult
- Batch commit outcomes
- Snapshot listener conversion and unsubscribe
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from infrastructure.operations import OperationStatus
from infrastructure.persistence import SERVER_TIMESTAMP, Increment
from infrastructure.persistence.firestore import FirestoreDocumentStore


def _snapshot(doc_id, data, exists=True):
    return SimpleNamespace(id=doc_id, exists=exists, to_dict=lambda: data)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def store(client):
    return FirestoreDocumentStore(client)


@pytest.mark.unit
class TestReads:
    """Tests for get() and query()."""

    def test_get_existing_document(self, store, client):
        """Existing documents return their data."""
        document = client.collection.return_value.document.return_value
        document.get.return_value = _snapshot("U1", {"badgeCount": 2})

        result = store.get("users", "U1")

        assert result.is_success
        assert result.data == {"badgeCount": 2}
        client.collection.assert_called_with("users")

    def test_get_missing_document(self, store, client):
        """A snapshot that does not exist is NOT_FOUND."""
        document = client.collection.return_value.document.return_value
        document.get.return_value = _snapshot("U1", None, exists=False)

        assert store.get("users", "U1").status == OperationStatus.NOT_FOUND

    def test_get_unavailable_is_transient(self, store, client):
        """Server errors are classified as retryable."""
        document = client.collection.return_value.document.return_value
        document.get.side_effect = google_exceptions.ServiceUnavailable("down")

        assert store.get("users", "U1").status == OperationStatus.TRANSIENT_ERROR

    def test_query_applies_filters_order_and_limit(self, store, client):
        """The query chain mirrors the arguments."""
        collection = client.collection.return_value
        limited = collection.where.return_value.order_by.return_value.limit.return_value
        limited.stream.return_value = [_snapshot("n1", {"read": False})]

        result = store.query(
            "user_notifications",
            filters=[("userId", "==", "U1")],
            order_by="createdAt",
            descending=True,
            limit=5,
        )

        assert [doc.id for doc in result.data] == ["n1"]
        collection.where.return_value.order_by.assert_called_once_with(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        collection.where.return_value.order_by.return_value.limit.assert_called_once_with(5)

    def test_query_unknown_operator(self, store):
        """Operators outside the supported set are a permanent error."""
        result = store.query("users", filters=[("age", ">=", 3)])

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "INVALID_QUERY"


@pytest.mark.unit
class TestWrites:
    """Tests for add(), update() and batches."""

    def test_add_returns_new_id(self, store, client):
        """add() returns the generated document id."""
        client.collection.return_value.add.return_value = (None, SimpleNamespace(id="abc"))

        assert store.add("user_notifications", {"read": False}).data == "abc"

    def test_update_translates_sentinels(self, store, client):
        """Store-neutral sentinels become Firestore transforms."""
        document = client.collection.return_value.document.return_value

        result = store.update(
            "users", "U1", {"badgeCount": Increment(1), "updatedAt": SERVER_TIMESTAMP}
        )

        assert result.is_success
        written = document.update.call_args.args[0]
        assert written["updatedAt"] is firestore.SERVER_TIMESTAMP
        assert isinstance(written["badgeCount"], firestore.Increment)

    def test_update_missing_document(self, store, client):
        """Updating a missing document is NOT_FOUND."""
        document = client.collection.return_value.document.return_value
        document.update.side_effect = google_exceptions.NotFound("no document")

        assert store.update("users", "ghost", {"badgeCount": 0}).status == OperationStatus.NOT_FOUND

    def test_batch_commit(self, store, client):
        """Staged writes are committed once and counted."""
        batch = store.batch()
        batch.update("users", "U1", {"badgeCount": Increment(1)})
        batch.update("users", "U2", {"badgeCount": Increment(1)})

        result = batch.commit()

        assert result.is_success
        assert result.data == 2
        client.batch.return_value.commit.assert_called_once()

    def test_batch_commit_failure(self, store, client):
        """A failed commit is returned, not raised."""
        client.batch.return_value.commit.side_effect = google_exceptions.Aborted("contention")
        batch = store.batch()
        batch.update("users", "U1", {"badgeCount": Increment(1)})

        result = batch.commit()

        assert not result.is_success


@pytest.mark.unit
class TestSubscribe:
    """Tests for subscribe()."""

    def test_changes_are_converted(self, store, client):
        """Snapshot changes reach on_change as DocumentChange values."""
        query = client.collection.return_value.where.return_value
        changes = []

        unsubscribe = store.subscribe(
            "user_notifications",
            [("userId", "==", "U1")],
            on_change=changes.append,
            on_error=lambda exc: None,
        )
        listener = query.on_snapshot.call_args.args[0]
        listener(
            [],
            [
                SimpleNamespace(
                    type=SimpleNamespace(name="ADDED"),
                    document=_snapshot("n1", {"title": "Hola"}),
                )
            ],
            None,
        )

        assert changes[0][0].type == "added"
        assert changes[0][0].document.id == "n1"

        unsubscribe()
        unsubscribe()
        query.on_snapshot.return_value.unsubscribe.assert_called_once()

    def test_listener_errors_go_to_on_error(self, store, client):
        """A failing change handler reports through on_error."""
        query = client.collection.return_value
        errors = []

        def broken(changes):
            raise RuntimeError("boom")

        store.subscribe("user_notifications", [], on_change=broken, on_error=errors.append)
        listener = query.on_snapshot.call_args.args[0]
        listener(
            [],
            [SimpleNamespace(type=SimpleNamespace(name="ADDED"), document=_snapshot("n1", {}))],
            None,
        )

        assert isinstance(errors[0], RuntimeError)
