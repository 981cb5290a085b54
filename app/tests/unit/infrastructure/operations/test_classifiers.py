"""Unit tests for error classifiers.

Tests cover:
- Firebase Admin SDK error classification
- google.api_core (Firestore) error classification
- requests error classification for the Expo push API
- Retry-After header extraction
"""

from unittest.mock import Mock

import pytest
import requests
from firebase_admin import exceptions as firebase_exceptions
from google.api_core import exceptions as google_exceptions

from infrastructure.operations.classifiers import (
    classify_firebase_error,
    classify_http_error,
)
from infrastructure.operations.status import OperationStatus


def _http_error(status_code, headers=None):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    return requests.HTTPError(f"{status_code} error", response=response)


@pytest.mark.unit
class TestClassifyFirebaseError:
    """Tests for classify_firebase_error() function."""

    @pytest.mark.parametrize(
        "code,status",
        [
            (firebase_exceptions.NOT_FOUND, OperationStatus.NOT_FOUND),
            (firebase_exceptions.UNAUTHENTICATED, OperationStatus.UNAUTHORIZED),
            (firebase_exceptions.PERMISSION_DENIED, OperationStatus.UNAUTHORIZED),
            (firebase_exceptions.UNAVAILABLE, OperationStatus.TRANSIENT_ERROR),
            (firebase_exceptions.INVALID_ARGUMENT, OperationStatus.PERMANENT_ERROR),
        ],
    )
    def test_firebase_codes(self, code, status):
        """FirebaseError codes map to operation statuses."""
        result = classify_firebase_error(firebase_exceptions.FirebaseError(code, "failed"))

        assert result.status == status

    def test_resource_exhausted_has_retry_after(self):
        """Quota errors suggest a retry delay."""
        result = classify_firebase_error(
            firebase_exceptions.FirebaseError(firebase_exceptions.RESOURCE_EXHAUSTED, "quota")
        )

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.retry_after == 60

    @pytest.mark.parametrize(
        "exc,status",
        [
            (google_exceptions.NotFound("missing"), OperationStatus.NOT_FOUND),
            (google_exceptions.PermissionDenied("no"), OperationStatus.UNAUTHORIZED),
            (google_exceptions.TooManyRequests("slow down"), OperationStatus.TRANSIENT_ERROR),
            (google_exceptions.ServiceUnavailable("down"), OperationStatus.TRANSIENT_ERROR),
            (google_exceptions.InternalServerError("oops"), OperationStatus.TRANSIENT_ERROR),
            (google_exceptions.BadRequest("bad"), OperationStatus.PERMANENT_ERROR),
        ],
    )
    def test_firestore_errors(self, exc, status):
        """google.api_core errors map to operation statuses."""
        assert classify_firebase_error(exc).status == status

    def test_unknown_error_is_transient(self):
        """Unrecognised exceptions are treated as connection problems."""
        result = classify_firebase_error(ConnectionResetError("reset"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"


@pytest.mark.unit
class TestClassifyHttpError:
    """Tests for classify_http_error() function."""

    def test_429_with_retry_after(self):
        """429 honours the Retry-After header."""
        result = classify_http_error(_http_error(429, {"retry-after": "120"}))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 120

    def test_429_with_malformed_retry_after(self):
        """A malformed header falls back to 60 seconds."""
        result = classify_http_error(_http_error(429, {"retry-after": "soon"}))

        assert result.retry_after == 60

    @pytest.mark.parametrize(
        "status_code,status,error_code",
        [
            (401, OperationStatus.UNAUTHORIZED, "UNAUTHORIZED"),
            (403, OperationStatus.UNAUTHORIZED, "UNAUTHORIZED"),
            (503, OperationStatus.TRANSIENT_ERROR, "SERVER_ERROR"),
            (400, OperationStatus.PERMANENT_ERROR, "HTTP_ERROR"),
        ],
    )
    def test_status_codes(self, status_code, status, error_code):
        """HTTP status codes map to operation statuses."""
        result = classify_http_error(_http_error(status_code))

        assert result.status == status
        assert result.error_code == error_code

    @pytest.mark.parametrize(
        "exc", [requests.Timeout("timed out"), requests.ConnectionError("refused")]
    )
    def test_network_errors_are_transient(self, exc):
        """Timeouts and connection failures are retryable."""
        result = classify_http_error(exc)

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"

    def test_error_without_response(self):
        """Errors without a response are permanent unknowns."""
        result = classify_http_error(requests.RequestException("weird"))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNKNOWN_ERROR"
