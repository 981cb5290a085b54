"""Error classifiers for adapter exceptions.

Converts exceptions raised by the Firebase Admin SDK, the Firestore client
and the requests-based Expo client into OperationResult objects.

Key Functions:
- classify_firebase_error(): firebase_admin / google.api_core errors → OperationResult
- classify_http_error(): requests errors → OperationResult

Usage:
    from infrastructure.operations import classify_firebase_error

    try:
        snapshot = client.collection("users").document(uid).get()
    except Exception as exc:
        return classify_firebase_error(exc)
"""

from typing import Optional

import requests
from firebase_admin import exceptions as firebase_exceptions
from google.api_core import exceptions as google_exceptions

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

_TRANSIENT_FIREBASE_CODES = frozenset(
    {"UNAVAILABLE", "DEADLINE_EXCEEDED", "RESOURCE_EXHAUSTED", "INTERNAL", "ABORTED"}
)


def classify_firebase_error(exc: Exception) -> OperationResult:
    """Classify Firebase Admin SDK and Firestore errors into OperationResult.

    Mapping:
    - NotFound / NOT_FOUND → NOT_FOUND
    - Unauthenticated, PermissionDenied → UNAUTHORIZED
    - TooManyRequests / RESOURCE_EXHAUSTED → TRANSIENT_ERROR with retry_after
    - ServiceUnavailable, DeadlineExceeded, 5xx → TRANSIENT_ERROR
    - Other API errors → PERMANENT_ERROR
    - Anything else (connection resets, timeouts) → TRANSIENT_ERROR

    Args:
        exc: Exception raised by firebase_admin or google-cloud-firestore

    Returns:
        OperationResult with appropriate status and error_code
    """
    if isinstance(exc, firebase_exceptions.FirebaseError):
        code = exc.code
        if code == firebase_exceptions.NOT_FOUND:
            return OperationResult.not_found(f"Firebase resource not found: {exc}")
        if code in (
            firebase_exceptions.UNAUTHENTICATED,
            firebase_exceptions.PERMISSION_DENIED,
        ):
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED,
                f"Firebase rejected credentials: {exc}",
                error_code=code,
            )
        if code in _TRANSIENT_FIREBASE_CODES:
            return OperationResult.transient_error(
                f"Firebase temporarily unavailable: {exc}",
                error_code=code,
                retry_after=60 if code == "RESOURCE_EXHAUSTED" else None,
            )
        return OperationResult.permanent_error(
            f"Firebase error: {exc}", error_code=code
        )

    if isinstance(exc, google_exceptions.NotFound):
        return OperationResult.not_found(f"Document not found: {exc}")
    if isinstance(
        exc, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)
    ):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"Firestore rejected credentials: {exc}",
            error_code="UNAUTHORIZED",
        )
    if isinstance(exc, google_exceptions.TooManyRequests):
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "Firestore rate limited",
            error_code="RATE_LIMITED",
            retry_after=60,
        )
    if isinstance(
        exc,
        (
            google_exceptions.ServiceUnavailable,
            google_exceptions.DeadlineExceeded,
            google_exceptions.ServerError,
        ),
    ):
        return OperationResult.transient_error(
            f"Firestore server error: {exc}", error_code="SERVER_ERROR"
        )
    if isinstance(exc, google_exceptions.GoogleAPICallError):
        return OperationResult.permanent_error(
            f"Firestore client error: {exc}", error_code="API_ERROR"
        )

    return OperationResult.transient_error(
        f"Connection error: {type(exc).__name__}: {exc}",
        error_code="CONNECTION_ERROR",
    )


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify requests errors raised while calling the Expo push API.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Access token rejected → UNAUTHORIZED
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx: Malformed request → PERMANENT_ERROR
    - Timeouts and connection errors → TRANSIENT_ERROR

    Args:
        exc: Exception raised by requests

    Returns:
        OperationResult with appropriate status, message and error_code
    """
    if isinstance(exc, (requests.Timeout, requests.ConnectionError)):
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    status_code: Optional[int] = None
    response = getattr(exc, "response", None)
    if response is not None:
        status_code = response.status_code

    if status_code == 429:
        retry_after = 60
        header_value = response.headers.get("retry-after")
        if header_value:
            try:
                retry_after = int(header_value)
            except (ValueError, TypeError):
                pass
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "Expo push API rate limited",
            error_code="RATE_LIMITED",
            retry_after=retry_after,
        )
    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            "Expo push API rejected the access token",
            error_code="UNAUTHORIZED",
        )
    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"Expo push API server error ({status_code})", error_code="SERVER_ERROR"
        )
    if status_code and 400 <= status_code < 500:
        return OperationResult.permanent_error(
            f"Expo push API client error ({status_code}): {exc}",
            error_code="HTTP_ERROR",
        )
    return OperationResult.permanent_error(
        f"Expo push API error: {exc}", error_code="UNKNOWN_ERROR"
    )
