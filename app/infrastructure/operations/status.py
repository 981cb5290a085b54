"""Operation status enumeration."""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for adapter operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, quota)
        PERMANENT_ERROR: Non-retryable error (invalid argument, malformed request)
        UNAUTHORIZED: Credentials rejected by Firebase or Expo
        NOT_FOUND: Referenced document does not exist
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
