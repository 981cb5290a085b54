"""Operation result types and status enums.

Standardized result types for adapter operations, including status enums,
the result dataclass and error classifiers for Firebase and HTTP exceptions.
"""

from infrastructure.operations.classifiers import (
    classify_firebase_error,
    classify_http_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_firebase_error",
    "classify_http_error",
]
