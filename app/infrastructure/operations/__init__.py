"""Operation result types and status enums.

Standardized result types returned by integration clients, and the
classifiers that turn HTTP failures into them.
"""

from infrastructure.operations.classifiers import (
    classify_http_error,
    classify_http_response,
    extract_error_message,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_http_response",
    "extract_error_message",
]
