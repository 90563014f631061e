"""Operation status enumeration.

Classifies the outcome of calls made to delivery providers and other
external collaborators.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Call completed and the provider accepted it
        TRANSIENT_ERROR: Network failure, timeout, rate limit or 5xx response
        PERMANENT_ERROR: Rejected request (validation, unknown template, 4xx)
        UNAUTHORIZED: Provider refused the configured credentials
        NOT_FOUND: Provider endpoint or resource does not exist
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

    @classmethod
    def for_http_status(cls, status_code: int) -> "OperationStatus":
        if 200 <= status_code < 300:
            return cls.SUCCESS
        if status_code == 429 or 500 <= status_code < 600:
            return cls.TRANSIENT_ERROR
        if status_code in (401, 403):
            return cls.UNAUTHORIZED
        if status_code == 404:
            return cls.NOT_FOUND
        return cls.PERMANENT_ERROR

    @property
    def is_transient(self) -> bool:
        return self is OperationStatus.TRANSIENT_ERROR
