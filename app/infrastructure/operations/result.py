"""Operation result dataclass.

Uniform result type returned by integration clients so that callers never
need to catch provider exceptions.
"""

from typing import Optional, Any
from dataclasses import dataclass

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from integration calls.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message, surfaced as the delivery error text
        data: Optional[Any] -- optional payload (provider message id, raw body)
        error_code: Optional[str] -- optional machine error code
        retry_after: Optional[int] -- seconds the provider asked us to wait
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def message_id(self) -> Optional[str]:
        """Provider-side id of an accepted message, when the provider returned one."""
        if isinstance(self.data, dict):
            return self.data.get("message_id")
        return None

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def sent(cls, message_id: Optional[str]) -> "OperationResult":
        """Success result for a provider that accepted a message."""
        return cls.success(data={"message_id": message_id}, message="sent")

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Timeouts, rate limits and 5xx responses.

        Nothing in the messaging service retries; the distinction is kept so
        log entries say whether a failure was the provider's or ours.
        """
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Missing configuration or a request the provider rejected."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
