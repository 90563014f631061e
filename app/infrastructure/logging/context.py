"""Request context binding for structured logging.

Binds request-scoped metadata (correlation id, calling account, path) so
that every log line emitted while handling an API call or a scheduled job
can be correlated.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", account_id="acc-1"):
        logger.info("processing_request")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    account_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        account_id: Id of the calling account (if known).
        request_path: HTTP request path (e.g., "/api/v1/notifications").
        request_method: HTTP method (e.g., "GET", "PATCH").
        **extra_context: Additional key-value pairs to include in logs.

    Example:
        @app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            with bind_request_context(
                correlation_id=request.headers.get("X-Correlation-ID"),
                request_path=request.url.path,
                request_method=request.method,
            ):
                return await call_next(request)
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if account_id is not None:
        context["account_id"] = account_id
    if request_path is not None:
        context["request_path"] = request_path
    if request_method is not None:
        context["request_method"] = request_method

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
