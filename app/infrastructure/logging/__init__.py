"""Structured logging infrastructure.

Centralized logging configuration and utilities for the messaging service
using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_logger(): Get a logger instance with a specific name
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for request-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_request_context(): Clear all request context

Processors:
    - mask_sensitive_data(): Redact credentials and contact details
    - truncate_large_values(): Limit string lengths

Example:
    from infrastructure.logging import (
        configure_logging,
        get_module_logger,
        bind_request_context,
    )

    # At application startup
    configure_logging()

    # In a module
    logger = get_module_logger()
    logger.info("module_initialized")

    # In request handler
    with bind_request_context(correlation_id="req-123"):
        logger.info("processing_request")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)

from infrastructure.logging.context import (
    bind_request_context,
    get_correlation_id,
    clear_request_context,
)

from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "get_module_logger",
    "bind_request_context",
    "get_correlation_id",
    "clear_request_context",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
