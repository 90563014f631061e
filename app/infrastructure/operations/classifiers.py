"""Error classifiers for provider HTTP calls.

Converts ``requests`` exceptions and non-2xx responses into standardized
OperationResult objects, so integration clients share one mapping.

Usage:
    from infrastructure.operations.classifiers import (
        classify_http_error,
        classify_http_response,
    )

    try:
        response = requests.post(url, json=payload, timeout=30)
    except requests.RequestException as exc:
        return classify_http_error(exc)
    if not response.ok:
        return classify_http_response(response)
"""

from typing import Any, Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def extract_error_message(body: Any) -> Optional[str]:
    """Return the provider's own error text from a decoded JSON body.

    Understands the shapes used by the WhatsApp Business API
    (``{"error": {"message": ...}}``), its legacy ``{"errors": [{"details":
    ...}]}`` form and SendGrid (``{"errors": [{"message": ...}]}``).
    """
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error

    errors = body.get("errors")
    if isinstance(errors, list):
        messages = []
        for item in errors:
            if not isinstance(item, dict):
                continue
            text = item.get("message") or item.get("details") or item.get("title")
            if text:
                messages.append(str(text))
        if messages:
            return "; ".join(messages)

    return None


def classify_http_response(response: requests.Response) -> OperationResult:
    """Classify a non-2xx provider response into OperationResult.

    The message is the provider's own error text when the body carries one,
    otherwise ``HTTP <status>``.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Credentials refused → UNAUTHORIZED
    - 404: Not found → NOT_FOUND
    - 5xx: Server error → TRANSIENT_ERROR
    - Other: → PERMANENT_ERROR

    Args:
        response: Response returned by ``requests``

    Returns:
        OperationResult describing the failure
    """
    status_code = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None
    message = extract_error_message(body) or f"HTTP {status_code}"

    if status_code == 429:
        retry_after = 60
        header_value = response.headers.get("Retry-After")
        if header_value:
            try:
                retry_after = int(header_value)
            except (TypeError, ValueError):
                pass
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            message,
            error_code="RATE_LIMITED",
            retry_after=retry_after,
            data=body,
        )

    status = OperationStatus.for_http_status(status_code)
    if status in (OperationStatus.UNAUTHORIZED, OperationStatus.NOT_FOUND):
        return OperationResult.error(status, message, error_code=status.name, data=body)
    if status.is_transient:
        return OperationResult.transient_error(message, error_code="SERVER_ERROR")
    return OperationResult.permanent_error(message, error_code=f"HTTP_{status_code}")


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify an exception raised while calling a provider.

    Args:
        exc: Exception raised by ``requests`` or a provider SDK

    Returns:
        OperationResult with TRANSIENT_ERROR for network problems and
        PERMANENT_ERROR for anything else
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Request timed out: {exc}", error_code="TIMEOUT"
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"Connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if isinstance(exc, requests.RequestException):
        return OperationResult.transient_error(
            f"HTTP request failed: {type(exc).__name__}: {exc}",
            error_code="REQUEST_ERROR",
        )

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        body = getattr(exc, "body", None)
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        detail = body if isinstance(body, str) and body.strip() else f"HTTP {status_code}"
        status = OperationStatus.for_http_status(status_code)
        if status is OperationStatus.UNAUTHORIZED:
            return OperationResult.error(status, detail, error_code="UNAUTHORIZED")
        if status.is_transient:
            code = "RATE_LIMITED" if status_code == 429 else "SERVER_ERROR"
            return OperationResult.transient_error(detail, error_code=code)
        return OperationResult.permanent_error(
            detail, error_code=f"HTTP_{status_code}"
        )

    return OperationResult.permanent_error(
        f"{type(exc).__name__}: {exc}", error_code="UNKNOWN_ERROR"
    )
