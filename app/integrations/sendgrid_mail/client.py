"""Utility client for sending transactional email via SendGrid."""

import json
from typing import Any, Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from infrastructure.configuration.integrations import EmailSettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_error,
    extract_error_message,
)

logger = get_module_logger()


def _error_details(body: Any) -> Optional[str]:
    """Return a human readable description of a SendGrid error payload."""
    if body in (None, b"", ""):
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body or None
    return extract_error_message(body)


class SendGridEmailClient:
    """Sends HTML email from the configured sender address."""

    def __init__(self, api_key: Optional[str], sender: str):
        self.api_key = api_key
        self.sender = sender

    @classmethod
    def from_settings(cls, settings: EmailSettings) -> "SendGridEmailClient":
        return cls(api_key=settings.SENDGRID_API_KEY, sender=settings.SENDGRID_SENDER)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.sender)

    def send_html(self, recipient: str, subject: str, html_content: str) -> OperationResult:
        """Send one HTML email.

        Returns:
            OperationResult with ``{"message_id": ...}`` in data on success
        """
        if not self.is_configured:
            return OperationResult.permanent_error(
                "SendGrid API key not configured", error_code="NOT_CONFIGURED"
            )

        message = Mail(
            from_email=self.sender,
            to_emails=recipient,
            subject=subject,
            html_content=html_content,
        )

        try:
            response = SendGridAPIClient(self.api_key).send(message)
        except Exception as exc:
            details = _error_details(getattr(exc, "body", None))
            status_code = getattr(exc, "status_code", None)
            logger.error(
                "sendgrid_send_failed",
                status_code=status_code,
                error=details or str(exc),
            )
            result = classify_http_error(exc)
            if details:
                result.message = details
            return result

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _error_details(getattr(response, "body", None))
            message_text = details or f"HTTP {status_code}"
            logger.error(
                "sendgrid_unexpected_status", status_code=status_code, error=message_text
            )
            return OperationResult.error(
                OperationStatus.PERMANENT_ERROR,
                message_text,
                error_code=f"HTTP_{status_code}",
            )

        headers = getattr(response, "headers", None) or {}
        message_id = headers.get("X-Message-Id") if hasattr(headers, "get") else None
        logger.info("sendgrid_sent", subject=subject, message_id=message_id)
        return OperationResult.sent(message_id)
