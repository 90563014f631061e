"""360dialog WhatsApp Business API client.

Sends pre-approved template messages. Every call returns an OperationResult;
HTTP and network failures are classified, never raised.
"""

from typing import Any, Dict, List, Optional

import requests

from infrastructure.configuration.integrations import WhatsAppSettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    classify_http_error,
    classify_http_response,
)

logger = get_module_logger()

API_KEY_HEADER = "D360-API-KEY"


def build_template_message(
    to: str, template_name: str, language_code: str, parameters: List[str]
) -> Dict[str, Any]:
    """Build the request body for a template message.

    Parameters are positional: the provider substitutes them into the
    approved template's ``{{1}}``, ``{{2}}``... slots in list order.
    """
    components: List[Dict[str, Any]] = []
    if parameters:
        components.append(
            {
                "type": "body",
                "parameters": [{"type": "text", "text": value} for value in parameters],
            }
        )
    return {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "template",
        "template": {
            "name": template_name,
            "language": {"code": language_code},
            "components": components,
        },
    }


class WhatsAppClient:
    """Thin client over ``POST {api_url}/messages``."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        timeout: int = 30,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: WhatsAppSettings) -> "WhatsAppClient":
        return cls(
            api_key=settings.WHATSAPP_API_KEY,
            api_url=settings.WHATSAPP_API_URL,
            timeout=settings.WHATSAPP_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send_template(
        self,
        to: str,
        template_name: str,
        language_code: str,
        parameters: List[str],
    ) -> OperationResult:
        """Send a template message.

        Args:
            to: Digits-only phone number including country code
            template_name: Approved template name
            language_code: Template language (``ar`` or ``en``)
            parameters: Positional body parameters

        Returns:
            OperationResult with ``{"message_id": ...}`` in data on success
        """
        if not self.is_configured:
            return OperationResult.permanent_error(
                "WhatsApp API key not configured", error_code="NOT_CONFIGURED"
            )

        body = build_template_message(to, template_name, language_code, parameters)
        headers = {"Content-Type": "application/json", API_KEY_HEADER: self.api_key}

        try:
            response = requests.post(
                f"{self.api_url}/messages",
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error(
                "whatsapp_request_failed",
                template=template_name,
                error=str(exc),
            )
            return classify_http_error(exc)

        if not response.ok:
            result = classify_http_response(response)
            logger.error(
                "whatsapp_send_failed",
                template=template_name,
                status_code=response.status_code,
                error=result.message,
            )
            return result

        try:
            data = response.json()
        except ValueError:
            data = {}
        messages = data.get("messages") if isinstance(data, dict) else None
        message_id = None
        if isinstance(messages, list) and messages and isinstance(messages[0], dict):
            message_id = messages[0].get("id")

        logger.info("whatsapp_sent", template=template_name, message_id=message_id)
        return OperationResult.sent(message_id)
