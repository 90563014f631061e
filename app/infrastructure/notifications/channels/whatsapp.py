"""Business messaging channel backed by the WhatsApp Business API."""

from infrastructure.logging import get_module_logger
from infrastructure.notifications.audience import normalize_phone
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import Channel, MessagePayload, MessageResult
from integrations.whatsapp import WhatsAppClient

logger = get_module_logger()


class WhatsAppChannel(NotificationChannel):
    """Sends the catalog's approved template with positional parameters.

    Parameters are taken from ``payload.params`` in the template's
    ``param_order``. A missing parameter fails the send rather than shifting
    the remaining values into the wrong slots.
    """

    def __init__(self, client: WhatsAppClient):
        self._client = client

    @property
    def channel_name(self) -> Channel:
        return Channel.BUSINESS_MESSAGE

    def is_configured(self) -> bool:
        return self._client.is_configured

    def send(self, payload: MessagePayload) -> MessageResult:
        if not self.is_configured():
            logger.warning("whatsapp_not_configured")
            return MessageResult.failed(
                self.channel_name, "WhatsApp API key not configured"
            )

        phone = normalize_phone(payload.phone or "")
        if not phone:
            return MessageResult.failed(self.channel_name, "No phone number")
        if payload.template is None:
            return MessageResult.failed(
                self.channel_name, f"No template for {payload.type.value}"
            )

        missing = [
            name for name in payload.template.param_order if name not in payload.params
        ]
        if missing:
            logger.error(
                "whatsapp_template_params_missing",
                template=payload.template.business_template,
                missing=missing,
            )
            return MessageResult.failed(
                self.channel_name,
                f"Missing template parameters: {', '.join(missing)}",
            )

        try:
            result = self._client.send_template(
                to=phone,
                template_name=payload.template.business_template,
                language_code=payload.locale.value,
                parameters=[payload.params[name] for name in payload.template.param_order],
            )
        except Exception as e:
            logger.error("whatsapp_channel_error", error=str(e), exc_info=True)
            return MessageResult.failed(self.channel_name, str(e))

        if not result.is_success:
            return MessageResult.failed(self.channel_name, result.message)
        return MessageResult.ok(self.channel_name, message_id=result.message_id)
