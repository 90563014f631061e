"""Email channel implementation using SendGrid."""

from html import escape

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import (
    Channel,
    Locale,
    MessagePayload,
    MessageResult,
)
from infrastructure.notifications.templates import interpolate
from integrations.sendgrid_mail import SendGridEmailClient

logger = get_module_logger()

ARABIC_FONT_STACK = "'Noto Sans Arabic', 'Segoe UI', sans-serif"
LATIN_FONT_STACK = "'Segoe UI', Tahoma, Geneva, Verdana, sans-serif"


def build_html(body: str, locale: Locale, brand_name: str = "Ekklesia") -> str:
    """Wrap a plain-text body in a minimal direction-aware HTML document."""
    direction = "rtl" if locale == Locale.AR else "ltr"
    font_family = ARABIC_FONT_STACK if locale == Locale.AR else LATIN_FONT_STACK
    brand = escape(brand_name)

    return f"""<!DOCTYPE html>
<html dir="{direction}" lang="{locale.value}">
<head><meta charset="utf-8"></head>
<body style="font-family: {font_family}; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #f8f9fa; border-radius: 8px; padding: 24px;">
    <h2 style="color: #111; margin-top: 0;">{brand}</h2>
    <div style="white-space: pre-line;">{escape(body)}</div>
  </div>
  <p style="color: #999; font-size: 12px; margin-top: 16px; text-align: center;">
    {brand}
  </p>
</body>
</html>
"""


class EmailChannel(NotificationChannel):
    """Transactional email with the template's localized subject."""

    def __init__(self, client: SendGridEmailClient, brand_name: str = "Ekklesia"):
        self._client = client
        self._brand_name = brand_name

    @property
    def channel_name(self) -> Channel:
        return Channel.EMAIL

    def is_configured(self) -> bool:
        return self._client.is_configured

    def send(self, payload: MessagePayload) -> MessageResult:
        if not self.is_configured():
            logger.warning("email_not_configured")
            return MessageResult.failed(
                self.channel_name, "SendGrid API key not configured"
            )
        if not payload.email:
            return MessageResult.failed(self.channel_name, "No email address")

        if payload.template is not None:
            subject = interpolate(payload.template.subject(payload.locale), payload.params)
        else:
            subject = payload.title or payload.type.value

        try:
            result = self._client.send_html(
                recipient=payload.email,
                subject=subject,
                html_content=build_html(payload.body, payload.locale, self._brand_name),
            )
        except Exception as e:
            logger.error("email_channel_error", error=str(e), exc_info=True)
            return MessageResult.failed(self.channel_name, str(e))

        if not result.is_success:
            return MessageResult.failed(self.channel_name, result.message)
        return MessageResult.ok(self.channel_name, message_id=result.message_id)
