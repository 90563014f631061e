"""WhatsApp Business (360dialog) integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class WhatsAppSettings(IntegrationSettings):
    """360dialog WhatsApp Business API configuration.

    Environment Variables:
        WHATSAPP_API_KEY: 360dialog API key sent in the D360-API-KEY header
        WHATSAPP_API_URL: API base URL (default: https://waba.360dialog.io/v1)
        WHATSAPP_TIMEOUT_SECONDS: HTTP timeout for a single send

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.whatsapp.is_configured:
            url = settings.whatsapp.WHATSAPP_API_URL
        ```
    """

    WHATSAPP_API_KEY: str | None = Field(default=None, alias="WHATSAPP_API_KEY")
    WHATSAPP_API_URL: str = Field(
        default="https://waba.360dialog.io/v1", alias="WHATSAPP_API_URL"
    )
    WHATSAPP_TIMEOUT_SECONDS: int = Field(default=30, alias="WHATSAPP_TIMEOUT_SECONDS")

    @property
    def is_configured(self) -> bool:
        """True when an API key is present."""
        return bool(self.WHATSAPP_API_KEY)
