"""Transactional email (SendGrid) integration settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import IntegrationSettings


class EmailSettings(IntegrationSettings):
    """SendGrid transactional email configuration.

    Environment Variables:
        SENDGRID_API_KEY: SendGrid API key
        SENDGRID_SENDER: Address used as the From header
        EMAIL_BRAND_NAME: Name rendered in the HTML wrapper heading

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        sender = settings.email.SENDGRID_SENDER
        ```
    """

    SENDGRID_API_KEY: str | None = Field(default=None, alias="SENDGRID_API_KEY")
    SENDGRID_SENDER: str = Field(default="noreply@ekklesia.app", alias="SENDGRID_SENDER")
    EMAIL_BRAND_NAME: str = Field(default="Ekklesia", alias="EMAIL_BRAND_NAME")

    @field_validator("SENDGRID_SENDER")
    @classmethod
    def validate_sender(cls, v: str) -> str:
        """Reject sender values that are not email addresses."""
        if "@" not in v:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return v

    @property
    def is_configured(self) -> bool:
        """True when an API key is present."""
        return bool(self.SENDGRID_API_KEY)
