"""Shared base classes for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Base class for delivery provider settings (WhatsApp, SendGrid).

    Credentials are optional: a provider without them reports itself as not
    configured and its channel is skipped.
    """

    model_config = _SETTINGS_CONFIG


class FeatureSettings(BaseSettings):
    """Base class for feature settings (messaging behaviour, jobs)."""

    model_config = _SETTINGS_CONFIG


class InfrastructureSettings(BaseSettings):
    """Base class for core system settings (database, HTTP server)."""

    model_config = _SETTINGS_CONFIG
