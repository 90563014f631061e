"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the messaging
service using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    MessagingSettings: Messaging feature settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    # Access settings
    api_key = settings.whatsapp.WHATSAPP_API_KEY
    default_locale = settings.messaging.DEFAULT_LOCALE

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features.messaging import MessagingSettings

__all__ = ["Settings", "settings", "MessagingSettings"]
