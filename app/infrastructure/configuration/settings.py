"""Ekklesia messaging configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    WhatsAppSettings,
    EmailSettings,
)

# Feature settings
from infrastructure.configuration.features import MessagingSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    DatabaseSettings,
    ServerSettings,
)


class Settings(BaseSettings):
    """Messaging service configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External delivery providers (WhatsApp, SendGrid)
    - **Features**: Messaging behaviour (locale, preferences, jobs)
    - **Infrastructure**: Core system configuration (database, server)

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_key = settings.whatsapp.WHATSAPP_API_KEY
        database_url = settings.database.DATABASE_URL

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    whatsapp: WhatsAppSettings
    email: EmailSettings

    # Feature settings
    messaging: MessagingSettings

    # Infrastructure settings
    database: DatabaseSettings
    server: ServerSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "whatsapp": WhatsAppSettings,
            "email": EmailSettings,
            # Features
            "messaging": MessagingSettings,
            # Infrastructure
            "database": DatabaseSettings,
            "server": ServerSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
