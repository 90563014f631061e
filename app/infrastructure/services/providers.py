"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications import (
    AudienceResolver,
    BroadcastService,
    ChannelPreference,
    DeliveryLog,
    Dispatcher,
    EmailChannel,
    InAppChannel,
    Locale,
    WhatsAppChannel,
)
from infrastructure.persistence import Database
from integrations.sendgrid_mail import SendGridEmailClient
from integrations.whatsapp import WhatsAppClient


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_database() -> Database:
    """
    Get application-scoped database singleton.

    Returns:
        Database: Engine and session factory for DATABASE_URL.
    """
    settings = get_settings()
    return Database(
        settings.database.DATABASE_URL,
        echo=settings.database.DATABASE_ECHO,
    )


@lru_cache
def get_delivery_log() -> DeliveryLog:
    """Get application-scoped delivery log singleton."""
    return DeliveryLog(get_database())


@lru_cache
def get_dispatcher() -> Dispatcher:
    """
    Get application-scoped notification dispatcher singleton.

    Wires the three channel providers from settings. Providers without
    credentials are still registered; the dispatcher skips them while they
    report themselves unconfigured.

    Returns:
        Dispatcher: Cached dispatcher with internal feed, WhatsApp and email channels.
    """
    settings = get_settings()
    delivery_log = get_delivery_log()
    return Dispatcher(
        database=get_database(),
        channels=[
            InAppChannel(delivery_log),
            WhatsAppChannel(WhatsAppClient.from_settings(settings.whatsapp)),
            EmailChannel(
                SendGridEmailClient.from_settings(settings.email),
                brand_name=settings.email.EMAIL_BRAND_NAME,
            ),
        ],
        delivery_log=delivery_log,
        default_locale=Locale(settings.messaging.DEFAULT_LOCALE),
        default_preference=ChannelPreference(settings.messaging.DEFAULT_CHANNEL_PREFERENCE),
    )


@lru_cache
def get_audience_resolver() -> AudienceResolver:
    """Get application-scoped audience resolver singleton."""
    return AudienceResolver(get_database())


@lru_cache
def get_broadcast_service() -> BroadcastService:
    """
    Get application-scoped broadcast service singleton.

    Usage:
        @router.post("/send")
        def send(service: BroadcastServiceDep, body: BroadcastRequest):
            return service.broadcast(account_id, body).to_dict()
    """
    return BroadcastService(
        database=get_database(),
        dispatcher=get_dispatcher(),
        audience=get_audience_resolver(),
        settings=get_settings().messaging,
    )
