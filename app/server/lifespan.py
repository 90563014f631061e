from contextlib import asynccontextmanager
import threading
from typing import AsyncIterator, Optional, TYPE_CHECKING, cast

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_database, get_settings
from jobs import scheduled_tasks

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _log_delivery_providers(settings: "Settings", logger: BoundLogger) -> None:
    providers = {
        "whatsapp": settings.whatsapp.is_configured,
        "sendgrid": settings.email.is_configured,
    }
    logger.info("delivery_providers_loaded", configured=providers)
    for name, configured in providers.items():
        if not configured:
            logger.warning("delivery_provider_not_configured", provider=name)


def _start_scheduled_tasks(
    settings: "Settings",
    logger: BoundLogger,
) -> Optional[threading.Event]:
    if not settings.messaging.SCHEDULER_ENABLED:
        logger.info("scheduled_tasks_skipped", reason="scheduler_disabled")
        return None

    scheduled_tasks.init()
    stop_event = cast(Optional[threading.Event], scheduled_tasks.run_continuously())
    logger.info("scheduled_tasks_started")
    return stop_event


def _stop_scheduled_tasks(stop_event: Optional[threading.Event]) -> None:
    if stop_event is None:
        return
    stop_event.set()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)
    _log_delivery_providers(settings, logger)

    get_database().create_all()

    scheduled_stop_event = _start_scheduled_tasks(settings, logger)

    try:
        yield
    finally:
        logger.info("application_shutdown")
        _stop_scheduled_tasks(scheduled_stop_event)
        get_database().dispose()
