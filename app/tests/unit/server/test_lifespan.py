"""Unit tests for the application lifespan."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from server import lifespan as lifespan_module


@pytest.fixture
def settings():
    settings = MagicMock()
    settings.LOG_LEVEL = "INFO"
    settings.is_production = False
    settings.model_dump.return_value = {"LOG_LEVEL": "INFO", "messaging": {"A": 1}}
    return settings


async def run_lifespan(app):
    async with lifespan_module.lifespan(app):
        pass


@pytest.mark.unit
@pytest.mark.asyncio
@patch("server.lifespan.scheduled_tasks")
@patch("server.lifespan.get_database")
@patch("server.lifespan.get_settings")
async def test_creates_tables_and_skips_disabled_scheduler(
    mock_get_settings, mock_get_database, mock_tasks, settings
):
    settings.messaging.SCHEDULER_ENABLED = False
    mock_get_settings.return_value = settings
    app = FastAPI()

    await run_lifespan(app)

    mock_get_database.return_value.create_all.assert_called_once()
    mock_get_database.return_value.dispose.assert_called_once()
    mock_tasks.init.assert_not_called()
    assert app.state.settings is settings


@pytest.mark.unit
@pytest.mark.asyncio
@patch("server.lifespan.scheduled_tasks")
@patch("server.lifespan.get_database")
@patch("server.lifespan.get_settings")
async def test_starts_and_stops_scheduler(
    mock_get_settings, mock_get_database, mock_tasks, settings
):
    settings.messaging.SCHEDULER_ENABLED = True
    mock_get_settings.return_value = settings
    stop_event = MagicMock()
    mock_tasks.run_continuously.return_value = stop_event

    await run_lifespan(FastAPI())

    mock_tasks.init.assert_called_once()
    stop_event.set.assert_called_once()


@pytest.mark.unit
@pytest.mark.asyncio
@patch("server.lifespan._get_logger")
@patch("server.lifespan.scheduled_tasks")
@patch("server.lifespan.get_database")
@patch("server.lifespan.get_settings")
async def test_warns_about_unconfigured_provider(
    mock_get_settings, mock_get_database, mock_tasks, mock_get_logger, settings
):
    settings.messaging.SCHEDULER_ENABLED = False
    settings.whatsapp.is_configured = False
    settings.email.is_configured = True
    mock_get_settings.return_value = settings
    logger = mock_get_logger.return_value

    await run_lifespan(FastAPI())

    logger.info.assert_any_call(
        "delivery_providers_loaded",
        configured={"whatsapp": False, "sendgrid": True},
    )
    logger.warning.assert_called_once_with(
        "delivery_provider_not_configured", provider="whatsapp"
    )
