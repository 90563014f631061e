from unittest.mock import patch

import pytest

from infrastructure.configuration import Settings
from infrastructure.notifications import Channel
from infrastructure.services.providers import get_settings

pytestmark = pytest.mark.unit


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "database": "ok",
        "channels": {"internal_feed": True, "business_message": True},
    }


def test_health_reports_unconfigured_channel_without_failing(client, api_dispatcher):
    api_dispatcher.channels[Channel.BUSINESS_MESSAGE].configured = False

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["channels"]["business_message"] is False


def test_health_database_unavailable(client, database):
    with patch.object(database, "ping", return_value=False):
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "unavailable"


def test_get_version_known(app, client):
    settings = Settings(GIT_SHA="abc123", _env_file=None)
    app.dependency_overrides[get_settings] = lambda: settings

    response = client.get("/version")

    assert response.status_code == 200
    assert response.json() == {"version": "abc123"}
