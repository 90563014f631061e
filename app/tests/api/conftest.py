"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter, setup_rate_limiter
from api.router import api_router
from infrastructure.notifications import (
    AudienceResolver,
    BroadcastService,
    Channel,
    Dispatcher,
    InAppChannel,
)
from infrastructure.services.providers import (
    get_broadcast_service,
    get_database,
    get_delivery_log,
    get_dispatcher,
)
from tests.factories.notifications import FakeChannel


@pytest.fixture
def limiter():
    limiter = get_limiter()
    limiter.enabled = False
    yield limiter
    limiter.enabled = True


@pytest.fixture
def api_dispatcher(database, delivery_log):
    return Dispatcher(
        database=database,
        channels=[InAppChannel(delivery_log), FakeChannel(Channel.BUSINESS_MESSAGE)],
        delivery_log=delivery_log,
    )


@pytest.fixture
def broadcast_service(database, api_dispatcher, messaging_settings):
    return BroadcastService(
        database=database,
        dispatcher=api_dispatcher,
        audience=AudienceResolver(database),
        settings=messaging_settings,
    )


@pytest.fixture
def app(limiter, database, delivery_log, api_dispatcher, broadcast_service):
    app = FastAPI()
    setup_rate_limiter(app)
    app.include_router(api_router)
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_delivery_log] = lambda: delivery_log
    app.dependency_overrides[get_dispatcher] = lambda: api_dispatcher
    app.dependency_overrides[get_broadcast_service] = lambda: broadcast_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
