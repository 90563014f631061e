"""Test fixtures for notification infrastructure tests."""

import pytest

from infrastructure.notifications import Channel, Dispatcher, InAppChannel
from tests.factories.notifications import FakeChannel


@pytest.fixture
def whatsapp_channel():
    return FakeChannel(Channel.BUSINESS_MESSAGE)


@pytest.fixture
def email_channel():
    return FakeChannel(Channel.EMAIL)


@pytest.fixture
def dispatcher(database, delivery_log, whatsapp_channel, email_channel):
    """Dispatcher with the real internal feed and fake secondary channels."""
    return Dispatcher(
        database=database,
        channels=[InAppChannel(delivery_log), whatsapp_channel, email_channel],
        delivery_log=delivery_log,
    )
