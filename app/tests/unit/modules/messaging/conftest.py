"""Fixtures for messaging module tests."""

import pytest

from infrastructure.notifications import Channel, Dispatcher, InAppChannel
from modules.messaging import AttendanceMonitor, NotificationTriggers, ReminderJobs
from tests.factories.notifications import FakeChannel
from tests.factories.records import make_account, make_group, make_organization


@pytest.fixture
def whatsapp_channel():
    return FakeChannel(Channel.BUSINESS_MESSAGE)


@pytest.fixture
def dispatcher(database, delivery_log, whatsapp_channel):
    return Dispatcher(
        database=database,
        channels=[InAppChannel(delivery_log), whatsapp_channel],
        delivery_log=delivery_log,
    )


@pytest.fixture
def triggers(dispatcher, database):
    return NotificationTriggers(dispatcher, database)


@pytest.fixture
def reminder_jobs(triggers, database, delivery_log, messaging_settings):
    return ReminderJobs(triggers, database, delivery_log, messaging_settings)


@pytest.fixture
def attendance_monitor(database, triggers, messaging_settings):
    return AttendanceMonitor(database, triggers, messaging_settings)


@pytest.fixture
def org_id(database):
    return make_organization(database, primary_language="ar")


@pytest.fixture
def leader_id(database, org_id):
    return make_account(
        database,
        org_id,
        first_name="Elias",
        last_name="Khoury",
        role="group_leader",
        phone="+96170555111",
    )


@pytest.fixture
def group_id(database, org_id, leader_id):
    return make_group(database, org_id, name="Youth", name_ar="الشباب", leader_id=leader_id)
