import pytest

from infrastructure.services import providers as infrastructure_providers
from modules.messaging import AttendanceMonitor, ReminderJobs
from modules.messaging import providers

CACHED = (
    infrastructure_providers.get_settings,
    infrastructure_providers.get_database,
    infrastructure_providers.get_delivery_log,
    infrastructure_providers.get_dispatcher,
    providers.get_triggers,
    providers.get_reminder_jobs,
    providers.get_attendance_monitor,
)


@pytest.fixture(autouse=True)
def fresh_caches(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    for provider in CACHED:
        provider.cache_clear()
    yield
    for provider in CACHED:
        provider.cache_clear()


@pytest.mark.unit
def test_jobs_share_one_triggers_instance():
    reminder_jobs = providers.get_reminder_jobs()
    monitor = providers.get_attendance_monitor()

    assert isinstance(reminder_jobs, ReminderJobs)
    assert isinstance(monitor, AttendanceMonitor)
    assert reminder_jobs._triggers is providers.get_triggers()
    assert monitor._triggers is providers.get_triggers()


@pytest.mark.unit
def test_triggers_use_application_dispatcher():
    triggers = providers.get_triggers()

    assert triggers._dispatcher is infrastructure_providers.get_dispatcher()
