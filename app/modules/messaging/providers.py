"""Application-scoped providers for the messaging module."""

from functools import lru_cache

from infrastructure.services.providers import (
    get_database,
    get_delivery_log,
    get_dispatcher,
    get_settings,
)
from modules.messaging.absence import AttendanceMonitor
from modules.messaging.reminders import ReminderJobs
from modules.messaging.triggers import NotificationTriggers


@lru_cache
def get_triggers() -> NotificationTriggers:
    return NotificationTriggers(get_dispatcher(), get_database())


@lru_cache
def get_reminder_jobs() -> ReminderJobs:
    return ReminderJobs(
        triggers=get_triggers(),
        database=get_database(),
        delivery_log=get_delivery_log(),
        settings=get_settings().messaging,
    )


@lru_cache
def get_attendance_monitor() -> AttendanceMonitor:
    return AttendanceMonitor(
        database=get_database(),
        triggers=get_triggers(),
        settings=get_settings().messaging,
    )
