"""Messaging module: domain-event triggers, reminder jobs and at-risk detection."""

from modules.messaging.absence import AttendanceMonitor
from modules.messaging.reminders import ReminderJobs
from modules.messaging.triggers import NotificationTriggers

__all__ = ["AttendanceMonitor", "NotificationTriggers", "ReminderJobs"]
