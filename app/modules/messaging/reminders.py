"""Scheduled reminder and escalation jobs.

Run periodically by ``jobs.scheduled_tasks``. Reminders look ahead
``REMINDER_WINDOW_HOURS`` and skip anything that already has a delivery log
entry of the same type, so running a job twice does not remind twice.
"""

from datetime import datetime, timedelta
from typing import Optional

from infrastructure.configuration.features import MessagingSettings
from infrastructure.logging import get_module_logger
from infrastructure.notifications import DeliveryLog, NotificationType
from infrastructure.persistence import Database, utcnow
from infrastructure.persistence.repositories import (
    EventRepository,
    GatheringRepository,
    OrganizationRepository,
    VisitorRepository,
)
from modules.messaging.triggers import NotificationTriggers

logger = get_module_logger()


class ReminderJobs:
    def __init__(
        self,
        triggers: NotificationTriggers,
        database: Database,
        delivery_log: DeliveryLog,
        settings: MessagingSettings,
    ):
        self._triggers = triggers
        self._database = database
        self._delivery_log = delivery_log
        self._settings = settings

    def send_gathering_reminders(self, now: Optional[datetime] = None) -> int:
        """Remind members of gatherings starting within the reminder window.

        Returns:
            Number of gatherings reminded
        """
        now = now or utcnow()
        window_end = now + timedelta(hours=self._settings.REMINDER_WINDOW_HOURS)

        with self._database.session_scope() as session:
            upcoming = [
                (gathering.id, gathering.organization_id)
                for gathering in GatheringRepository(session).scheduled_between(
                    now, window_end
                )
            ]

        already_sent = self._delivery_log.logged_reference_ids(
            NotificationType.GATHERING_REMINDER, [gathering_id for gathering_id, _ in upcoming]
        )

        reminded = 0
        for gathering_id, organization_id in upcoming:
            if gathering_id in already_sent:
                continue
            self._triggers.notify_gathering_reminder(gathering_id, organization_id)
            reminded += 1

        logger.info(
            "gathering_reminders_sent",
            upcoming=len(upcoming),
            skipped=len(already_sent),
            reminded=reminded,
        )
        return reminded

    def send_event_reminders(self, now: Optional[datetime] = None) -> int:
        """Remind registrants of published events starting within the window."""
        now = now or utcnow()
        window_end = now + timedelta(hours=self._settings.REMINDER_WINDOW_HOURS)

        with self._database.session_scope() as session:
            upcoming = [
                (event.id, event.organization_id)
                for event in EventRepository(session).published_between(now, window_end)
            ]

        already_sent = self._delivery_log.logged_reference_ids(
            NotificationType.EVENT_REMINDER, [event_id for event_id, _ in upcoming]
        )

        reminded = 0
        for event_id, organization_id in upcoming:
            if event_id in already_sent:
                continue
            self._triggers.notify_event_reminder(event_id, organization_id)
            reminded += 1

        logger.info(
            "event_reminders_sent",
            upcoming=len(upcoming),
            skipped=len(already_sent),
            reminded=reminded,
        )
        return reminded

    def escalate_overdue_visitors(self, now: Optional[datetime] = None) -> int:
        """Warn administrators about new visitors nobody contacted in time.

        Each organization uses its own ``visitor_sla_hours`` or the default.
        Escalated visitors are stamped so they are warned about only once.

        Returns:
            Number of visitors escalated
        """
        now = now or utcnow()

        with self._database.session_scope() as session:
            organizations = [
                (
                    organization.id,
                    organization.visitor_sla_hours
                    or self._settings.DEFAULT_VISITOR_SLA_HOURS,
                )
                for organization in OrganizationRepository(session).list_active()
            ]

        escalated = 0
        for organization_id, sla_hours in organizations:
            deadline = now - timedelta(hours=sla_hours)
            with self._database.session_scope() as session:
                visitor_ids = [
                    visitor.id
                    for visitor in VisitorRepository(session).overdue(
                        organization_id, deadline
                    )
                ]

            for visitor_id in visitor_ids:
                self._triggers.notify_visitor_sla(visitor_id, organization_id)
                with self._database.session_scope() as session:
                    repo = VisitorRepository(session)
                    visitor = repo.get(visitor_id)
                    if visitor is not None:
                        repo.update(visitor, escalated_at=now)
                escalated += 1

            if visitor_ids:
                logger.info(
                    "visitors_escalated",
                    organization_id=organization_id,
                    sla_hours=sla_hours,
                    count=len(visitor_ids),
                )

        return escalated
