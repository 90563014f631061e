"""Unit tests for ReminderJobs.

Tests cover:
- Reminder windows for gatherings and events
- Skipping anything that was already reminded
- Visitor SLA escalation with per-organization SLA hours
"""

from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from infrastructure.persistence import models
from tests.factories.records import (
    make_account,
    make_event,
    make_gathering,
    make_membership,
    make_organization,
    make_registration,
    make_visitor,
)

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestGatheringReminders:
    def test_reminds_gatherings_inside_window_once(
        self, database, reminder_jobs, delivery_log, org_id, group_id
    ):
        member_id = make_account(database, org_id)
        make_membership(database, org_id, group_id, member_id)
        make_gathering(database, org_id, group_id, scheduled_at=NOW + timedelta(hours=20))
        make_gathering(database, org_id, group_id, scheduled_at=NOW + timedelta(hours=30))
        make_gathering(
            database,
            org_id,
            group_id,
            scheduled_at=NOW + timedelta(hours=2),
            status="cancelled",
        )

        assert reminder_jobs.send_gathering_reminders(now=NOW) == 1
        assert reminder_jobs.send_gathering_reminders(now=NOW) == 0
        assert delivery_log.unread_count(member_id) == 1

    def test_uses_current_time_by_default(
        self, database, reminder_jobs, org_id, group_id
    ):
        member_id = make_account(database, org_id)
        make_membership(database, org_id, group_id, member_id)
        make_gathering(database, org_id, group_id, scheduled_at=NOW + timedelta(hours=1))

        with freeze_time(NOW):
            assert reminder_jobs.send_gathering_reminders() == 1

    def test_past_gatherings_are_ignored(self, database, reminder_jobs, org_id, group_id):
        make_gathering(database, org_id, group_id, scheduled_at=NOW - timedelta(hours=1))

        assert reminder_jobs.send_gathering_reminders(now=NOW) == 0


@pytest.mark.unit
class TestEventReminders:
    def test_reminds_published_events_once(
        self, database, reminder_jobs, delivery_log, org_id
    ):
        registrant = make_account(database, org_id)
        event_id = make_event(database, org_id, starts_at=NOW + timedelta(hours=5))
        make_registration(database, event_id, registrant)
        make_event(database, org_id, starts_at=NOW + timedelta(hours=5), status="draft")

        assert reminder_jobs.send_event_reminders(now=NOW) == 1
        assert reminder_jobs.send_event_reminders(now=NOW) == 0
        assert delivery_log.unread_count(registrant) == 1


@pytest.mark.unit
class TestVisitorEscalation:
    def test_escalates_overdue_visitors_once(
        self, database, reminder_jobs, delivery_log, org_id
    ):
        admin_id = make_account(database, org_id, role="super_admin")
        overdue = make_visitor(database, org_id, visited_at=NOW - timedelta(hours=49))
        make_visitor(database, org_id, visited_at=NOW - timedelta(hours=10))
        make_visitor(
            database, org_id, visited_at=NOW - timedelta(hours=72), status="contacted"
        )

        assert reminder_jobs.escalate_overdue_visitors(now=NOW) == 1
        assert reminder_jobs.escalate_overdue_visitors(now=NOW) == 0

        page = delivery_log.list_feed(admin_id)
        assert page.count == 1
        assert page.entries[0]["referenceId"] == overdue
        with database.session_scope() as session:
            visitor = session.get(models.Visitor, overdue)
            assert visitor.escalated_at is not None

    def test_organization_sla_overrides_default(self, database, reminder_jobs):
        org_id = make_organization(database, visitor_sla_hours=12)
        make_account(database, org_id, role="super_admin")
        make_visitor(database, org_id, visited_at=NOW - timedelta(hours=13))

        assert reminder_jobs.escalate_overdue_visitors(now=NOW) == 1

    def test_inactive_organizations_are_skipped(self, database, reminder_jobs):
        org_id = make_organization(database, is_active=False)
        make_visitor(database, org_id, visited_at=NOW - timedelta(days=5))

        assert reminder_jobs.escalate_overdue_visitors(now=NOW) == 0
