"""Domain-event notification triggers.

One method per event. Each method loads the minimal rows it needs, builds the
template parameters and hands one request per recipient to the dispatcher.

Triggers never raise: every failure is logged at the method boundary, and in
fan-out loops one recipient's failure does not stop the others.
"""

import functools
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional

from structlog.stdlib import BoundLogger

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    Dispatcher,
    Locale,
    NotificationRequest,
    NotificationTemplate,
    NotificationType,
    RecipientLookupError,
)
from infrastructure.notifications.templates import interpolate, lookup
from infrastructure.persistence import Database
from infrastructure.persistence.repositories import (
    AccountRepository,
    EventRegistrationRepository,
    EventRepository,
    GatheringRepository,
    GroupMembershipRepository,
    GroupRepository,
    OrganizationRepository,
    VisitorRepository,
)

TIME_FORMAT = "%I:%M %p"

# Business templates reject empty parameters
LOCATION_TBA = ("To be announced", "سيُعلن لاحقاً")
ADMIN_ROLE = "super_admin"


def format_time(value: datetime) -> str:
    return value.strftime(TIME_FORMAT)


def localized(locale: Locale, english: Optional[str], arabic: Optional[str]) -> str:
    """Arabic variant for Arabic organizations when one exists, else English."""
    if locale == Locale.AR and arabic:
        return arabic
    return english or arabic or ""


def trigger(name: str) -> Callable:
    """Catch and log any failure of a trigger method; it then returns 0."""

    def decorator(method: Callable[..., int]) -> Callable[..., int]:
        @functools.wraps(method)
        def wrapper(self: "NotificationTriggers", *args, **kwargs) -> int:
            try:
                return method(self, *args, **kwargs)
            except RecipientLookupError as e:
                self._logger.warning(
                    "trigger_recipient_lookup_failed",
                    trigger=name,
                    entity=e.entity,
                    entity_id=e.entity_id,
                )
            except Exception as e:
                self._logger.error(
                    "trigger_failed", trigger=name, error=str(e), exc_info=True
                )
            return 0

        return wrapper

    return decorator


class NotificationTriggers:
    """Entry points called by the rest of the application and by scheduled jobs.

    Every method returns the number of recipients the dispatcher accepted.

    Example:
        triggers = NotificationTriggers(dispatcher, database)
        triggers.notify_visitor_assigned(visitor_id, leader_id, organization_id)
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        database: Database,
        logger: Optional[BoundLogger] = None,
    ):
        self._dispatcher = dispatcher
        self._database = database
        self._logger = logger or get_module_logger()

    @trigger("visitor_welcome")
    def notify_welcome_visitor(self, visitor_id: str, organization_id: str) -> int:
        """Business message straight to a new visitor's phone (no account)."""
        with self._database.session_scope() as session:
            visitor = VisitorRepository(session).get(visitor_id)
            if visitor is None:
                raise RecipientLookupError("visitor", visitor_id)
            organization = OrganizationRepository(session).get(organization_id)
            if organization is None:
                raise RecipientLookupError("organization", organization_id)

            locale = self._locale_for(organization.primary_language)
            phone = visitor.phone
            params = {
                "organizationName": localized(locale, organization.name, organization.name_ar),
                "visitorName": self._visitor_name(visitor),
            }

        if not phone:
            self._logger.info("visitor_welcome_skipped_no_phone", visitor_id=visitor_id)
            return 0

        result = self._dispatcher.send_to_contact(
            organization_id,
            phone,
            NotificationType.VISITOR_WELCOME,
            params,
            locale=locale,
            reference_id=visitor_id,
            reference_type="visitor",
        )
        return 1 if result is not None and result.success else 0

    @trigger("visitor_assigned")
    def notify_visitor_assigned(
        self, visitor_id: str, leader_id: str, organization_id: str
    ) -> int:
        with self._database.session_scope() as session:
            visitor = VisitorRepository(session).get(visitor_id)
            if visitor is None:
                raise RecipientLookupError("visitor", visitor_id)
            visitor_name = self._visitor_name(visitor)

        return self._fan_out(
            NotificationType.VISITOR_ASSIGNED,
            [leader_id],
            organization_id,
            {"visitorName": visitor_name},
            reference_id=visitor_id,
            reference_type="visitor",
        )

    @trigger("at_risk_alert")
    def notify_at_risk_member(
        self,
        member_id: str,
        group_id: str,
        organization_id: str,
        consecutive_absences: int,
    ) -> int:
        """Alert the group leader that a member missed consecutive gatherings."""
        with self._database.session_scope() as session:
            member = AccountRepository(session).get(member_id)
            if member is None:
                raise RecipientLookupError("account", member_id)
            group = GroupRepository(session).get(group_id)
            if group is None or not group.leader_id:
                raise RecipientLookupError("group leader", group_id)

            locale = self._organization_locale(session, organization_id)
            member_name = " ".join(
                part
                for part in (
                    localized(locale, member.first_name, member.first_name_ar),
                    localized(locale, member.last_name, member.last_name_ar),
                )
                if part
            )
            group_name = localized(locale, group.name, group.name_ar)
            leader_id = group.leader_id

        return self._fan_out(
            NotificationType.AT_RISK_ALERT,
            [leader_id],
            organization_id,
            {
                "memberName": member_name,
                "groupName": group_name,
                "weeks": str(consecutive_absences),
            },
            reference_id=member_id,
            reference_type="account",
        )

    @trigger("visitor_sla_warning")
    def notify_visitor_sla(self, visitor_id: str, organization_id: str) -> int:
        """Tell every administrator that a visitor was not contacted in time."""
        with self._database.session_scope() as session:
            visitor = VisitorRepository(session).get(visitor_id)
            if visitor is None:
                raise RecipientLookupError("visitor", visitor_id)
            visitor_name = self._visitor_name(visitor)
            admin_ids = AccountRepository(session).ids_with_role(organization_id, ADMIN_ROLE)

        if not admin_ids:
            self._logger.info("visitor_sla_no_admins", organization_id=organization_id)
            return 0

        return self._fan_out(
            NotificationType.VISITOR_SLA_WARNING,
            admin_ids,
            organization_id,
            {"visitorName": visitor_name},
            reference_id=visitor_id,
            reference_type="visitor",
        )

    @trigger("gathering_reminder")
    def notify_gathering_reminder(self, gathering_id: str, organization_id: str) -> int:
        """Remind every active member of the gathering's group."""
        with self._database.session_scope() as session:
            gathering = GatheringRepository(session).get(gathering_id)
            if gathering is None:
                raise RecipientLookupError("gathering", gathering_id)
            group = GroupRepository(session).get(gathering.group_id)
            if group is None:
                raise RecipientLookupError("group", gathering.group_id)
            member_ids = GroupMembershipRepository(session).active_account_ids(
                [gathering.group_id]
            )

            locale = self._organization_locale(session, organization_id)
            params = {
                "groupName": localized(locale, group.name, group.name_ar),
                "time": format_time(gathering.scheduled_at),
                "location": gathering.location or localized(locale, *LOCATION_TBA),
            }

        if not member_ids:
            return 0

        return self._fan_out(
            NotificationType.GATHERING_REMINDER,
            member_ids,
            organization_id,
            params,
            reference_id=gathering_id,
            reference_type="gathering",
        )

    @trigger("event_reminder")
    def notify_event_reminder(self, event_id: str, organization_id: str) -> int:
        """Remind confirmed registrants that have an account."""
        with self._database.session_scope() as session:
            event = EventRepository(session).get(event_id)
            if event is None:
                raise RecipientLookupError("event", event_id)
            registrant_ids = EventRegistrationRepository(session).confirmed_account_ids(
                event_id
            )

            locale = self._organization_locale(session, organization_id)
            params = {
                "eventName": localized(locale, event.title, event.title_ar),
                "time": format_time(event.starts_at),
                "location": event.location or localized(locale, *LOCATION_TBA),
            }

        if not registrant_ids:
            return 0

        return self._fan_out(
            NotificationType.EVENT_REMINDER,
            registrant_ids,
            organization_id,
            params,
            reference_id=event_id,
            reference_type="event",
        )

    def _fan_out(
        self,
        notification_type: NotificationType,
        recipient_ids: Iterable[str],
        organization_id: str,
        params: Dict[str, str],
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
    ) -> int:
        template = lookup(notification_type)
        if template is None:
            raise ValueError(f"No template for {notification_type.value}")

        delivered = 0
        for recipient_id in recipient_ids:
            try:
                self._dispatcher.send(
                    self._build_request(
                        template,
                        recipient_id,
                        organization_id,
                        params,
                        reference_id,
                        reference_type,
                    )
                )
                delivered += 1
            except Exception as e:
                self._logger.error(
                    "trigger_recipient_failed",
                    notification_type=notification_type.value,
                    recipient_id=recipient_id,
                    error=str(e),
                )

        self._logger.info(
            "trigger_completed",
            notification_type=notification_type.value,
            reference_id=reference_id,
            delivered=delivered,
        )
        return delivered

    @staticmethod
    def _build_request(
        template: NotificationTemplate,
        recipient_id: str,
        organization_id: str,
        params: Dict[str, str],
        reference_id: Optional[str],
        reference_type: Optional[str],
    ) -> NotificationRequest:
        return NotificationRequest(
            recipient_id=recipient_id,
            organization_id=organization_id,
            type=template.type,
            title_en=template.title_en,
            title_ar=template.title_ar,
            body_en=interpolate(template.body_en, params),
            body_ar=interpolate(template.body_ar, params),
            reference_id=reference_id,
            reference_type=reference_type,
            data=dict(params),
        )

    def _organization_locale(self, session, organization_id: str) -> Locale:
        organization = OrganizationRepository(session).get(organization_id)
        return self._locale_for(organization.primary_language if organization else None)

    def _locale_for(self, primary_language: Optional[str]) -> Locale:
        return Locale.for_language(primary_language, self._dispatcher.default_locale)

    @staticmethod
    def _visitor_name(visitor) -> str:
        return f"{visitor.first_name} {visitor.last_name or ''}".strip()
