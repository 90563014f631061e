"""Repositories for the tables the messaging service reads and writes.

Each repository wraps a session owned by the caller; nothing here commits.
"""

from datetime import datetime
from typing import Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from infrastructure.persistence import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type

    def __init__(self, session: Session):
        self.session = session

    def create(self, **kwargs) -> ModelT:
        entity = self.model(**kwargs)
        self.session.add(entity)
        self.session.flush()
        return entity

    def get(self, entity_id: str) -> Optional[ModelT]:
        return self.session.get(self.model, entity_id)

    def update(self, entity: ModelT, **kwargs) -> ModelT:
        for key, value in kwargs.items():
            setattr(entity, key, value)
        self.session.flush()
        return entity


class OrganizationRepository(BaseRepository[models.Organization]):
    model = models.Organization

    def list_active(self) -> List[models.Organization]:
        stmt = select(models.Organization).where(models.Organization.is_active.is_(True))
        return list(self.session.execute(stmt).scalars().all())


class AccountRepository(BaseRepository[models.Account]):
    model = models.Account

    def onboarded_ids(
        self,
        organization_id: str,
        roles: Optional[Sequence[str]] = None,
        statuses: Optional[Sequence[str]] = None,
        gender: Optional[str] = None,
    ) -> List[str]:
        """Ids of onboarded accounts, optionally narrowed by role, status or gender."""
        stmt = select(models.Account.id).where(
            models.Account.organization_id == organization_id,
            models.Account.onboarding_completed.is_(True),
        )
        if roles is not None:
            stmt = stmt.where(models.Account.role.in_(list(roles)))
        if statuses is not None:
            stmt = stmt.where(models.Account.status.in_(list(statuses)))
        if gender is not None:
            stmt = stmt.where(models.Account.gender == gender)
        return list(self.session.execute(stmt).scalars().all())

    def ids_with_role(self, organization_id: str, role: str) -> List[str]:
        stmt = select(models.Account.id).where(
            models.Account.organization_id == organization_id,
            models.Account.role == role,
        )
        return list(self.session.execute(stmt).scalars().all())

    def phones_for(self, account_ids: Iterable[str]) -> List[str]:
        ids = list(account_ids)
        if not ids:
            return []
        stmt = select(models.Account.phone).where(
            models.Account.id.in_(ids), models.Account.phone.is_not(None)
        )
        return [phone for phone in self.session.execute(stmt).scalars().all() if phone]


class GroupRepository(BaseRepository[models.Group]):
    model = models.Group

    def active_ids_for_ministries(
        self, organization_id: str, ministry_ids: Sequence[str]
    ) -> List[str]:
        stmt = select(models.Group.id).where(
            models.Group.organization_id == organization_id,
            models.Group.is_active.is_(True),
            models.Group.ministry_id.in_(list(ministry_ids)),
        )
        return list(self.session.execute(stmt).scalars().all())


class GroupMembershipRepository(BaseRepository[models.GroupMembership]):
    model = models.GroupMembership

    def active_account_ids(
        self, group_ids: Sequence[str], organization_id: Optional[str] = None
    ) -> List[str]:
        stmt = select(models.GroupMembership.account_id).where(
            models.GroupMembership.is_active.is_(True),
            models.GroupMembership.group_id.in_(list(group_ids)),
        )
        if organization_id is not None:
            stmt = stmt.where(models.GroupMembership.organization_id == organization_id)
        return list(self.session.execute(stmt).scalars().all())


class VisitorRepository(BaseRepository[models.Visitor]):
    model = models.Visitor

    def with_phone_by_status(
        self, organization_id: str, statuses: Sequence[str]
    ) -> List[models.Visitor]:
        stmt = (
            select(models.Visitor)
            .where(
                models.Visitor.organization_id == organization_id,
                models.Visitor.status.in_(list(statuses)),
                models.Visitor.phone.is_not(None),
            )
            .order_by(models.Visitor.created_at)
        )
        return list(self.session.execute(stmt).scalars().all())

    def overdue(self, organization_id: str, deadline: datetime) -> List[models.Visitor]:
        """New, never-escalated visitors who arrived before ``deadline``."""
        stmt = (
            select(models.Visitor)
            .where(
                models.Visitor.organization_id == organization_id,
                models.Visitor.status == "new",
                models.Visitor.escalated_at.is_(None),
                models.Visitor.visited_at < deadline,
            )
            .order_by(models.Visitor.visited_at)
        )
        return list(self.session.execute(stmt).scalars().all())


class GatheringRepository(BaseRepository[models.Gathering]):
    model = models.Gathering

    def scheduled_between(
        self, start: datetime, end: datetime
    ) -> List[models.Gathering]:
        stmt = (
            select(models.Gathering)
            .where(
                models.Gathering.status == "scheduled",
                models.Gathering.scheduled_at >= start,
                models.Gathering.scheduled_at < end,
            )
            .order_by(models.Gathering.scheduled_at)
        )
        return list(self.session.execute(stmt).scalars().all())

    def completed_between(self, start: datetime, end: datetime) -> List[str]:
        stmt = (
            select(models.Gathering.id)
            .where(
                models.Gathering.status == "completed",
                models.Gathering.scheduled_at >= start,
                models.Gathering.scheduled_at < end,
            )
            .order_by(models.Gathering.scheduled_at)
        )
        return list(self.session.execute(stmt).scalars().all())

    def recent_completed_ids(self, group_id: str, limit: int) -> List[str]:
        """Most recent completed gatherings of a group, newest first."""
        stmt = (
            select(models.Gathering.id)
            .where(
                models.Gathering.group_id == group_id,
                models.Gathering.status == "completed",
            )
            .order_by(models.Gathering.scheduled_at.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())


class AttendanceRepository(BaseRepository[models.Attendance]):
    model = models.Attendance

    def statuses_for(
        self, account_id: str, gathering_ids: Sequence[str]
    ) -> Dict[str, str]:
        if not gathering_ids:
            return {}
        stmt = select(models.Attendance.gathering_id, models.Attendance.status).where(
            models.Attendance.account_id == account_id,
            models.Attendance.gathering_id.in_(list(gathering_ids)),
        )
        return {gathering_id: status for gathering_id, status in self.session.execute(stmt)}


class EventRepository(BaseRepository[models.Event]):
    model = models.Event

    def published_between(self, start: datetime, end: datetime) -> List[models.Event]:
        stmt = (
            select(models.Event)
            .where(
                models.Event.status == "published",
                models.Event.starts_at >= start,
                models.Event.starts_at < end,
            )
            .order_by(models.Event.starts_at)
        )
        return list(self.session.execute(stmt).scalars().all())


class EventRegistrationRepository(BaseRepository[models.EventRegistration]):
    model = models.EventRegistration

    def confirmed_account_ids(self, event_id: str) -> List[str]:
        stmt = select(models.EventRegistration.account_id).where(
            models.EventRegistration.event_id == event_id,
            models.EventRegistration.status == "confirmed",
            models.EventRegistration.account_id.is_not(None),
        )
        return list(self.session.execute(stmt).scalars().all())


class DeliveryLogRepository(BaseRepository[models.DeliveryLogEntry]):
    model = models.DeliveryLogEntry

    def _feed(self, recipient_id: str, channel: str):
        return select(models.DeliveryLogEntry).where(
            models.DeliveryLogEntry.recipient_id == recipient_id,
            models.DeliveryLogEntry.channel == channel,
        )

    def list_feed(
        self,
        recipient_id: str,
        channel: str,
        limit: int,
        offset: int,
        unread_only: bool = False,
    ) -> Tuple[List[models.DeliveryLogEntry], int]:
        """One page of a recipient's feed, newest first, plus the total count."""
        stmt = self._feed(recipient_id, channel)
        if unread_only:
            stmt = stmt.where(models.DeliveryLogEntry.read_at.is_(None))

        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = self.session.execute(
            stmt.order_by(
                models.DeliveryLogEntry.created_at.desc(),
                models.DeliveryLogEntry.id.desc(),
            )
            .offset(offset)
            .limit(limit)
        ).scalars()
        return list(rows.all()), total

    def unread_count(self, recipient_id: str, channel: str) -> int:
        stmt = select(func.count(models.DeliveryLogEntry.id)).where(
            models.DeliveryLogEntry.recipient_id == recipient_id,
            models.DeliveryLogEntry.channel == channel,
            models.DeliveryLogEntry.status == "sent",
            models.DeliveryLogEntry.read_at.is_(None),
        )
        return self.session.execute(stmt).scalar_one()

    def get_feed_entry(
        self, entry_id: str, recipient_id: str, channel: str
    ) -> Optional[models.DeliveryLogEntry]:
        stmt = self._feed(recipient_id, channel).where(
            models.DeliveryLogEntry.id == entry_id
        )
        return self.session.execute(stmt).scalars().first()

    def mark_all_read(self, recipient_id: str, channel: str, read_at: datetime) -> int:
        result = self.session.execute(
            update(models.DeliveryLogEntry)
            .where(
                models.DeliveryLogEntry.recipient_id == recipient_id,
                models.DeliveryLogEntry.channel == channel,
                models.DeliveryLogEntry.read_at.is_(None),
            )
            .values(read_at=read_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def logged_reference_ids(
        self, notification_type: str, reference_ids: Sequence[str]
    ) -> set:
        if not reference_ids:
            return set()
        stmt = (
            select(models.DeliveryLogEntry.reference_id)
            .where(
                models.DeliveryLogEntry.type == notification_type,
                models.DeliveryLogEntry.reference_id.in_(list(reference_ids)),
            )
            .distinct()
        )
        return set(self.session.execute(stmt).scalars().all())
