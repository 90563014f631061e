"""Row builders for the SQLite test database.

Each factory inserts one row with sensible defaults, commits it and returns
its id. Keyword overrides map straight onto ORM columns.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from infrastructure.persistence import Database
from infrastructure.persistence import models


def _insert(database: Database, model, **values) -> str:
    with database.session_scope() as session:
        row = model(**values)
        session.add(row)
        session.flush()
        return row.id


def make_organization(
    database: Database,
    name: str = "Grace Church",
    name_ar: Optional[str] = "كنيسة النعمة",
    primary_language: Optional[str] = "ar",
    **overrides,
) -> str:
    return _insert(
        database,
        models.Organization,
        name=name,
        name_ar=name_ar,
        primary_language=primary_language,
        **overrides,
    )


def make_account(
    database: Database,
    organization_id: str,
    first_name: str = "Sara",
    last_name: str = "Mansour",
    role: str = "member",
    status: str = "active",
    phone: Optional[str] = None,
    email: Optional[str] = None,
    notification_pref: Optional[str] = None,
    onboarding_completed: bool = True,
    **overrides,
) -> str:
    return _insert(
        database,
        models.Account,
        organization_id=organization_id,
        first_name=first_name,
        last_name=last_name,
        role=role,
        status=status,
        phone=phone,
        email=email,
        notification_pref=notification_pref,
        onboarding_completed=onboarding_completed,
        **overrides,
    )


def make_group(
    database: Database,
    organization_id: str,
    name: str = "Youth",
    name_ar: Optional[str] = "الشباب",
    leader_id: Optional[str] = None,
    ministry_id: Optional[str] = None,
    is_active: bool = True,
) -> str:
    return _insert(
        database,
        models.Group,
        organization_id=organization_id,
        name=name,
        name_ar=name_ar,
        leader_id=leader_id,
        ministry_id=ministry_id,
        is_active=is_active,
    )


def make_membership(
    database: Database,
    organization_id: str,
    group_id: str,
    account_id: str,
    is_active: bool = True,
) -> str:
    return _insert(
        database,
        models.GroupMembership,
        organization_id=organization_id,
        group_id=group_id,
        account_id=account_id,
        is_active=is_active,
    )


def make_visitor(
    database: Database,
    organization_id: str,
    first_name: str = "Karim",
    last_name: Optional[str] = "Haddad",
    phone: Optional[str] = "+961 70 123 456",
    status: str = "new",
    visited_at: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
    **overrides,
) -> str:
    now = datetime.now(timezone.utc)
    return _insert(
        database,
        models.Visitor,
        organization_id=organization_id,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        status=status,
        visited_at=visited_at or now,
        created_at=created_at or now,
        **overrides,
    )


def make_gathering(
    database: Database,
    organization_id: str,
    group_id: str,
    scheduled_at: Optional[datetime] = None,
    location: Optional[str] = "Hall B",
    status: str = "scheduled",
) -> str:
    return _insert(
        database,
        models.Gathering,
        organization_id=organization_id,
        group_id=group_id,
        scheduled_at=scheduled_at or datetime.now(timezone.utc) + timedelta(hours=20),
        location=location,
        status=status,
    )


def make_attendance(
    database: Database, gathering_id: str, account_id: str, status: str = "present"
) -> str:
    return _insert(
        database,
        models.Attendance,
        gathering_id=gathering_id,
        account_id=account_id,
        status=status,
    )


def make_event(
    database: Database,
    organization_id: str,
    title: str = "Spring Retreat",
    title_ar: Optional[str] = "خلوة الربيع",
    starts_at: Optional[datetime] = None,
    location: Optional[str] = "Camp Cedar",
    status: str = "published",
) -> str:
    return _insert(
        database,
        models.Event,
        organization_id=organization_id,
        title=title,
        title_ar=title_ar,
        starts_at=starts_at or datetime.now(timezone.utc) + timedelta(hours=20),
        location=location,
        status=status,
    )


def make_registration(
    database: Database,
    event_id: str,
    account_id: Optional[str],
    status: str = "confirmed",
) -> str:
    return _insert(
        database,
        models.EventRegistration,
        event_id=event_id,
        account_id=account_id,
        status=status,
    )
