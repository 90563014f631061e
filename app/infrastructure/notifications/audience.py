"""Audience resolution for broadcasts.

Turns a list of ``AudienceTarget`` criteria into a deduplicated set of account
ids plus a phone-keyed map of external contacts. Targets are unioned; a target
with an empty criteria list contributes nothing.
"""

import re
from typing import Dict, Iterable, List, assert_never

from sqlalchemy.orm import Session

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    AllInOrg,
    AudienceResult,
    AudienceTarget,
    ByExternalStatus,
    ByGender,
    ByGroup,
    ByMinistry,
    ByRole,
    ByStatus,
)
from infrastructure.persistence import Database
from infrastructure.persistence.repositories import (
    AccountRepository,
    GroupMembershipRepository,
    GroupRepository,
    VisitorRepository,
)

logger = get_module_logger()

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """Digits-only form used to compare and deliver phone numbers."""
    return _NON_DIGITS.sub("", phone or "")


class AudienceResolver:
    """Resolves broadcast targets against the organization's records."""

    def __init__(self, database: Database):
        self._database = database

    def resolve(self, organization_id: str, targets: List[AudienceTarget]) -> AudienceResult:
        """Union every target into one deduplicated audience.

        External contacts whose phone matches a resolved account's phone are
        dropped so the same person is not messaged twice.
        """
        result = AudienceResult()

        with self._database.session_scope() as session:
            for target in targets:
                self._apply(session, organization_id, target, result)

            if result.external_contacts and result.account_ids:
                account_phones = {
                    normalize_phone(phone)
                    for phone in AccountRepository(session).phones_for(result.account_ids)
                }
                result.external_contacts = {
                    phone: name
                    for phone, name in result.external_contacts.items()
                    if normalize_phone(phone) not in account_phones
                }

        logger.info(
            "audience_resolved",
            organization_id=organization_id,
            target_count=len(targets),
            account_count=len(result.account_ids),
            external_count=len(result.external_contacts),
        )
        return result

    def count(self, organization_id: str, targets: List[AudienceTarget]) -> Dict[str, int]:
        """Preview counts; always computed from a full resolution."""
        result = self.resolve(organization_id, targets)
        return {
            "profile_count": len(result.account_ids),
            "visitor_count": len(result.external_contacts),
            "total": result.total,
        }

    def _apply(
        self,
        session: Session,
        organization_id: str,
        target: AudienceTarget,
        result: AudienceResult,
    ) -> None:
        accounts = AccountRepository(session)
        match target:
            case AllInOrg():
                self._add(result, accounts.onboarded_ids(organization_id))
            case ByRole(roles=roles):
                if roles:
                    self._add(result, accounts.onboarded_ids(organization_id, roles=roles))
            case ByGroup(group_ids=group_ids):
                if group_ids:
                    self._add(
                        result,
                        GroupMembershipRepository(session).active_account_ids(
                            group_ids, organization_id=organization_id
                        ),
                    )
            case ByMinistry(ministry_ids=ministry_ids):
                if ministry_ids:
                    group_ids = GroupRepository(session).active_ids_for_ministries(
                        organization_id, ministry_ids
                    )
                    if group_ids:
                        self._add(
                            result,
                            GroupMembershipRepository(session).active_account_ids(
                                group_ids, organization_id=organization_id
                            ),
                        )
            case ByStatus(statuses=statuses):
                if statuses:
                    self._add(
                        result, accounts.onboarded_ids(organization_id, statuses=statuses)
                    )
            case ByExternalStatus(statuses=statuses):
                if statuses:
                    visitors = VisitorRepository(session).with_phone_by_status(
                        organization_id, statuses
                    )
                    for visitor in visitors:
                        if visitor.phone:
                            name = f"{visitor.first_name} {visitor.last_name or ''}".strip()
                            result.external_contacts[visitor.phone] = name
            case ByGender(gender=gender):
                if gender:
                    self._add(result, accounts.onboarded_ids(organization_id, gender=gender))
            case _:
                assert_never(target)

    @staticmethod
    def _add(result: AudienceResult, account_ids: Iterable[str]) -> None:
        result.account_ids.update(account_ids)
