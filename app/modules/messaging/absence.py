"""At-risk member detection from gathering attendance."""

from datetime import datetime, timedelta
from typing import List, Optional

from infrastructure.configuration.features import MessagingSettings
from infrastructure.logging import get_module_logger
from infrastructure.persistence import Database, utcnow
from infrastructure.persistence.repositories import (
    AccountRepository,
    AttendanceRepository,
    GatheringRepository,
    GroupMembershipRepository,
)
from modules.messaging.triggers import NotificationTriggers

logger = get_module_logger()

ABSENT = "absent"
ACTIVE = "active"
AT_RISK = "at_risk"


class AttendanceMonitor:
    """Flags members who keep missing their group's gatherings."""

    def __init__(
        self,
        database: Database,
        triggers: NotificationTriggers,
        settings: MessagingSettings,
    ):
        self._database = database
        self._triggers = triggers
        self._settings = settings

    def get_consecutive_absences(self, account_id: str, group_id: str) -> int:
        """Length of the member's current absence streak.

        Looks at the last ``ABSENCE_LOOKBACK`` completed gatherings of the
        group, newest first. A gathering without an attendance record counts
        as an absence.
        """
        with self._database.session_scope() as session:
            gathering_ids = GatheringRepository(session).recent_completed_ids(
                group_id, self._settings.ABSENCE_LOOKBACK
            )
            statuses = AttendanceRepository(session).statuses_for(account_id, gathering_ids)

        streak = 0
        for gathering_id in gathering_ids:
            if statuses.get(gathering_id, ABSENT) != ABSENT:
                break
            streak += 1
        return streak

    def check_and_flag_at_risk(self, gathering_id: str) -> List[str]:
        """Run after a gathering is completed.

        Active members whose streak reached ``AT_RISK_ABSENCE_THRESHOLD`` are
        moved to ``at_risk`` and their group leader is alerted.

        Returns:
            Ids of the members flagged by this call
        """
        with self._database.session_scope() as session:
            gathering = GatheringRepository(session).get(gathering_id)
            if gathering is None:
                logger.warning("at_risk_check_gathering_not_found", gathering_id=gathering_id)
                return []
            group_id = gathering.group_id
            organization_id = gathering.organization_id
            member_ids = GroupMembershipRepository(session).active_account_ids([group_id])

        flagged = []
        for member_id in member_ids:
            streak = self.get_consecutive_absences(member_id, group_id)
            if streak < self._settings.AT_RISK_ABSENCE_THRESHOLD:
                continue

            with self._database.session_scope() as session:
                accounts = AccountRepository(session)
                member = accounts.get(member_id)
                if member is None or member.status != ACTIVE:
                    continue
                accounts.update(member, status=AT_RISK)

            flagged.append(member_id)
            logger.info(
                "member_flagged_at_risk",
                member_id=member_id,
                group_id=group_id,
                consecutive_absences=streak,
            )
            self._triggers.notify_at_risk_member(
                member_id, group_id, organization_id, streak
            )

        return flagged

    def check_recent_gatherings(self, now: Optional[datetime] = None) -> List[str]:
        """Scheduled sweep over gatherings completed in the last ``AT_RISK_SWEEP_HOURS``.

        Safe to repeat: members already at risk are never flagged again.
        """
        now = now or utcnow()
        since = now - timedelta(hours=self._settings.AT_RISK_SWEEP_HOURS)
        with self._database.session_scope() as session:
            gathering_ids = GatheringRepository(session).completed_between(since, now)

        flagged: List[str] = []
        for gathering_id in gathering_ids:
            flagged.extend(self.check_and_flag_at_risk(gathering_id))

        logger.info(
            "at_risk_sweep_completed",
            gatherings=len(gathering_ids),
            flagged=len(flagged),
        )
        return flagged
