"""Broadcast and audience-preview service.

Administrators compose one bilingual message and a list of audience targets;
the service resolves the audience and hands every recipient to the dispatcher.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from infrastructure.configuration.features import MessagingSettings
from infrastructure.logging import get_module_logger
from infrastructure.notifications.audience import AudienceResolver
from infrastructure.notifications.dispatcher import Dispatcher
from infrastructure.notifications.models import (
    AudienceTarget,
    BroadcastForbiddenError,
    BroadcastValidationError,
    Locale,
    NotificationRequest,
    NotificationType,
    RecipientLookupError,
)
from infrastructure.persistence import Database
from infrastructure.persistence.repositories import AccountRepository

logger = get_module_logger()

BROADCAST_REFERENCE_TYPE = "broadcast"


class BroadcastRequest(BaseModel):
    """Administrator broadcast. Arabic content is mandatory, English optional."""

    title_ar: Optional[str] = None
    body_ar: Optional[str] = None
    title_en: Optional[str] = None
    body_en: Optional[str] = None
    targets: List[AudienceTarget] = Field(default_factory=list)


@dataclass
class BroadcastResult:
    sent: int
    targets: int

    def to_dict(self) -> Dict[str, int]:
        return {"sent": self.sent, "targets": self.targets}


@dataclass
class Broadcaster:
    account_id: str
    organization_id: str
    role: str


class BroadcastService:
    """Resolves broadcast audiences and fans the message out to them.

    Account recipients go through the full dispatcher (internal feed plus
    their preferred channels), in batches of ``BROADCAST_BATCH_SIZE``.
    External contacts receive a business message only.
    """

    def __init__(
        self,
        database: Database,
        dispatcher: Dispatcher,
        audience: AudienceResolver,
        settings: MessagingSettings,
    ):
        self._database = database
        self._dispatcher = dispatcher
        self._audience = audience
        self._settings = settings

    def authorize(self, account_id: str) -> Broadcaster:
        """Load the caller and check their role may broadcast.

        Raises:
            RecipientLookupError: No account with this id
            BroadcastForbiddenError: Role not in BROADCAST_ROLES
        """
        with self._database.session_scope() as session:
            account = AccountRepository(session).get(account_id)
            if account is None:
                raise RecipientLookupError("account", account_id)
            broadcaster = Broadcaster(
                account_id=account.id,
                organization_id=account.organization_id,
                role=account.role,
            )

        if broadcaster.role not in self._settings.BROADCAST_ROLES:
            logger.warning(
                "broadcast_forbidden", account_id=account_id, role=broadcaster.role
            )
            raise BroadcastForbiddenError(f"Role {broadcaster.role} may not broadcast")
        return broadcaster

    def preview(self, account_id: str, targets: Sequence[AudienceTarget]) -> Dict[str, int]:
        """Audience counts for the caller's organization."""
        broadcaster = self.authorize(account_id)
        if not targets:
            return {"profileCount": 0, "visitorCount": 0, "total": 0}

        counts = self._audience.count(broadcaster.organization_id, list(targets))
        return {
            "profileCount": counts["profile_count"],
            "visitorCount": counts["visitor_count"],
            "total": counts["total"],
        }

    def broadcast(self, account_id: str, request: BroadcastRequest) -> BroadcastResult:
        """Send a broadcast on behalf of ``account_id``.

        Raises:
            BroadcastValidationError: Missing Arabic content, no targets or
                no recipients
        """
        broadcaster = self.authorize(account_id)

        if not request.title_ar or not request.body_ar:
            raise BroadcastValidationError("Arabic title and body are required")
        if not request.targets:
            raise BroadcastValidationError("At least one target is required")

        organization_id = broadcaster.organization_id
        audience = self._audience.resolve(organization_id, request.targets)
        if audience.total == 0:
            raise BroadcastValidationError("No recipients found for the selected targets")

        title_en = request.title_en or request.title_ar
        body_en = request.body_en or request.body_ar
        sent = 0

        account_ids = sorted(audience.account_ids)
        batch_size = self._settings.BROADCAST_BATCH_SIZE
        for batch_number, start in enumerate(range(0, len(account_ids), batch_size), 1):
            batch = account_ids[start : start + batch_size]
            batch_sent = 0
            for recipient_id in batch:
                try:
                    self._dispatcher.send(
                        NotificationRequest(
                            recipient_id=recipient_id,
                            organization_id=organization_id,
                            type=NotificationType.GENERAL,
                            title_ar=request.title_ar,
                            title_en=title_en,
                            body_ar=request.body_ar,
                            body_en=body_en,
                            reference_type=BROADCAST_REFERENCE_TYPE,
                        )
                    )
                    batch_sent += 1
                except Exception as e:
                    logger.error(
                        "broadcast_recipient_failed",
                        recipient_id=recipient_id,
                        error=str(e),
                    )
            sent += batch_sent
            logger.info(
                "broadcast_batch_dispatched",
                organization_id=organization_id,
                batch=batch_number,
                size=len(batch),
                sent=batch_sent,
            )

        for phone, name in audience.external_contacts.items():
            try:
                result = self._dispatcher.send_to_contact(
                    organization_id,
                    phone,
                    NotificationType.GENERAL,
                    {"title": request.title_ar, "body": request.body_ar, "name": name},
                    locale=Locale.AR,
                    reference_type=BROADCAST_REFERENCE_TYPE,
                )
            except Exception as e:
                logger.error("broadcast_contact_failed", error=str(e))
                continue
            if result is not None and result.success:
                sent += 1

        logger.info(
            "broadcast_completed",
            organization_id=organization_id,
            sender_id=account_id,
            sent=sent,
            targets=audience.total,
        )
        return BroadcastResult(sent=sent, targets=audience.total)
