"""Delivery log and internal feed read-state.

Every attempted delivery is one row in ``notifications_log``. Rows are never
deleted; the only mutation is setting ``read_at`` on internal feed entries,
which is monotonic: once set it is never cleared or overwritten.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    Channel,
    DeliveryStatus,
    MessagePayload,
    MessageResult,
    NotificationType,
)
from infrastructure.persistence import Database, DeliveryLogEntry, utcnow
from infrastructure.persistence.repositories import DeliveryLogRepository

logger = get_module_logger()


@dataclass
class FeedPage:
    entries: List[Dict[str, Any]]
    count: int
    unread_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.count / self.page_size) if self.page_size else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.entries,
            "count": self.count,
            "unreadCount": self.unread_count,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
        }


class DeliveryLog:
    """Writes delivery attempts and serves the internal feed."""

    def __init__(self, database: Database):
        self._database = database

    def record(
        self,
        *,
        organization_id: str,
        notification_type: NotificationType,
        channel: Channel,
        success: bool,
        title: str = "",
        body: str = "",
        recipient_id: Optional[str] = None,
        contact: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
    ) -> str:
        """Insert one entry and commit it immediately.

        Returns:
            The new entry id
        """
        now = utcnow()
        with self._database.session_scope() as session:
            entry = DeliveryLogRepository(session).create(
                organization_id=organization_id,
                recipient_id=recipient_id,
                contact=contact,
                type=notification_type.value,
                channel=channel.value,
                title=title,
                body=body,
                payload=dict(payload or {}),
                status=(DeliveryStatus.SENT if success else DeliveryStatus.FAILED).value,
                error_message=None if success else error_message,
                reference_id=reference_id,
                reference_type=reference_type,
                sent_at=now if success else None,
                created_at=now,
            )
            entry_id = entry.id
        return entry_id

    def record_result(
        self,
        payload: MessagePayload,
        result: MessageResult,
        contact: Optional[str] = None,
    ) -> str:
        """Record a secondary channel attempt from its payload and result."""
        return self.record(
            organization_id=payload.organization_id,
            notification_type=payload.type,
            channel=result.channel,
            success=result.success,
            title=payload.title,
            body=payload.body,
            recipient_id=payload.recipient_id,
            contact=contact,
            payload=payload.params,
            error_message=result.error,
            reference_id=payload.reference_id,
            reference_type=payload.reference_type,
        )

    def list_feed(
        self,
        recipient_id: str,
        page: int = 1,
        page_size: int = 20,
        unread_only: bool = False,
    ) -> FeedPage:
        """Newest-first page of the recipient's internal feed."""
        page = max(page, 1)
        page_size = max(page_size, 1)
        with self._database.session_scope() as session:
            repo = DeliveryLogRepository(session)
            rows, count = repo.list_feed(
                recipient_id,
                Channel.INTERNAL_FEED.value,
                limit=page_size,
                offset=(page - 1) * page_size,
                unread_only=unread_only,
            )
            unread = repo.unread_count(recipient_id, Channel.INTERNAL_FEED.value)
            entries = [row.to_dict() for row in rows]
        return FeedPage(
            entries=entries,
            count=count,
            unread_count=unread,
            page=page,
            page_size=page_size,
        )

    def unread_count(self, recipient_id: str) -> int:
        with self._database.session_scope() as session:
            return DeliveryLogRepository(session).unread_count(
                recipient_id, Channel.INTERNAL_FEED.value
            )

    def mark_read(self, entry_id: str, recipient_id: str) -> Optional[DeliveryLogEntry]:
        """Mark one of the recipient's feed entries read.

        Returns None when the entry does not exist or is not the recipient's
        internal feed entry. Marking an already-read entry keeps its original
        read timestamp.
        """
        with self._database.session_scope() as session:
            entry = DeliveryLogRepository(session).get_feed_entry(
                entry_id, recipient_id, Channel.INTERNAL_FEED.value
            )
            if entry is None:
                return None
            if entry.read_at is None:
                entry.read_at = utcnow()
                session.flush()
        logger.info("notification_marked_read", entry_id=entry_id, recipient_id=recipient_id)
        return entry

    def mark_all_read(self, recipient_id: str) -> int:
        """Mark every unread feed entry of the recipient read; returns rows touched."""
        with self._database.session_scope() as session:
            updated = DeliveryLogRepository(session).mark_all_read(
                recipient_id, Channel.INTERNAL_FEED.value, utcnow()
            )
        logger.info("notifications_marked_read", recipient_id=recipient_id, count=updated)
        return updated

    def logged_reference_ids(
        self, notification_type: NotificationType, reference_ids: Sequence[str]
    ) -> set:
        """Reference ids that already have at least one entry of this type."""
        with self._database.session_scope() as session:
            return DeliveryLogRepository(session).logged_reference_ids(
                notification_type.value, reference_ids
            )
