"""Internal feed channel: writes the notification straight to the delivery log."""

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.models import Channel, MessagePayload, MessageResult

logger = get_module_logger()


class InAppChannel(NotificationChannel):
    """Inserts a ``sent`` internal feed entry for an account. Always configured."""

    def __init__(self, delivery_log: DeliveryLog):
        self._delivery_log = delivery_log

    @property
    def channel_name(self) -> Channel:
        return Channel.INTERNAL_FEED

    def is_configured(self) -> bool:
        return True

    def send(self, payload: MessagePayload) -> MessageResult:
        if not payload.recipient_id:
            return MessageResult.failed(
                self.channel_name, "Internal feed requires a recipient account"
            )

        try:
            entry_id = self._delivery_log.record(
                organization_id=payload.organization_id,
                notification_type=payload.type,
                channel=self.channel_name,
                success=True,
                title=payload.title or payload.type.value,
                body=payload.body or "",
                recipient_id=payload.recipient_id,
                payload=payload.params,
                reference_id=payload.reference_id,
                reference_type=payload.reference_type,
            )
        except Exception as e:
            logger.error(
                "internal_feed_insert_failed",
                recipient_id=payload.recipient_id,
                notification_type=payload.type.value,
                error=str(e),
                exc_info=True,
            )
            return MessageResult.failed(self.channel_name, str(e))

        return MessageResult.ok(self.channel_name, message_id=entry_id)
