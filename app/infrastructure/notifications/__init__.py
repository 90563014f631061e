"""Multi-channel notification dispatch.

Public API:
- Dispatcher: routes a NotificationRequest to the internal feed, business
  messaging and email
- AudienceResolver: turns broadcast targets into recipients
- BroadcastService: administrator broadcasts and audience previews
- DeliveryLog: delivery records and internal feed read-state
"""

from infrastructure.notifications.audience import AudienceResolver
from infrastructure.notifications.channels import (
    EmailChannel,
    InAppChannel,
    NotificationChannel,
    WhatsAppChannel,
)
from infrastructure.notifications.delivery_log import DeliveryLog, FeedPage
from infrastructure.notifications.dispatcher import Dispatcher
from infrastructure.notifications.models import (
    AudienceResult,
    AudienceTarget,
    BaselineDeliveryError,
    BroadcastForbiddenError,
    BroadcastValidationError,
    Channel,
    ChannelPreference,
    Locale,
    MessagePayload,
    MessageResult,
    NotificationError,
    NotificationRequest,
    NotificationTemplate,
    NotificationType,
    RecipientLookupError,
)
from infrastructure.notifications.service import (
    BroadcastRequest,
    BroadcastResult,
    BroadcastService,
)
from infrastructure.notifications.templates import interpolate, lookup

__all__ = [
    "AudienceResolver",
    "AudienceResult",
    "AudienceTarget",
    "BaselineDeliveryError",
    "BroadcastForbiddenError",
    "BroadcastRequest",
    "BroadcastResult",
    "BroadcastService",
    "BroadcastValidationError",
    "Channel",
    "ChannelPreference",
    "DeliveryLog",
    "Dispatcher",
    "EmailChannel",
    "FeedPage",
    "InAppChannel",
    "Locale",
    "MessagePayload",
    "MessageResult",
    "NotificationChannel",
    "NotificationError",
    "NotificationRequest",
    "NotificationTemplate",
    "NotificationType",
    "RecipientLookupError",
    "WhatsAppChannel",
    "interpolate",
    "lookup",
]
