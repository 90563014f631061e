"""Notification channel abstract base class.

All channel implementations (internal feed, business messaging, email) must
implement this interface.
"""

from abc import ABC, abstractmethod

from infrastructure.notifications.models import Channel, MessagePayload, MessageResult


class NotificationChannel(ABC):
    """Abstract base class for notification channels.

    Each channel handles delivery through a specific medium:
    - InAppChannel: internal feed row in ``notifications_log``
    - WhatsAppChannel: 360dialog template message
    - EmailChannel: SendGrid transactional email

    Providers are constructor-injected into the dispatcher, so tests can pass
    fakes implementing this interface.

    Example Implementation:
        class FakeChannel(NotificationChannel):

            @property
            def channel_name(self) -> Channel:
                return Channel.EMAIL

            def is_configured(self) -> bool:
                return True

            def send(self, payload: MessagePayload) -> MessageResult:
                return MessageResult.ok(self.channel_name, message_id="fake-1")
    """

    @property
    @abstractmethod
    def channel_name(self) -> Channel:
        """Channel identifier used for routing and logging."""

    @abstractmethod
    def is_configured(self) -> bool:
        """True when the provider has the credentials it needs to send."""

    @abstractmethod
    def send(self, payload: MessagePayload) -> MessageResult:
        """Deliver one message.

        Must handle errors gracefully and return a failed MessageResult rather
        than raising exceptions.

        Args:
            payload: MessagePayload for a single recipient

        Returns:
            MessageResult for this channel
        """
