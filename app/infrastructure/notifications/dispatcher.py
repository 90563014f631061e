"""Notification dispatcher with preference-based channel routing.

Turns one NotificationRequest into deliveries across the internal feed,
business messaging and email:
- Picks Arabic or English content from the organization's primary language
- Resolves the channel set from the explicit list or the account preference
- Always writes the internal feed entry
- Attempts business messaging and email only when the channel is selected,
  the contact detail exists, a template exists and the provider is configured
- Logs every secondary attempt to the delivery log

Usage Example:
    from infrastructure.notifications import Dispatcher, NotificationRequest

    dispatcher = Dispatcher(
        database=database,
        channels=[in_app_channel, whatsapp_channel, email_channel],
        delivery_log=delivery_log,
    )

    results = dispatcher.send(request)
    if results[Channel.BUSINESS_MESSAGE].success:
        ...
"""

from typing import Dict, Iterable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications import templates
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.models import (
    PREFERENCE_CHANNELS,
    BaselineDeliveryError,
    Channel,
    ChannelPreference,
    Locale,
    MessagePayload,
    MessageResult,
    NotificationRequest,
    NotificationType,
)
from infrastructure.persistence import Database
from infrastructure.persistence.repositories import (
    AccountRepository,
    OrganizationRepository,
)

logger = get_module_logger()

SECONDARY_CHANNELS = (Channel.BUSINESS_MESSAGE, Channel.EMAIL)


class Dispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        channels: Dict mapping Channel to its NotificationChannel provider
        default_locale: Locale used when the organization's language is not English
        default_preference: Preference applied when an account has none

    Example:
        dispatcher = Dispatcher(
            database=database,
            channels=[InAppChannel(log), WhatsAppChannel(client)],
            delivery_log=log,
        )
        results = dispatcher.send(request)
    """

    def __init__(
        self,
        database: Database,
        channels: Iterable[NotificationChannel],
        delivery_log: DeliveryLog,
        default_locale: Locale = Locale.AR,
        default_preference: ChannelPreference = ChannelPreference.ALL,
    ):
        self._database = database
        self._delivery_log = delivery_log
        self.channels: Dict[Channel, NotificationChannel] = {
            channel.channel_name: channel for channel in channels
        }
        if Channel.INTERNAL_FEED not in self.channels:
            raise ValueError("An internal feed channel is required")
        self.default_locale = default_locale
        self.default_preference = default_preference

        logger.info(
            "initialized_notification_dispatcher",
            channels=[channel.value for channel in self.channels],
            default_locale=default_locale.value,
            default_preference=default_preference.value,
        )

    def send(self, request: NotificationRequest) -> Dict[Channel, MessageResult]:
        """Dispatch one request to every applicable channel.

        Args:
            request: NotificationRequest for a single account

        Returns:
            Dict mapping each attempted Channel to its MessageResult

        Raises:
            BaselineDeliveryError: The internal feed entry could not be written.
                Raised only after the secondary channels were attempted.
        """
        account_phone, account_email, preference, locale = self._recipient_context(request)
        selected = self.resolve_channels(request, preference)
        phone = request.phone or account_phone
        email = request.email or account_email
        template = templates.lookup(request.type)

        title = request.title_for(locale)
        body = request.body_for(locale)
        params = dict(request.data)
        params.setdefault("title", title)
        params.setdefault("body", body)

        payload = MessagePayload(
            organization_id=request.organization_id,
            type=request.type,
            locale=locale,
            title=title,
            body=body,
            recipient_id=request.recipient_id,
            phone=phone,
            email=email,
            template=template,
            params=params,
            reference_id=request.reference_id,
            reference_type=request.reference_type,
        )

        results: Dict[Channel, MessageResult] = {
            Channel.INTERNAL_FEED: self._attempt(
                self.channels[Channel.INTERNAL_FEED], payload
            )
        }

        contacts = {Channel.BUSINESS_MESSAGE: phone, Channel.EMAIL: email}
        for channel in SECONDARY_CHANNELS:
            if channel not in selected:
                continue
            provider = self.channels.get(channel)
            if provider is None or not contacts[channel] or template is None:
                continue
            if not provider.is_configured():
                logger.debug("channel_skipped_not_configured", channel=channel.value)
                continue

            result = self._attempt(provider, payload)
            results[channel] = result
            self._log_attempt(payload, result)

        logger.info(
            "notification_dispatched",
            notification_type=request.type.value,
            recipient_id=request.recipient_id,
            locale=locale.value,
            channels=sorted(channel.value for channel in results),
            failed=sorted(
                channel.value for channel, result in results.items() if not result.success
            ),
        )

        if not results[Channel.INTERNAL_FEED].success:
            raise BaselineDeliveryError(results)
        return results

    def send_to_contact(
        self,
        organization_id: str,
        phone: str,
        notification_type: NotificationType,
        params: Dict[str, str],
        locale: Optional[Locale] = None,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
    ) -> Optional[MessageResult]:
        """Send a business message to an external contact without an account.

        Only business messaging applies. The attempt is logged with no
        recipient account and the phone as contact.

        Returns:
            The MessageResult, or None when the send was skipped (no phone,
            no template or provider not configured)
        """
        provider = self.channels.get(Channel.BUSINESS_MESSAGE)
        template = templates.lookup(notification_type)
        if not phone or template is None or provider is None:
            return None
        if not provider.is_configured():
            logger.debug("contact_send_skipped_not_configured", type=notification_type.value)
            return None

        if locale is None:
            locale = self._organization_locale(organization_id)

        payload = MessagePayload(
            organization_id=organization_id,
            type=notification_type,
            locale=locale,
            title=templates.interpolate(template.title(locale), params),
            body=templates.interpolate(template.body(locale), params),
            phone=phone,
            template=template,
            params=dict(params),
            reference_id=reference_id,
            reference_type=reference_type,
        )

        result = self._attempt(provider, payload)
        self._log_attempt(payload, result, contact=phone)
        logger.info(
            "contact_notification_dispatched",
            notification_type=notification_type.value,
            organization_id=organization_id,
            success=result.success,
        )
        return result

    def resolve_channels(
        self, request: NotificationRequest, preference: ChannelPreference
    ) -> frozenset:
        """Channel set for a request; the internal feed is always included."""
        if request.channels is not None:
            return frozenset(request.channels) | {Channel.INTERNAL_FEED}
        return PREFERENCE_CHANNELS[preference]

    def _recipient_context(self, request: NotificationRequest):
        """Load the account's contact details, preference and the org locale."""
        with self._database.session_scope() as session:
            account = AccountRepository(session).get(request.recipient_id)
            organization = OrganizationRepository(session).get(request.organization_id)

            if account is None:
                logger.warning(
                    "notification_recipient_not_found", recipient_id=request.recipient_id
                )
                phone, email, preference = None, None, self.default_preference
            else:
                phone, email = account.phone, account.email
                preference = self._parse_preference(account.notification_pref)

            locale = Locale.for_language(
                organization.primary_language if organization else None,
                self.default_locale,
            )
        return phone, email, preference, locale

    def _organization_locale(self, organization_id: str) -> Locale:
        with self._database.session_scope() as session:
            organization = OrganizationRepository(session).get(organization_id)
            language = organization.primary_language if organization else None
        return Locale.for_language(language, self.default_locale)

    def _parse_preference(self, value: Optional[str]) -> ChannelPreference:
        if not value:
            return self.default_preference
        try:
            return ChannelPreference(value)
        except ValueError:
            logger.warning("unknown_channel_preference", preference=value)
            return self.default_preference

    def _attempt(
        self, provider: NotificationChannel, payload: MessagePayload
    ) -> MessageResult:
        try:
            return provider.send(payload)
        except Exception as e:
            logger.error(
                "channel_send_failed",
                channel=provider.channel_name.value,
                error=str(e),
                exc_info=True,
            )
            return MessageResult.failed(provider.channel_name, f"Channel exception: {e}")

    def _log_attempt(
        self,
        payload: MessagePayload,
        result: MessageResult,
        contact: Optional[str] = None,
    ) -> None:
        try:
            self._delivery_log.record_result(payload, result, contact=contact)
        except Exception as e:
            logger.error(
                "delivery_log_write_failed",
                channel=result.channel.value,
                notification_type=payload.type.value,
                error=str(e),
                exc_info=True,
            )
