"""Notification dispatch core models.

Domain events and broadcasts are expressed as ``NotificationRequest`` objects.
The dispatcher turns a request into one ``MessagePayload`` per channel and
collects a ``MessageResult`` from each channel provider.

Uses Pydantic BaseModel for:
- Runtime input validation of requests built by triggers and the API layer
- Discriminated unions for audience targets
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Channel(Enum):
    """Delivery channels.

    ``INTERNAL_FEED`` is the mandatory baseline channel and is attempted for
    every account recipient.
    """

    INTERNAL_FEED = "internal_feed"
    BUSINESS_MESSAGE = "business_message"
    EMAIL = "email"


class ChannelPreference(Enum):
    """Per-account channel preference stored on the account record."""

    BUSINESS_MESSAGE = "business_message"
    SMS_FALLBACK = "sms_fallback"
    EMAIL = "email"
    ALL = "all"
    NONE = "none"


PREFERENCE_CHANNELS: Dict[ChannelPreference, frozenset] = {
    ChannelPreference.BUSINESS_MESSAGE: frozenset(
        {Channel.BUSINESS_MESSAGE, Channel.INTERNAL_FEED}
    ),
    # No SMS provider exists; SMS preference is served by business messaging.
    ChannelPreference.SMS_FALLBACK: frozenset(
        {Channel.BUSINESS_MESSAGE, Channel.INTERNAL_FEED}
    ),
    ChannelPreference.EMAIL: frozenset({Channel.EMAIL, Channel.INTERNAL_FEED}),
    ChannelPreference.ALL: frozenset(
        {Channel.BUSINESS_MESSAGE, Channel.EMAIL, Channel.INTERNAL_FEED}
    ),
    ChannelPreference.NONE: frozenset({Channel.INTERNAL_FEED}),
}


class NotificationType(Enum):
    GATHERING_REMINDER = "gathering_reminder"
    VISITOR_ASSIGNED = "visitor_assigned"
    VISITOR_WELCOME = "visitor_welcome"
    AT_RISK_ALERT = "at_risk_alert"
    VISITOR_SLA_WARNING = "visitor_sla_warning"
    EVENT_REMINDER = "event_reminder"
    GENERAL = "general"


class Locale(Enum):
    AR = "ar"
    EN = "en"

    @classmethod
    def for_language(cls, primary_language: Optional[str], default: "Locale") -> "Locale":
        """English only when the organization says so, otherwise ``default``."""
        if primary_language == cls.EN.value:
            return cls.EN
        return default


class DeliveryStatus(Enum):
    """Status recorded on a delivery log entry.

    Read-state is tracked by the entry's read timestamp, not by this status.
    """

    SENT = "sent"
    FAILED = "failed"


class NotificationRequest(BaseModel):
    """A request to notify one account.

    Attributes:
        recipient_id: Account to notify
        organization_id: Tenant the notification belongs to
        type: NotificationType of the triggering event
        title_ar / body_ar: Arabic content (required)
        title_en / body_en: English content (falls back to Arabic)
        reference_id / reference_type: Domain row the notification is about
        data: Interpolation parameters, also sent as provider parameters
        channels: Explicit channel list overriding the account preference
        phone / email: Contact overrides for the account's own details

    Example:
        request = NotificationRequest(
            recipient_id=leader_id,
            organization_id=org_id,
            type=NotificationType.VISITOR_ASSIGNED,
            title_ar="زائر جديد مُسنَد إليك",
            title_en="New Visitor Assigned",
            body_ar="...",
            body_en="...",
            reference_id=visitor_id,
            reference_type="visitor",
            data={"visitorName": "Karim Haddad"},
        )
    """

    recipient_id: str
    organization_id: str
    type: NotificationType
    title_ar: str
    body_ar: str
    title_en: Optional[str] = None
    body_en: Optional[str] = None
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None
    data: Dict[str, str] = Field(default_factory=dict)
    channels: Optional[List[Channel]] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("recipient_id", "organization_id")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Identifier cannot be empty")
        return v

    def title_for(self, locale: Locale) -> str:
        if locale == Locale.EN and self.title_en:
            return self.title_en
        return self.title_ar

    def body_for(self, locale: Locale) -> str:
        if locale == Locale.EN and self.body_en:
            return self.body_en
        return self.body_ar


@dataclass(frozen=True)
class NotificationTemplate:
    """Catalog entry for one notification type.

    ``param_order`` lists the parameter names in the positional order the
    approved business-message template expects them.
    """

    type: NotificationType
    business_template: str
    param_order: tuple
    title_en: str
    title_ar: str
    body_en: str
    body_ar: str
    subject_en: str
    subject_ar: str

    def title(self, locale: Locale) -> str:
        return self.title_en if locale == Locale.EN else self.title_ar

    def body(self, locale: Locale) -> str:
        return self.body_en if locale == Locale.EN else self.body_ar

    def subject(self, locale: Locale) -> str:
        return self.subject_en if locale == Locale.EN else self.subject_ar


@dataclass
class MessagePayload:
    """Everything a channel provider needs for one delivery."""

    organization_id: str
    type: NotificationType
    locale: Locale
    title: str
    body: str
    recipient_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    template: Optional[NotificationTemplate] = None
    params: Dict[str, str] = field(default_factory=dict)
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None


@dataclass
class MessageResult:
    """Outcome of one provider send. Providers return these instead of raising."""

    channel: Channel
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, channel: Channel, message_id: Optional[str] = None) -> "MessageResult":
        return cls(channel=channel, success=True, message_id=message_id)

    @classmethod
    def failed(cls, channel: Channel, error: str) -> "MessageResult":
        return cls(channel=channel, success=False, error=error)


# Audience targets


class AllInOrg(BaseModel):
    type: Literal["all_in_org"] = "all_in_org"


class ByRole(BaseModel):
    type: Literal["by_role"] = "by_role"
    roles: List[str] = Field(default_factory=list)


class ByGroup(BaseModel):
    type: Literal["by_group"] = "by_group"
    group_ids: List[str] = Field(default_factory=list)


class ByMinistry(BaseModel):
    type: Literal["by_ministry"] = "by_ministry"
    ministry_ids: List[str] = Field(default_factory=list)


class ByStatus(BaseModel):
    type: Literal["by_status"] = "by_status"
    statuses: List[str] = Field(default_factory=list)


class ByExternalStatus(BaseModel):
    type: Literal["by_external_status"] = "by_external_status"
    statuses: List[str] = Field(default_factory=list)


class ByGender(BaseModel):
    type: Literal["by_gender"] = "by_gender"
    gender: Optional[str] = None


AudienceTarget = Annotated[
    Union[AllInOrg, ByRole, ByGroup, ByMinistry, ByStatus, ByExternalStatus, ByGender],
    Field(discriminator="type"),
]


@dataclass
class AudienceResult:
    """Resolved broadcast audience.

    Attributes:
        account_ids: Deduplicated account ids
        external_contacts: Phone number to display name for contacts without
            an account
    """

    account_ids: set = field(default_factory=set)
    external_contacts: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.account_ids) + len(self.external_contacts)


# Errors


class NotificationError(Exception):
    """Base class for notification dispatch errors."""


class RecipientLookupError(NotificationError):
    """A row a trigger needs (visitor, account, group, ...) does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class BaselineDeliveryError(NotificationError):
    """The internal feed entry could not be written.

    Raised after the secondary channels were attempted; ``results`` carries
    the full per-channel outcome.
    """

    def __init__(self, results: Dict[Channel, MessageResult]):
        baseline = results.get(Channel.INTERNAL_FEED)
        reason = baseline.error if baseline else "not attempted"
        super().__init__(f"Internal feed delivery failed: {reason}")
        self.results = results


class BroadcastValidationError(NotificationError):
    """Broadcast request rejected before any delivery was attempted."""


class BroadcastForbiddenError(NotificationError):
    """Caller's role may not broadcast or preview audiences."""
