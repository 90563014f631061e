"""Messaging feature settings."""

from typing import List

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings

SUPPORTED_LOCALES = ("ar", "en")
CHANNEL_PREFERENCES = ("business_message", "sms_fallback", "email", "all", "none")


class MessagingSettings(FeatureSettings):
    """Configuration for notification dispatch, broadcasts and scheduled jobs.

    Environment Variables:
        DEFAULT_LOCALE: Locale used when an organization has no primary
            language (default: ar)
        DEFAULT_CHANNEL_PREFERENCE: Preference applied to accounts without one
            (default: all)
        BROADCAST_ROLES: Roles allowed to broadcast and preview audiences
        BROADCAST_BATCH_SIZE: Account recipients dispatched per batch
        DEFAULT_VISITOR_SLA_HOURS: SLA window when an organization sets none
        REMINDER_WINDOW_HOURS: Look-ahead window for gathering/event reminders
        AT_RISK_ABSENCE_THRESHOLD: Consecutive absences that flag a member
        ABSENCE_LOOKBACK: Completed gatherings inspected for absences
        AT_RISK_SWEEP_HOURS: How far back the at-risk job looks for completed gatherings
        SCHEDULER_ENABLED: Run the reminder/SLA jobs in-process

    Example:
        ```python
        from infrastructure.services import get_settings

        messaging = get_settings().messaging
        if messaging.SCHEDULER_ENABLED:
            ...
        ```
    """

    DEFAULT_LOCALE: str = Field(default="ar", alias="DEFAULT_LOCALE")
    DEFAULT_CHANNEL_PREFERENCE: str = Field(
        default="all", alias="DEFAULT_CHANNEL_PREFERENCE"
    )
    BROADCAST_ROLES: List[str] = Field(
        default_factory=lambda: ["super_admin", "ministry_leader"],
        alias="BROADCAST_ROLES",
    )
    BROADCAST_BATCH_SIZE: int = Field(default=10, gt=0, alias="BROADCAST_BATCH_SIZE")
    DEFAULT_VISITOR_SLA_HOURS: int = Field(
        default=48, gt=0, alias="DEFAULT_VISITOR_SLA_HOURS"
    )
    REMINDER_WINDOW_HOURS: int = Field(default=24, gt=0, alias="REMINDER_WINDOW_HOURS")
    AT_RISK_ABSENCE_THRESHOLD: int = Field(
        default=2, gt=0, alias="AT_RISK_ABSENCE_THRESHOLD"
    )
    ABSENCE_LOOKBACK: int = Field(default=6, gt=0, alias="ABSENCE_LOOKBACK")
    AT_RISK_SWEEP_HOURS: int = Field(default=24, gt=0, alias="AT_RISK_SWEEP_HOURS")
    SCHEDULER_ENABLED: bool = Field(default=False, alias="SCHEDULER_ENABLED")

    @field_validator("DEFAULT_LOCALE")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Only Arabic and English content exists in the template catalog."""
        if v not in SUPPORTED_LOCALES:
            raise ValueError(f"DEFAULT_LOCALE must be one of {SUPPORTED_LOCALES}")
        return v

    @field_validator("DEFAULT_CHANNEL_PREFERENCE")
    @classmethod
    def validate_preference(cls, v: str) -> str:
        """Ensure the fallback preference maps through the policy table."""
        if v not in CHANNEL_PREFERENCES:
            raise ValueError(
                f"DEFAULT_CHANNEL_PREFERENCE must be one of {CHANNEL_PREFERENCES}"
            )
        return v
