"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.messaging import MessagingSettings

__all__ = [
    "MessagingSettings",
]
