"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.whatsapp import WhatsAppSettings
from infrastructure.configuration.integrations.email import EmailSettings

__all__ = [
    "WhatsAppSettings",
    "EmailSettings",
]
