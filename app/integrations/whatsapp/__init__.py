"""WhatsApp Business API integration (360dialog)."""

from integrations.whatsapp.client import WhatsAppClient

__all__ = ["WhatsAppClient"]
