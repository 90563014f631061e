"""Transactional email delivery through SendGrid."""

from integrations.sendgrid_mail.client import SendGridEmailClient

__all__ = ["SendGridEmailClient"]
