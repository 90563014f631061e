"""Relational persistence: engine/session management, ORM models and repositories."""

from infrastructure.persistence.database import Database
from infrastructure.persistence.models import Base, DeliveryLogEntry, utcnow

__all__ = ["Base", "Database", "DeliveryLogEntry", "utcnow"]
