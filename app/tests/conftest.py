import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.configuration`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from infrastructure.configuration.features import MessagingSettings  # noqa: E402
from infrastructure.notifications import DeliveryLog  # noqa: E402
from infrastructure.persistence import Database  # noqa: E402


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with every table created.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    db = Database("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def delivery_log(database):
    return DeliveryLog(database)


@pytest.fixture
def messaging_settings():
    """Messaging settings with defaults, independent of the local environment."""
    return MessagingSettings(
        DEFAULT_LOCALE="ar",
        DEFAULT_CHANNEL_PREFERENCE="all",
        BROADCAST_ROLES=["super_admin", "ministry_leader"],
        BROADCAST_BATCH_SIZE=2,
        DEFAULT_VISITOR_SLA_HOURS=48,
        REMINDER_WINDOW_HOURS=24,
        AT_RISK_ABSENCE_THRESHOLD=2,
        ABSENCE_LOOKBACK=6,
        SCHEDULER_ENABLED=False,
    )
