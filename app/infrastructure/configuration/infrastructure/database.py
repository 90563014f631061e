"""Relational datastore settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DatabaseSettings(InfrastructureSettings):
    """SQLAlchemy engine configuration.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL (default: local SQLite file)
        DATABASE_ECHO: Log emitted SQL statements

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        url = settings.database.DATABASE_URL
        ```
    """

    DATABASE_URL: str = Field(
        default="sqlite+pysqlite:///./ekklesia.db", alias="DATABASE_URL"
    )
    DATABASE_ECHO: bool = Field(default=False, alias="DATABASE_ECHO")
