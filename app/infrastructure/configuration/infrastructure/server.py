"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        ALLOWED_ORIGINS: JSON list of CORS origins
        ACCOUNT_HEADER: Header carrying the authenticated account id,
            set by the gateway in front of the API

    Example:
        ```python
        from infrastructure.services import get_settings

        origins = get_settings().server.ALLOWED_ORIGINS
        ```
    """

    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="ALLOWED_ORIGINS",
    )
    ACCOUNT_HEADER: str = Field(default="X-Account-Id", alias="ACCOUNT_HEADER")
