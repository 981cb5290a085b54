"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP server configuration.

    Environment Variables:
        ALLOWED_ORIGINS: Comma separated CORS origins used outside production
        EVENTS_RATE_LIMIT: slowapi limit applied to event ingestion
        BADGE_RATE_LIMIT: slowapi limit applied to the badge reset callable

    Example:
        ```python
        from infrastructure.services import get_settings

        origins = get_settings().server.allowed_origins
        ```
    """

    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:8000,http://127.0.0.1:8000",
        alias="ALLOWED_ORIGINS",
    )
    EVENTS_RATE_LIMIT: str = Field(default="600/minute", alias="EVENTS_RATE_LIMIT")
    BADGE_RATE_LIMIT: str = Field(default="30/minute", alias="BADGE_RATE_LIMIT")

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins parsed from the comma separated setting."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
