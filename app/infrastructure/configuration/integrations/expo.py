"""Expo push service integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class ExpoSettings(IntegrationSettings):
    """Expo push API configuration.

    Environment Variables:
        EXPO_PUSH_URL: Expo push send endpoint
        EXPO_ACCESS_TOKEN: Optional access token for enhanced push security
        EXPO_CHUNK_SIZE: Messages per request (Expo accepts at most 100)
        EXPO_TIMEOUT_SECONDS: HTTP timeout per chunk request
        EXPO_EXPERIENCE_ID: "@owner/slug" added to message data as experienceId/scopeKey

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        url = settings.expo.EXPO_PUSH_URL
        chunk_size = settings.expo.EXPO_CHUNK_SIZE
        ```
    """

    EXPO_PUSH_URL: str = Field(
        default="https://exp.host/--/api/v2/push/send", alias="EXPO_PUSH_URL"
    )
    EXPO_ACCESS_TOKEN: str | None = Field(default=None, alias="EXPO_ACCESS_TOKEN")
    EXPO_CHUNK_SIZE: int = Field(default=100, alias="EXPO_CHUNK_SIZE", ge=1, le=100)
    EXPO_TIMEOUT_SECONDS: int = Field(default=30, alias="EXPO_TIMEOUT_SECONDS")
    EXPO_EXPERIENCE_ID: str | None = Field(default=None, alias="EXPO_EXPERIENCE_ID")
