"""Fan-out trigger feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class FanoutFeatureSettings(FeatureSettings):
    """Configuration for the server-side notification fan-out.

    Environment Variables:
        FANOUT_MAX_WORKERS: Bound on concurrent recipient profile fetches per event
        FCM_BATCH_SIZE: Tokens per FCM multicast request (FCM accepts at most 500)
        DEFAULT_BADGE: Badge value used when the first recipient has no counter
        INBOX_WRITE_ENABLED: Write a user_notifications record per notified recipient

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        workers = settings.fanout.FANOUT_MAX_WORKERS
        ```
    """

    FANOUT_MAX_WORKERS: int = Field(default=8, alias="FANOUT_MAX_WORKERS", ge=1)
    FCM_BATCH_SIZE: int = Field(default=500, alias="FCM_BATCH_SIZE", ge=1, le=500)
    DEFAULT_BADGE: int = Field(default=1, alias="DEFAULT_BADGE", ge=0)
    INBOX_WRITE_ENABLED: bool = Field(default=True, alias="INBOX_WRITE_ENABLED")
