"""Client notification queue feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class InboxFeatureSettings(FeatureSettings):
    """Configuration for the in-app notification queue.

    Environment Variables:
        INBOX_FEED_LIMIT: Unread records kept in the live feed window
        INBOX_COOLDOWN_MS: Window after start during which no banner is queued
        INBOX_AUTO_DISMISS_MS: Delay before a displayed banner dismisses itself
        INBOX_VIEWED_PATH: File backing the persisted viewed set

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        limit = settings.inbox.INBOX_FEED_LIMIT
        ```
    """

    INBOX_FEED_LIMIT: int = Field(default=5, alias="INBOX_FEED_LIMIT", ge=1)
    INBOX_COOLDOWN_MS: int = Field(default=3000, alias="INBOX_COOLDOWN_MS", ge=0)
    INBOX_AUTO_DISMISS_MS: int = Field(
        default=5000, alias="INBOX_AUTO_DISMISS_MS", ge=0
    )
    INBOX_VIEWED_PATH: str = Field(
        default=".fanout/viewed_notifications.json", alias="INBOX_VIEWED_PATH"
    )
