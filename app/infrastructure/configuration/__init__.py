"""Infrastructure configuration module - public API.

Centralized configuration for the fan-out service using Pydantic
BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    expo_url = settings.expo.EXPO_PUSH_URL
    feed_limit = settings.inbox.INBOX_FEED_LIMIT
    ```
"""

from infrastructure.configuration.settings import Settings, settings

__all__ = ["Settings", "settings"]
