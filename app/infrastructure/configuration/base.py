"""Shared base classes for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Base class for external integration settings.

    Integrations are the remote services the fan-out talks to: the Firebase
    project (Firestore, Auth, Cloud Messaging) and the Expo push service.
    """

    model_config = _SETTINGS_CONFIG


class FeatureSettings(BaseSettings):
    """Base class for feature module settings (fan-out triggers, inbox queue)."""

    model_config = _SETTINGS_CONFIG


class InfrastructureSettings(BaseSettings):
    """Base class for infrastructure-level settings.

    Infrastructure settings control core system behavior like idempotency
    and the HTTP server.
    """

    model_config = _SETTINGS_CONFIG
