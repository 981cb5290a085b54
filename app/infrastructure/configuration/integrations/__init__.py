"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.expo import ExpoSettings
from infrastructure.configuration.integrations.firebase import FirebaseSettings

__all__ = [
    "ExpoSettings",
    "FirebaseSettings",
]
