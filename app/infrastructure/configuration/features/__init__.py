"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.fanout import FanoutFeatureSettings
from infrastructure.configuration.features.inbox import InboxFeatureSettings

__all__ = [
    "FanoutFeatureSettings",
    "InboxFeatureSettings",
]
