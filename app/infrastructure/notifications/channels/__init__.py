"""Push delivery channels."""

from infrastructure.notifications.channels.base import PushChannel
from infrastructure.notifications.channels.expo import ExpoChannel
from infrastructure.notifications.channels.fcm import FcmChannel

__all__ = ["PushChannel", "ExpoChannel", "FcmChannel"]
