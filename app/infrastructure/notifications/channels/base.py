"""Push channel abstract base class.

FCM and Expo implement this interface; the dispatcher only sees channels.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from infrastructure.notifications.models import ChannelResult, PushPayload
from infrastructure.operations import OperationResult


class PushChannel(ABC):
    """Abstract base class for push delivery channels.

    Example Implementation:
        class LoggingChannel(PushChannel):

            @property
            def channel_name(self) -> str:
                return "log"

            def send(self, tokens, payload) -> ChannelResult:
                for token in tokens:
                    logger.info("push", device_token=token, title=payload.title)
                return ChannelResult(sent=len(tokens))
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier ("fcm", "expo") for routing and logging."""

    @abstractmethod
    def send(self, tokens: Sequence[str], payload: PushPayload) -> ChannelResult:
        """Deliver ``payload`` to every token.

        Per-token and per-batch failures are counted in ``failed`` and
        logged; they are never raised. Channel-wide failures (the request
        could not be built or sent at all) may raise; the dispatcher logs
        them and moves on to the next channel.

        Args:
            tokens: Tokens already classified for this channel
            payload: Rendered notification

        Returns:
            ChannelResult with sent/failed tallies
        """

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Check channel configuration (credentials, endpoint)."""
