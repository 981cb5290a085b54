"""Push dispatcher with per-channel isolation.

Sends one rendered payload to a classified token set:
- FCM tokens go to the "fcm" channel, Expo tokens to the "expo" channel
- a channel-wide failure is logged and contributes nothing to the result,
  the other channel is still attempted
- per-token and per-chunk failures are counted, never raised

Usage Example:
    from infrastructure.notifications import PushDispatcher, PushPayload, classify

    dispatcher = PushDispatcher(channels={"fcm": fcm_channel, "expo": expo_channel})
    result = dispatcher.dispatch(
        classify(["ExponentPushToken[abc]", "fcm-token-1"]),
        PushPayload(title="Ana", body="Hola"),
    )
    logger.info("push_sent", **result.model_dump())
"""

from typing import Dict

from core.logging import get_module_logger
from infrastructure.notifications.channels.base import PushChannel
from infrastructure.notifications.models import (
    ChannelResult,
    ClassifiedTokens,
    DispatchResult,
    PushPayload,
)
from infrastructure.operations import OperationResult

logger = get_module_logger()


class PushDispatcher:
    """Two-channel push dispatcher.

    Attributes:
        channels: Dict mapping channel name ("fcm", "expo") to PushChannel

    Example:
        dispatcher = PushDispatcher(
            channels={"fcm": FcmChannel(app), "expo": ExpoChannel(settings.expo)}
        )
    """

    def __init__(self, channels: Dict[str, PushChannel]):
        self.channels = channels
        logger.info("initialized_push_dispatcher", channels=list(channels.keys()))

    def _send(self, channel_name: str, tokens, payload: PushPayload) -> ChannelResult:
        if not tokens:
            return ChannelResult()
        channel = self.channels.get(channel_name)
        if channel is None:
            logger.warning(
                "channel_not_available",
                channel_name=channel_name,
                token_count=len(tokens),
            )
            return ChannelResult()
        try:
            return channel.send(tokens, payload)
        except Exception as e:
            logger.error(
                "channel_send_failed",
                channel_name=channel_name,
                token_count=len(tokens),
                error=str(e),
                exc_info=True,
            )
            return ChannelResult()

    def dispatch(self, tokens: ClassifiedTokens, payload: PushPayload) -> DispatchResult:
        """Send ``payload`` through both channels.

        Args:
            tokens: Classified tokens of one recipient group
            payload: Rendered notification (validated on construction)

        Returns:
            DispatchResult with per-channel tallies; all zero for empty buckets
        """
        if tokens.is_empty:
            logger.info("dispatch_skipped_no_tokens")
            return DispatchResult()

        fcm = self._send("fcm", tokens.fcm, payload)
        expo = self._send("expo", tokens.expo, payload)
        result = DispatchResult(
            fcm_sent=fcm.sent,
            fcm_failed=fcm.failed,
            expo_sent=expo.sent,
            expo_failed=expo.failed,
        )
        logger.info(
            "push_dispatched",
            title=payload.title,
            fcm_tokens=len(tokens.fcm),
            expo_tokens=len(tokens.expo),
            **result.model_dump(),
        )
        return result

    def get_available_channels(self):
        """Names of the configured channels."""
        return list(self.channels.keys())

    def health_check(self) -> Dict[str, OperationResult]:
        """Health of every configured channel."""
        return {name: channel.health_check() for name, channel in self.channels.items()}
