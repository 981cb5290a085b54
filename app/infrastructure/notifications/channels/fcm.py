"""Firebase Cloud Messaging channel (channel A)."""

from typing import List, Sequence

from firebase_admin import messaging

from core.logging import get_module_logger
from infrastructure.notifications.channels.base import PushChannel
from infrastructure.notifications.models import ChannelResult, PushPayload
from infrastructure.operations import OperationResult, classify_firebase_error

logger = get_module_logger()

# FCM multicast limit
MAX_MULTICAST_TOKENS = 500


class FcmChannel(PushChannel):
    """Multicast delivery through firebase_admin.messaging.

    Args:
        app: firebase_admin App the messages are sent with (default app when None)
        batch_size: Tokens per multicast request, at most 500
    """

    def __init__(self, app=None, batch_size: int = MAX_MULTICAST_TOKENS) -> None:
        self._app = app
        self._batch_size = min(batch_size, MAX_MULTICAST_TOKENS)

    @property
    def channel_name(self) -> str:
        return "fcm"

    def build_message(
        self, tokens: List[str], payload: PushPayload
    ) -> messaging.MulticastMessage:
        """Data message with APNs alert and Android notification blocks."""
        return messaging.MulticastMessage(
            tokens=tokens,
            data=payload.data,
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(
                        alert=messaging.ApsAlert(title=payload.title, body=payload.body),
                        badge=payload.badge,
                        sound=payload.sound,
                        content_available=True,
                    )
                )
            ),
            android=messaging.AndroidConfig(
                priority="high" if payload.priority == "high" else "normal",
                notification=messaging.AndroidNotification(
                    title=payload.title,
                    body=payload.body,
                    sound=payload.sound,
                    channel_id=payload.channel_id,
                ),
            ),
        )

    def send(self, tokens: Sequence[str], payload: PushPayload) -> ChannelResult:
        result = ChannelResult()
        tokens = list(tokens)
        for start in range(0, len(tokens), self._batch_size):
            batch = tokens[start : start + self._batch_size]
            try:
                message = self.build_message(batch, payload)
                response = messaging.send_each_for_multicast(message, app=self._app)
            except Exception as exc:  # pylint: disable=broad-except
                classified = classify_firebase_error(exc)
                logger.error(
                    "fcm_batch_failed",
                    token_count=len(batch),
                    error=classified.message,
                    error_code=classified.error_code,
                )
                continue
            result += ChannelResult(
                sent=response.success_count, failed=response.failure_count
            )
            logger.info(
                "fcm_batch_sent",
                token_count=len(batch),
                success_count=response.success_count,
                failure_count=response.failure_count,
            )
            if response.failure_count:
                for token, send_response in zip(batch, response.responses):
                    if not send_response.success:
                        logger.warning(
                            "fcm_token_failed",
                            device_token=token,
                            error=str(send_response.exception),
                        )
        return result

    def health_check(self) -> OperationResult:
        try:
            messaging.MulticastMessage(tokens=["health-check"], data={})
        except ValueError as exc:
            return OperationResult.permanent_error(str(exc), error_code="FCM_INVALID")
        return OperationResult.success(message="fcm ready")
