"""Expo push service channel (channel B).

Talks to the Expo push HTTP API with requests: messages are filtered to
valid Expo tokens, split into chunks of at most 100 and posted one chunk
at a time. A chunk that cannot be delivered counts every message in it as
failed; the remaining chunks are still sent.
"""

from typing import Any, Dict, List, Optional, Sequence

import requests

from core.logging import get_module_logger
from infrastructure.configuration.integrations.expo import ExpoSettings
from infrastructure.notifications.channels.base import PushChannel
from infrastructure.notifications.models import ChannelResult, PushPayload
from infrastructure.notifications.tokens import is_expo_push_token
from infrastructure.operations import OperationResult, classify_http_error

logger = get_module_logger()


def chunk_messages(
    messages: Sequence[Dict[str, Any]], chunk_size: int
) -> List[List[Dict[str, Any]]]:
    """Split messages into consecutive chunks of at most ``chunk_size``."""
    return [
        list(messages[i : i + chunk_size]) for i in range(0, len(messages), chunk_size)
    ]


class ExpoChannel(PushChannel):
    """Expo push API client.

    Args:
        expo_settings: Endpoint, access token, chunk size and timeout
        session: Optional requests.Session (one is created when omitted)
    """

    def __init__(
        self,
        expo_settings: ExpoSettings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = expo_settings
        self._session = session or requests.Session()

    @property
    def channel_name(self) -> str:
        return "expo"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self._settings.EXPO_ACCESS_TOKEN:
            headers["Authorization"] = f"Bearer {self._settings.EXPO_ACCESS_TOKEN}"
        return headers

    def build_message(self, token: str, payload: PushPayload) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(payload.data)
        if self._settings.EXPO_EXPERIENCE_ID:
            data["experienceId"] = self._settings.EXPO_EXPERIENCE_ID
            data["scopeKey"] = self._settings.EXPO_EXPERIENCE_ID
        message = {
            "to": token,
            "title": payload.title,
            "body": payload.body,
            "sound": payload.sound,
            "badge": payload.badge,
            "priority": payload.priority,
            "data": data,
        }
        if payload.channel_id:
            message["channelId"] = payload.channel_id
        return message

    def _post_chunk(self, chunk: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        response = self._session.post(
            self._settings.EXPO_PUSH_URL,
            json=chunk,
            headers=self._headers(),
            timeout=self._settings.EXPO_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError(f"Unexpected Expo response: {body!r}")
        tickets = body.get("data")
        if not isinstance(tickets, list) or len(tickets) != len(chunk):
            raise ValueError(f"Unexpected Expo response: {body.get('errors') or body}")
        if not all(isinstance(ticket, dict) for ticket in tickets):
            raise ValueError(f"Unexpected Expo tickets: {tickets!r}")
        return tickets

    def send(self, tokens: Sequence[str], payload: PushPayload) -> ChannelResult:
        valid = [t for t in tokens if is_expo_push_token(t)]
        dropped = len(tokens) - len(valid)
        if dropped:
            logger.warning("expo_invalid_tokens_dropped", dropped_count=dropped)

        result = ChannelResult()
        messages = [self.build_message(token, payload) for token in valid]
        for index, chunk in enumerate(
            chunk_messages(messages, self._settings.EXPO_CHUNK_SIZE)
        ):
            try:
                tickets = self._post_chunk(chunk)
            except requests.RequestException as exc:
                classified = classify_http_error(exc)
                logger.error(
                    "expo_chunk_failed",
                    chunk_index=index,
                    chunk_size=len(chunk),
                    error=classified.message,
                    error_code=classified.error_code,
                )
                result += ChannelResult(failed=len(chunk))
                continue
            except ValueError as exc:
                logger.error(
                    "expo_chunk_failed",
                    chunk_index=index,
                    chunk_size=len(chunk),
                    error=str(exc),
                )
                result += ChannelResult(failed=len(chunk))
                continue

            for message, ticket in zip(chunk, tickets):
                if ticket.get("status") == "ok":
                    result += ChannelResult(sent=1)
                else:
                    result += ChannelResult(failed=1)
                    logger.warning(
                        "expo_ticket_failed",
                        device_token=message["to"],
                        error=ticket.get("message"),
                        details=ticket.get("details"),
                    )
        logger.info(
            "expo_send_completed",
            token_count=len(valid),
            sent=result.sent,
            failed=result.failed,
        )
        return result

    def health_check(self) -> OperationResult:
        if not self._settings.EXPO_PUSH_URL:
            return OperationResult.permanent_error(
                "EXPO_PUSH_URL is not configured", error_code="EXPO_MISCONFIGURED"
            )
        return OperationResult.success(message="expo ready")
