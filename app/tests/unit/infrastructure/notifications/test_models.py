"""Unit tests for push notification models."""

import pytest
from pydantic import ValidationError

from infrastructure.notifications import (
    ChannelResult,
    ClassifiedTokens,
    DispatchResult,
    PushPayload,
)


@pytest.mark.unit
class TestPushPayload:
    """Tests for PushPayload validation."""

    def test_data_values_are_stringified(self):
        """FCM data maps carry strings only; None values are dropped."""
        payload = PushPayload(title="Hola", data={"total": 120.5, "orderId": "o1", "x": None})

        assert payload.data == {"total": "120.5", "orderId": "o1"}

    def test_requires_title_or_body(self):
        """Blank title and body are rejected."""
        with pytest.raises(ValidationError):
            PushPayload(title=" ", body="")

    def test_defaults(self):
        """Sound, priority and badge defaults."""
        payload = PushPayload(body="Hola")

        assert payload.sound == "default"
        assert payload.priority == "high"
        assert payload.badge == 1

    def test_negative_badge_rejected(self):
        """Badges are never negative."""
        with pytest.raises(ValidationError):
            PushPayload(title="Hola", badge=-1)


@pytest.mark.unit
class TestResults:
    """Tests for token sets and result tallies."""

    def test_merge_keeps_first_seen_order(self):
        """Merging de-duplicates both buckets."""
        merged = ClassifiedTokens(fcm=["a"], expo=["x"]).merge(
            ClassifiedTokens(fcm=["b", "a"], expo=["x", "y"])
        )

        assert merged.fcm == ["a", "b"]
        assert merged.expo == ["x", "y"]

    def test_dispatch_results_add(self):
        """Adding results sums per channel."""
        total = DispatchResult(fcm_sent=1, expo_failed=2) + DispatchResult(
            fcm_sent=2, fcm_failed=1, expo_sent=3
        )

        assert total.model_dump() == {
            "fcm_sent": 3,
            "fcm_failed": 1,
            "expo_sent": 3,
            "expo_failed": 2,
        }
        assert total.sent == 6
        assert total.failed == 3

    def test_channel_results_add(self):
        """ChannelResult supports +=."""
        result = ChannelResult()
        result += ChannelResult(sent=2, failed=1)

        assert (result.sent, result.failed) == (2, 1)
