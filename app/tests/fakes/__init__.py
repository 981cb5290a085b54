"""Test doubles shared across unit tests."""

from tests.fakes.channels import RecordingChannel
from tests.fakes.scheduler import ManualScheduler

__all__ = ["RecordingChannel", "ManualScheduler"]
