"""Errors for the fanout module."""

from typing import Any, Optional


class FanoutError(Exception):
    """Base class for fan-out errors.

    Attributes:
        message: human-friendly message
        details: optional underlying error or context
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class EventValidationError(FanoutError):
    """Raised when an event envelope lacks the fields its trigger needs."""


class Unauthenticated(FanoutError):
    """Raised by callables invoked without a verified caller identity."""


class InternalError(FanoutError):
    """Raised by callables when a store write they depend on fails."""
