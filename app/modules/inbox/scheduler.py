"""Cooperative scheduling for the inbox queue.

All queue state changes run on one scheduler. Feed callbacks arriving on a
store listener thread are handed over with ``call_soon``.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer; cancelling twice is a no-op."""


class Scheduler(ABC):
    """Single-threaded timer and callback scheduling."""

    @abstractmethod
    def now_ms(self) -> float:
        """Monotonic clock in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay_ms``."""

    @abstractmethod
    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the scheduler; safe from any thread."""


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Loop to schedule on; the running loop when omitted
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self._loop.time() * 1000

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioTimer(self._loop.call_later(delay_ms / 1000, callback))

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._loop.call_soon_threadsafe(callback)
