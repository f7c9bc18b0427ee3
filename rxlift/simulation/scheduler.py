"""
Schedulers for time-paced simulations.

A scheduler runs callbacks after a delay and hands back a cancellable
handle. Two implementations:
- ManualScheduler: fake clock advanced explicitly (tests, batch runs)
- AsyncioScheduler: delegates to an asyncio event loop
"""

from abc import ABC, abstractmethod
from itertools import count
from typing import Callable, Optional
import asyncio


class TimerHandle(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    """Runs callbacks on a single logical timeline."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule `callback` to run after `delay` seconds."""

    @abstractmethod
    def time(self) -> float:
        """Current time on this scheduler's clock, in seconds."""


class _ManualHandle(TimerHandle):

    def __init__(self, due: float, seq: int, callback: Callable[[], None]):
        self.due = due
        self.seq = seq
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Fake clock.

    Nothing runs until `advance` is called; callbacks then fire in due-time
    order (ties in scheduling order), including callbacks scheduled by
    earlier callbacks within the same window.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._seq = count()
        self._pending: list[_ManualHandle] = []

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self._now + max(0.0, delay), next(self._seq), callback)
        self._pending.append(handle)
        return handle

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._pending if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""
        target = self._now + seconds
        while True:
            due = [h for h in self._pending if not h.cancelled and h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self._pending.remove(handle)
            self._now = handle.due
            handle.callback()
        self._now = target
        self._pending = [h for h in self._pending if not h.cancelled]

    def run_until_idle(self, limit: float = 3600.0) -> None:
        """Advance until nothing is pending (bounded by `limit` seconds)."""
        while self.pending_count:
            next_due = min(h.due for h in self._pending if not h.cancelled)
            if next_due - self._now > limit:
                break
            self.advance(next_due - self._now)


class _AsyncioHandle(TimerHandle):

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def time(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioHandle(self.loop.call_later(delay, callback))
