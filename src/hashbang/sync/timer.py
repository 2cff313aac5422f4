"""
Coalescing timer and schedulers.

A CoalescingTimer holds a single pending callback. Scheduling while one is
pending cancels it and starts over, so a burst of triggers inside the
delay fires exactly once, after the last trigger.

Schedulers abstract the event loop:
- AsyncioScheduler: uses the running asyncio loop (``loop.call_later``)
- ManualScheduler: virtual clock advanced explicitly, for hosts that pump
  their own loop and for deterministic tests
"""

from __future__ import annotations

import asyncio as _asyncio
import heapq as _heapq
import itertools as _itertools
import typing as _typing


class TimerHandle(_typing.Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None: ...


class Scheduler(_typing.Protocol):
    """Anything that can run a callback after a delay (in seconds)."""

    def call_later(
        self,
        delay: float,
        callback: _typing.Callable[[], None],
    ) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    Without an explicit loop the running loop is looked up by ``bind()``
    or on the first call, so the scheduler can be created outside of a
    coroutine.
    """

    def __init__(self, loop: _asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def bind(self) -> _asyncio.AbstractEventLoop:
        """
        Pin the scheduler to the running loop (no-op if already bound).

        Raises:
            RuntimeError: If no loop was given and none is running.
        """
        if self._loop is None:
            self._loop = _asyncio.get_running_loop()
        return self._loop

    def call_later(
        self,
        delay: float,
        callback: _typing.Callable[[], None],
    ) -> _asyncio.TimerHandle:
        """
        Schedule on the event loop.

        Raises:
            RuntimeError: If no loop was given and none is running.
        """
        loop = self._loop or _asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    """Handle returned by ManualScheduler."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: _typing.Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by a virtual clock.

    Nothing runs until ``advance()`` moves time forward; due callbacks then
    run in order of their due time.

    Example:
        >>> scheduler = ManualScheduler()
        >>> handle = scheduler.call_later(0.05, lambda: print("fired"))
        >>> scheduler.advance(0.05)
        fired
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._counter = _itertools.count()

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of callbacks scheduled and not cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def call_later(
        self,
        delay: float,
        callback: _typing.Callable[[], None],
    ) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(delay, 0.0), callback)
        _heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run everything that became due.

        Callbacks scheduled by running callbacks also run if they fall
        within the new time.

        Returns:
            Number of callbacks run.
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = _heapq.heappop(self._queue)
            self._now = when
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        self._now = target
        return ran

    def run_all(self) -> int:
        """Run every pending callback regardless of its due time."""
        ran = 0
        while self._queue:
            when, _, handle = _heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled:
                handle.callback()
                ran += 1
        return ran


class CoalescingTimer:
    """
    Single-slot debounce timer.

    Each ``schedule()`` replaces the pending callback, if any, and restarts
    the delay. The callback runs once when the delay elapses without a
    newer ``schedule()``.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        """
        Args:
            scheduler: Where to schedule.
            delay: Delay in seconds.
        """
        self._scheduler = scheduler
        self._delay = delay
        self._handle: TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a callback is waiting to run."""
        return self._handle is not None

    def schedule(self, callback: _typing.Callable[[], None]) -> None:
        """Schedule ``callback``, replacing any pending one."""
        self.cancel()

        def _fire() -> None:
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(self._delay, _fire)

    def cancel(self) -> bool:
        """
        Cancel the pending callback.

        Returns:
            True if something was pending.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True
