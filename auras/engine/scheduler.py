"""
Scheduler collaborators.

The engine only needs a clock plus "call once after N seconds" and "call
every N seconds until cancelled". Two implementations are provided:

* ``ManualScheduler``: a virtual clock the host advances explicitly (game loop
  steps, simulations, tests). Firing order is deterministic.
* ``AsyncioScheduler``: timers on an asyncio event loop.
"""

import asyncio
import heapq
import itertools
import math
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

Callback = Callable[[], None]


class TimerHandle(Protocol):

    def cancel(self) -> None:
        """Prevent any further invocation of the callback."""
        ...


class Scheduler(Protocol):

    def now(self) -> float:
        """Returns the current time, in seconds, on a monotonic clock."""
        ...

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Invoke ``callback`` once, ``delay`` seconds from now."""
        ...

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        """Invoke ``callback`` every ``interval`` seconds until cancelled."""
        ...


def _check_delay(delay: float, allow_zero: bool) -> None:
    if delay < 0 or (delay == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ValueError(f"Timer delay must be {bound}, got {delay}")


def _is_due(due: float, until: float) -> bool:
    # Due times built from float intervals may land a rounding error past
    # the target time (0.1 * 3 > 0.3).
    return due <= until or math.isclose(due, until)


def _noop() -> None:
    return None


@dataclass(order=True)
class _ScheduledCall:
    due: float
    seq: int
    callback: Callback = field(compare=False)
    interval: float | None = field(default=None, compare=False)
    anchor: float = field(default=0.0, compare=False)
    fire_count: int = field(default=0, compare=False)
    cancelled: bool = field(default=False, compare=False)
    owner: "ManualScheduler | None" = field(default=None, compare=False, repr=False)

    def cancel(self) -> None:
        owner = self.owner
        if owner is not None:
            owner._cancel(self)
        else:
            self.cancelled = True
            self.callback = _noop


class ManualScheduler:
    """
    Virtual-time scheduler driven by ``advance``.

    Calls due at the same time fire in scheduling order. A repeating call is
    rescheduled before its callback runs, so the callback may cancel it; its
    due times are anchored to the time it was scheduled at, so they do not
    drift. Callbacks scheduled while advancing fire within the same
    ``advance`` if they fall due before its end.

    Cancelled calls drop their callback at once, and the queue is compacted
    once cancelled calls outnumber live ones.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[_ScheduledCall] = []
        self._cancelled = 0
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._now

    def _push(self, call: _ScheduledCall) -> _ScheduledCall:
        with self._lock:
            call.owner = self
            heapq.heappush(self._queue, call)
        return call

    def _cancel(self, call: _ScheduledCall) -> None:
        with self._lock:
            if call.cancelled:
                return
            call.cancelled = True
            call.callback = _noop
            if call.owner is not self:
                return
            self._cancelled += 1
            if self._cancelled * 2 > len(self._queue):
                self._compact()

    def _compact(self) -> None:
        live = []
        for call in self._queue:
            if call.cancelled:
                call.owner = None
            else:
                live.append(call)
        heapq.heapify(live)
        self._queue = live
        self._cancelled = 0

    def call_later(self, delay: float, callback: Callback) -> _ScheduledCall:
        _check_delay(delay, allow_zero=True)
        return self._push(_ScheduledCall(self._now + delay, next(self._seq), callback))

    def call_every(self, interval: float, callback: Callback) -> _ScheduledCall:
        _check_delay(interval, allow_zero=False)
        return self._push(
            _ScheduledCall(
                self._now + interval,
                next(self._seq),
                callback,
                interval=interval,
                anchor=self._now,
            )
        )

    def pending(self) -> int:
        """Returns the number of scheduled, non-cancelled calls."""
        with self._lock:
            return len(self._queue) - self._cancelled

    def queued(self) -> int:
        """Returns the number of calls held in the queue, cancelled included."""
        with self._lock:
            return len(self._queue)

    def _pop_due(self, until: float) -> tuple[float, _ScheduledCall] | None:
        with self._lock:
            while self._queue and _is_due(self._queue[0].due, until):
                call = heapq.heappop(self._queue)
                if call.cancelled:
                    call.owner = None
                    self._cancelled -= 1
                    continue
                due = call.due
                if call.interval is None:
                    call.owner = None
                else:
                    # Reschedule the same handle before firing.
                    call.fire_count += 1
                    call.due = call.anchor + call.interval * (call.fire_count + 1)
                    call.seq = next(self._seq)
                    heapq.heappush(self._queue, call)
                return due, call
        return None

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every call that falls due.

        Args:
            seconds (float):
                How far to move the clock.

        Returns:
            int:
                The number of callbacks fired.

        """
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards ({seconds})")
        until = self._now + seconds
        fired = 0
        while True:
            popped = self._pop_due(until)
            if popped is None:
                break
            self._now, call = popped
            call.callback()
            fired += 1
        self._now = until
        return fired

    def run_pending(self) -> int:
        """Fire the calls already due without moving the clock."""
        return self.advance(0)


class _RepeatingCall:
    """Self-rescheduling loop timer, anchored to the first due time."""

    def __init__(
        self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callback
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._anchor = loop.time()
        self._count = 1
        self._handle = loop.call_at(self._anchor + interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._count += 1
        self._handle = self._loop.call_at(
            self._anchor + self._interval * self._count, self._run
        )
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._callback = _noop
        self._handle.cancel()


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    Callbacks run on the loop thread, so every timer-driven mutation is
    serialized with the rest of the code running on that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """
        Initialize the scheduler.

        Args:
            loop (asyncio.AbstractEventLoop | None):
                The loop to schedule on. Defaults to the running loop, so
                without an explicit loop this must be built inside a coroutine.

        """
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        _check_delay(delay, allow_zero=True)
        return self._loop.call_later(delay, callback)

    def call_every(self, interval: float, callback: Callback) -> _RepeatingCall:
        _check_delay(interval, allow_zero=False)
        return _RepeatingCall(self._loop, interval, callback)
