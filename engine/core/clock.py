"""
Game-time clock with cancellable timers.

The clock only moves when advance() is called, so every timer runs
inside the fixed update of the scene that owns it. Tests drive time the
same way.

Usage:
    clock = Clock()
    timer = clock.schedule(0.2, on_expired)
    blink = clock.schedule_interval(0.03, reveal_next_char)

    clock.advance(dt)   # once per fixed update
    blink.cancel()      # never fires again
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable, Optional


TimerCallback = Callable[[], None]


@dataclass(order=True)
class Timer:
    """
    A scheduled callback.

    Ordered by ``due`` so the heap gives us earliest-first; ``_seq`` breaks
    ties in scheduling order.
    """
    due: float
    _seq: int = field(compare=True, repr=False)
    callback: TimerCallback = field(compare=False, repr=False)
    interval: Optional[float] = field(compare=False, default=None)
    cancelled: bool = field(compare=False, default=False)
    fired: int = field(compare=False, default=0)

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def pending(self) -> bool:
        """True while the timer can still fire."""
        return not self.cancelled and (self.repeating or self.fired == 0)

    def cancel(self) -> None:
        self.cancelled = True


class Clock:
    """Priority-queue timer scheduler driven by game time."""

    def __init__(self) -> None:
        self._now: float = 0.0
        self._queue: list[Timer] = []
        self._seq: int = 0

    @property
    def now(self) -> float:
        return self._now

    def schedule(self, delay: float, callback: TimerCallback) -> Timer:
        """Call ``callback`` once, ``delay`` seconds from now."""
        return self._push(self._now + max(0.0, delay), callback, None)

    def schedule_interval(self, interval: float, callback: TimerCallback) -> Timer:
        """Call ``callback`` every ``interval`` seconds until cancelled."""
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        return self._push(self._now + interval, callback, interval)

    def pending_count(self) -> int:
        """Number of timers that can still fire."""
        return sum(1 for t in self._queue if not t.cancelled)

    def advance(self, dt: float) -> int:
        """
        Move time forward and fire every timer that came due, in order.

        A repeating timer fires once per elapsed interval. A timer cancelled
        by an earlier callback in the same advance does not fire.

        Returns:
            Number of callbacks invoked
        """
        target = self._now + dt
        fired = 0

        while self._queue:
            if self._queue[0].cancelled:
                heapq.heappop(self._queue)
                continue
            if self._queue[0].due > target:
                break

            timer = heapq.heappop(self._queue)
            self._now = timer.due
            timer.fired += 1
            if timer.repeating:
                timer.due += timer.interval
                heapq.heappush(self._queue, timer)

            timer.callback()
            fired += 1

        self._now = target
        return fired

    def clear(self) -> None:
        """Cancel everything."""
        for timer in self._queue:
            timer.cancelled = True
        self._queue.clear()

    def _push(self, due: float, callback: TimerCallback, interval: Optional[float]) -> Timer:
        self._seq += 1
        timer = Timer(due=due, _seq=self._seq, callback=callback, interval=interval)
        heapq.heappush(self._queue, timer)
        return timer
