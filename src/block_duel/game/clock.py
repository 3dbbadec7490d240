from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple


@dataclass(eq=False)
class Timer:
    due: int
    callback: Callable[[], None]
    period: Optional[int] = None
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class Clock:
    """Single-threaded scheduler over logical milliseconds.

    Nothing fires until ``advance`` is called, so a match replays
    identically for the same seed no matter how fast the host runs it.
    Timers due at the same instant fire in scheduling order.
    """

    def __init__(self) -> None:
        self.now = 0
        self._queue: List[Tuple[int, int, Timer]] = []
        self._seq = itertools.count()

    def _push(self, timer: Timer) -> Timer:
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Timer:
        return self._push(Timer(self.now + max(0, int(delay_ms)), callback))

    def call_every(self, period_ms: int, callback: Callable[[], None]) -> Timer:
        period = max(1, int(period_ms))
        return self._push(Timer(self.now + period, callback, period))

    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now + max(0, int(ms))
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            if timer.period is not None:
                timer.due = due + timer.period
                self._push(timer)
            timer.callback()
        self.now = target

    def run_until(self, done: Callable[[], bool], limit_ms: int, step_ms: int = 50) -> bool:
        """Advance in ``step_ms`` slices until ``done()`` or ``limit_ms`` elapses."""
        deadline = self.now + limit_ms
        while not done():
            if self.now >= deadline:
                return False
            self.advance(min(step_ms, deadline - self.now))
        return True
