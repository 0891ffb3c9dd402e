"""Delayed-callback collaborators used for the pause between rounds."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from threading import Timer
from typing import Callable, List, Protocol, Tuple


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class TimerScheduler:
    """Run callbacks on a daemon ``threading.Timer``."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


@dataclass
class _ManualCall:
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic fake clock; callbacks only run from :meth:`advance`."""

    now: float = 0.0
    _queue: List[Tuple[float, int, _ManualCall]] = field(default_factory=list)
    _seq: int = 0

    def schedule(self, delay: float, callback: Callable[[], None]) -> _ManualCall:
        call = _ManualCall(due=self.now + delay, callback=callback)
        heapq.heappush(self._queue, (call.due, self._seq, call))
        self._seq += 1
        return call

    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire due callbacks in order; return how many ran."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self.now = due
            if call.cancelled:
                continue
            call.callback()
            fired += 1
        self.now = target
        return fired
