"""Cancellable deferred callbacks driven by an injectable clock.

The questionnaire engine is single-threaded: nothing fires on its own. The
host calls :meth:`TimerQueue.run_due` from its event loop (a Streamlit rerun,
a periodic fragment, or a test advancing a fake clock) and due callbacks run
inline, in deadline order.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ScheduledCall:
    """Handle for a callback registered with :meth:`TimerQueue.call_later`."""

    deadline: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        """Prevent the callback from running; no-op once fired."""

        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.fired


class TimerQueue:
    """Minimal deadline queue for debounce and delay timers."""

    def __init__(self, *, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._heap: list[tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run ``delay`` seconds from now."""

        if delay < 0:
            raise ValueError("delay must be >= 0")
        call = ScheduledCall(deadline=self._clock() + delay, callback=callback)
        heapq.heappush(self._heap, (call.deadline, next(self._counter), call))
        return call

    def run_due(self) -> int:
        """Run every callback whose deadline has passed and return how many ran.

        Callbacks scheduled by a running callback fire in the same pass when
        they are already due.
        """

        fired = 0
        while self._heap:
            deadline, _, call = self._heap[0]
            if call.cancelled:
                heapq.heappop(self._heap)
                continue
            if deadline > self._clock():
                break
            heapq.heappop(self._heap)
            call.fired = True
            fired += 1
            call.callback()
        return fired

    def next_deadline(self) -> float | None:
        """Return the earliest pending deadline, ignoring cancelled calls."""

        for deadline, _, call in sorted(self._heap):
            if not call.cancelled:
                return deadline
        return None

    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._heap if not call.cancelled)

    def clear(self) -> None:
        """Cancel and drop every pending callback."""

        for _, _, call in self._heap:
            call.cancel()
        if self._heap:
            logger.debug("Dropped %d pending timer(s)", len(self._heap))
        self._heap.clear()


__all__ = ["ScheduledCall", "TimerQueue"]
