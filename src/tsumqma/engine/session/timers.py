"""
Module: engine.session.timers

Purpose:
    Cooperative timer queue for session continuations (countdown steps,
    1 Hz ticks, the post-answer dwell). The host advances time explicitly,
    from a real clock or in simulation, so all callbacks run on the
    caller's thread one after another.

Key Classes:
    - TimerQueue: Time-ordered scheduled callbacks with generation tags
    - ScheduledTask: Handle returned by call_later()

Usage:
    timers = TimerQueue()
    timers.call_later(1.5, show_next, generation=3, label="dwell")
    timers.advance(1.0)   # nothing due yet
    timers.advance(0.5)   # show_next runs
    timers.cancel_generation(3)  # drop anything still pending for gen 3

Used By:
    - engine.session.scheduler
    - scripts/simulate_session.py
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """
    A pending callback.

    Ordered by due time, then by scheduling order, so callbacks due at the
    same instant run first-in first-out.
    """

    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    generation: int = field(compare=False, default=0)
    label: str = field(compare=False, default="")
    cancelled: bool = field(compare=False, default=False)

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """
    Manually advanced timer queue.

    Attributes:
        now: Current queue time in seconds
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._heap: List[ScheduledTask] = []
        self._seq = itertools.count()

    def call_later(
        self,
        delay: float,
        callback: Callable[[], None],
        *,
        generation: int = 0,
        label: str = "",
    ) -> ScheduledTask:
        """
        Schedule a callback `delay` seconds from now.

        Raises:
            ValueError: If delay is negative
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative: {delay}")
        task = ScheduledTask(
            due=self.now + delay,
            seq=next(self._seq),
            callback=callback,
            generation=generation,
            label=label,
        )
        heapq.heappush(self._heap, task)
        return task

    def cancel_generation(self, generation: int) -> int:
        """
        Cancel every pending task of a generation.

        Returns:
            Number of tasks cancelled
        """
        count = 0
        for task in self._heap:
            if task.generation == generation and not task.cancelled:
                task.cancel()
                count += 1
        if count:
            logger.debug(f"Cancelled {count} pending task(s) of generation {generation}")
        return count

    def pending(self, label: Optional[str] = None) -> list[ScheduledTask]:
        """Live tasks in due order, optionally filtered by label."""
        return sorted(
            t for t in self._heap
            if not t.cancelled and (label is None or t.label == label)
        )

    def next_due(self) -> Optional[float]:
        live = self.pending()
        return live[0].due if live else None

    def advance(self, seconds: float) -> int:
        """
        Move time forward, running every task that falls due.

        Tasks scheduled by a running callback also run if they fall due
        within the same advance. Time is set to each task's due time while
        it runs.

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative: {seconds}")

        target = self.now + seconds
        ran = 0
        while self._heap and self._heap[0].due <= target:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            self.now = task.due
            task.callback()
            ran += 1
        self.now = target
        return ran

    def run_until_idle(self, limit: float = 3600.0) -> int:
        """Advance until nothing is pending, or `limit` seconds have passed."""
        ran = 0
        deadline = self.now + limit
        while True:
            due = self.next_due()
            if due is None or due > deadline:
                break
            ran += self.advance(due - self.now)
        return ran

    def clear(self) -> None:
        self._heap.clear()
