"""Deferred tasks driven by the frame clock.

The scheduler has no thread or timer of its own. Its clock only moves when
the owner calls ``advance`` from the frame tick, so a deferred callback always
runs between particle updates and never interleaves with them.

Example usage:
    scheduler = Scheduler()
    task = scheduler.schedule(1.0, lambda: remove(particle))

    # Every frame
    scheduler.advance(delta_time)

    # Page teardown
    scheduler.cancel_all()
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A callback waiting for its due time.

    Attributes:
        due: Scheduler time in seconds at which the callback runs.
        seq: Tie-breaker keeping tasks with the same due time in schedule order.
        callback: Function to call.
        cancelled: Set by ``cancel``; a cancelled task never runs.
    """

    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        """Prevent the task from running."""
        self.cancelled = True


class Scheduler:
    """Runs callbacks once a given amount of frame time has elapsed.

    Attributes:
        now: Seconds of frame time elapsed since the scheduler was created.
    """

    def __init__(self) -> None:
        """Initialize an empty scheduler at time zero."""
        self.now = 0.0
        self._queue: list[ScheduledTask] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run ``callback`` once ``delay`` seconds of frame time have passed.

        Args:
            delay: Seconds from now. Zero or negative runs on the next advance.
            callback: Function to call.

        Returns:
            The task, which can be cancelled.
        """
        task = ScheduledTask(self.now + delay, next(self._seq), callback)
        heapq.heappush(self._queue, task)
        return task

    def advance(self, delta_time: float) -> int:
        """Move the clock forward and run every task that became due.

        Tasks run in due order. A task that raises is logged and does not stop
        the others.

        Args:
            delta_time: Seconds elapsed since the last advance.

        Returns:
            Number of tasks that ran.
        """
        self.now += delta_time
        return self._run_until(self.now)

    def flush(self) -> int:
        """Run every pending task immediately, regardless of due time.

        Returns:
            Number of tasks that ran.
        """
        return self._run_until(float("inf"))

    def cancel_all(self) -> None:
        """Cancel and drop every pending task."""
        for task in self._queue:
            task.cancel()
        self._queue.clear()

    @property
    def pending(self) -> int:
        """Number of tasks that are still waiting to run."""
        return sum(1 for task in self._queue if not task.cancelled)

    def _run_until(self, limit: float) -> int:
        ran = 0
        while self._queue and self._queue[0].due <= limit:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            try:
                task.callback()
            except Exception:
                logger.exception("Scheduled task failed")
            ran += 1
        return ran
