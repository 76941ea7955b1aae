from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from scheduling.conflicts import conflicts
from scheduling.policy import SchedulingPolicy
from taskplanner.models import ScheduledWindow, Task

logger = logging.getLogger(__name__)

# Which path produced a placement.
STRATEGY_SLOT = "slot"
STRATEGY_APPEND = "append"
STRATEGY_ANCHOR = "anchor"
STRATEGY_BATCH = "batch"
STRATEGY_EXPLICIT = "explicit"


@dataclass(frozen=True)
class Placement:
    task_id: int
    start: datetime
    end: datetime
    strategy: str


class Scheduler:
    """Greedy placement of tasks onto the calendar.

    Single tasks search forward from the anchor for the first in-hours window
    that overlaps nothing, and fall back to appending after the last scheduled
    task. Batches are laid out back to back in priority order without looking
    at what is already on the calendar.
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def anchor(self, now: Optional[datetime] = None) -> datetime:
        return self.policy.anchor(now or datetime.now())

    def find_slot(
        self,
        duration_minutes: int,
        windows: Iterable[ScheduledWindow],
        now: Optional[datetime] = None,
    ) -> Optional[Tuple[datetime, datetime]]:
        return self._search(self.anchor(now), duration_minutes, list(windows))

    def _search(
        self,
        anchor: datetime,
        duration_minutes: int,
        windows: Sequence[ScheduledWindow],
    ) -> Optional[Tuple[datetime, datetime]]:
        policy = self.policy
        duration = timedelta(minutes=duration_minutes)
        current = anchor
        attempts = 0

        while attempts < policy.max_day_attempts:
            end = current + duration

            if not conflicts(current, end, windows):
                if policy.ends_after_hours(current, end):
                    current = policy.next_day_start(current)
                    attempts += 1
                    logger.debug("Slot would end after hours, trying %s", current)
                    continue
                return current, end

            current += policy.retry_step
            if policy.past_end_of_day(current):
                current = policy.next_day_start(current)
                attempts += 1
                logger.debug("Day exhausted, trying %s", current)

        return None

    def place(
        self,
        task: Task,
        windows: Iterable[ScheduledWindow],
        now: Optional[datetime] = None,
    ) -> Placement:
        """Place one task, never failing.

        The task's own previous window is ignored so rescheduling is
        self-consistent.
        """
        others = [w for w in windows if w.task_id != task.id]
        anchor = self.anchor(now)

        slot = self._search(anchor, task.estimated_minutes, others)
        if slot is not None:
            start, end = slot
            return Placement(task.id, start, end, STRATEGY_SLOT)

        duration = timedelta(minutes=task.estimated_minutes)
        if others:
            last_end = max(w.end for w in others)
            start = last_end + self.policy.gap
            logger.info(
                f"No slot within {self.policy.max_day_attempts} days for task {task.id}, "
                f"appending after {last_end}"
            )
            return Placement(task.id, start, start + duration, STRATEGY_APPEND)

        return Placement(task.id, anchor, anchor + duration, STRATEGY_ANCHOR)

    def schedule(self, tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Placement]:
        """Lay out every task lacking a start time, highest priority first."""
        pending = [t for t in tasks if t.start_time is None]
        # sorted() is stable, so equal priorities keep their input order
        ordered = sorted(pending, key=lambda t: t.priority.rank, reverse=True)

        policy = self.policy
        current = self.anchor(now)
        placements: List[Placement] = []

        for task in ordered:
            duration = timedelta(minutes=task.estimated_minutes)
            if policy.ends_after_hours(current, current + duration):
                current = policy.next_day_start(current)
            end = current + duration
            placements.append(Placement(task.id, current, end, STRATEGY_BATCH))
            current = end + policy.gap

        return placements
