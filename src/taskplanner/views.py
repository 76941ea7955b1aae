"""Derived views over the task collection.

Plain functions recomputed on demand; callers pass the tasks in, so there
is no hidden state to keep in sync.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from taskplanner.models import CalendarEvent, ScheduledWindow, Task


def all_tasks(tasks: Iterable[Task]) -> List[Task]:
    return list(tasks)


def active_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if not t.is_completed]


def completed_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.is_completed]


def tasks_by_priority(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: t.priority.rank, reverse=True)


def scheduled_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.is_scheduled]


def unscheduled_active_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if not t.is_completed and t.start_time is None]


def scheduled_windows(tasks: Iterable[Task]) -> List[ScheduledWindow]:
    return [t.window for t in tasks if t.is_scheduled]


def calendar_events(tasks: Iterable[Task]) -> List[CalendarEvent]:
    return [CalendarEvent.from_task(t) for t in scheduled_tasks(tasks)]


def find_task(tasks: Iterable[Task], task_id: Optional[int]) -> Optional[Task]:
    if task_id is None:
        return None
    return next((t for t in tasks if t.id == task_id), None)
