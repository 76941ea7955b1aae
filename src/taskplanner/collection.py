from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union

from llm.schemas import ExtractedTask
from scheduling.scheduler import STRATEGY_EXPLICIT, Placement, Scheduler
from storage.task_store import TaskStore
from taskplanner import views
from taskplanner.models import Priority, Task

logger = logging.getLogger(__name__)


class TaskNotFoundError(KeyError):
    pass


class TaskCollection:
    """In-memory mapping from id to Task, plus the scheduling entry points.

    Every read-then-write on the scheduled windows runs under one lock, so a
    placement sees the calendar exactly as the previous placement left it.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None, store: Optional[TaskStore] = None):
        self.scheduler = scheduler or Scheduler()
        self.store = store
        self._lock = threading.RLock()
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1

        if store is not None:
            tasks, self._next_id = store.load()
            self._tasks = {t.id: t for t in tasks}
            logger.info(f"Loaded {len(tasks)} task(s) from {store.path}")

    # -- reads ---------------------------------------------------------------

    @property
    def tasks(self) -> List[Task]:
        with self._lock:
            return list(self._tasks.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get(self, task_id: int) -> Task:
        with self._lock:
            try:
                return self._tasks[task_id]
            except KeyError:
                raise TaskNotFoundError(task_id) from None

    # -- field mutations -----------------------------------------------------

    def add_task(
        self,
        title: str,
        estimated_minutes: int,
        priority: Union[Priority, str] = Priority.MEDIUM,
        auto_schedule: bool = True,
        now: Optional[datetime] = None,
    ) -> Task:
        with self._lock:
            task = Task(
                id=self._next_id,
                title=title,
                estimated_minutes=estimated_minutes,
                priority=priority,
            )
            placement = None
            if auto_schedule:
                # placed before it is stored, so a failure leaves nothing behind
                placement = self.scheduler.place(task, views.scheduled_windows(self._tasks.values()), now=now)
            self._next_id += 1
            self._tasks[task.id] = task
            if placement is not None:
                self._apply(placement)
            self._save()
            return self._tasks[task.id]

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            self.get(task_id)
            del self._tasks[task_id]
            self._save()

    def toggle_task(self, task_id: int) -> Task:
        with self._lock:
            task = self.get(task_id)
            task.is_completed = not task.is_completed
            self._save()
            return task

    def increment_pomodoro(self, task_id: int) -> Task:
        with self._lock:
            task = self.get(task_id)
            task.completed_pomodoros += 1
            self._save()
            return task

    def set_schedule(
        self,
        task_id: int,
        start: Union[datetime, str],
        end: Union[datetime, str],
        auto_scheduled: bool = False,
    ) -> Task:
        """Write a window onto a task as given, without any conflict check."""
        with self._lock:
            task = self.get(task_id).with_schedule(start, end, auto_scheduled)
            self._tasks[task_id] = task
            self._save()
            return task

    # -- scheduling ----------------------------------------------------------

    def schedule_task(self, task_id: int, now: Optional[datetime] = None) -> Placement:
        """(Re)place one task, keeping clear of every other task's window."""
        with self._lock:
            task = self.get(task_id)
            placement = self.scheduler.place(task, views.scheduled_windows(self._tasks.values()), now=now)
            self._apply(placement)
            self._save()
            return placement

    def schedule_unscheduled(self, now: Optional[datetime] = None) -> List[Placement]:
        """Batch-place every active task that has no start time yet."""
        with self._lock:
            pending = views.unscheduled_active_tasks(self._tasks.values())
            if not pending:
                return []
            placements = self.scheduler.schedule(pending, now=now)
            for placement in placements:
                self._apply(placement)
            self._save()
            logger.info(f"Batch scheduled {len(placements)} task(s)")
            return placements

    def apply_extracted(
        self,
        extracted: Iterable[ExtractedTask],
        now: Optional[datetime] = None,
    ) -> List[Tuple[Task, Placement]]:
        """Add extracted tasks; explicit windows are kept, the rest are placed."""
        results = []
        with self._lock:
            for item in extracted:
                task = self.add_task(item.title, item.estimated_minutes, item.priority, auto_schedule=False)
                if item.has_explicit_window:
                    task = self.set_schedule(task.id, item.start_time, item.end_time, auto_scheduled=True)
                    placement = Placement(task.id, task.start_time, task.end_time, STRATEGY_EXPLICIT)
                else:
                    placement = self.schedule_task(task.id, now=now)
                results.append((self.get(task.id), placement))
        return results

    # -- internals -----------------------------------------------------------

    def _apply(self, placement: Placement) -> None:
        task = self._tasks[placement.task_id]
        self._tasks[task.id] = task.with_schedule(placement.start, placement.end, auto_scheduled=True)
        logger.info(
            f"Task {task.id} '{task.title}' placed {placement.start:%Y-%m-%d %H:%M}"
            f"-{placement.end:%H:%M} ({placement.strategy})"
        )

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(list(self._tasks.values()), self._next_id)
