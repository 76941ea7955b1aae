from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from taskplanner.models import ScheduledWindow


def overlaps(start: datetime, end: datetime, window: ScheduledWindow) -> bool:
    """Half-open overlap test; touching endpoints do not conflict."""
    return start < window.end and end > window.start


def conflicts(
    start: datetime,
    end: datetime,
    windows: Iterable[ScheduledWindow],
    exclude_task_id: Optional[int] = None,
) -> bool:
    return any(
        overlaps(start, end, w)
        for w in windows
        if exclude_task_id is None or w.task_id != exclude_task_id
    )
