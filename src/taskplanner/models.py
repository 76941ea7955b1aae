from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

# Timestamp format shared with the calendar view and the persisted collection.
TIME_FORMAT = "%Y-%m-%d %H:%M"

# Longest task the engine will place: one week.
MAX_ESTIMATED_MINUTES = 7 * 24 * 60

AUTO_COLOR = "#409EFF"
MANUAL_COLOR = "#67C23A"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in _PRIORITY_ALIASES:
            return _PRIORITY_ALIASES[key]
        return cls(key)


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

# the calendar front end and the hosted extractor both speak Chinese labels
_PRIORITY_ALIASES = {
    "高": Priority.HIGH,
    "中": Priority.MEDIUM,
    "低": Priority.LOW,
}


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(second=0, microsecond=0)
    text = str(value).strip()
    try:
        return datetime.strptime(text, TIME_FORMAT)
    except ValueError:
        return datetime.fromisoformat(text).replace(second=0, microsecond=0)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value is not None else None


class ScheduledWindow(NamedTuple):
    """Half-open [start, end) interval reserved by one task."""

    task_id: int
    start: datetime
    end: datetime


class Task(BaseModel):
    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    estimated_minutes: int = Field(60, gt=0, le=MAX_ESTIMATED_MINUTES)
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    auto_scheduled: bool = False

    created_at: datetime = Field(default_factory=datetime.now)
    completed_pomodoros: int = Field(0, ge=0)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v: Any) -> Priority:
        return Priority.parse(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v)

    @field_serializer("start_time", "end_time")
    def serialize_timestamp(self, v: Optional[datetime]) -> Optional[str]:
        return format_timestamp(v)

    @model_validator(mode="after")
    def window_is_complete(self) -> "Task":
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be set together")
        if self.start_time is not None and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    def with_schedule(
        self, start: Optional[datetime], end: Optional[datetime], auto_scheduled: bool
    ) -> "Task":
        """Return a validated copy carrying the given window (or none)."""
        data = self.model_dump()
        data.update(start_time=start, end_time=end, auto_scheduled=auto_scheduled)
        return Task.model_validate(data)

    @property
    def is_scheduled(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def window(self) -> Optional[ScheduledWindow]:
        if not self.is_scheduled:
            return None
        return ScheduledWindow(self.id, self.start_time, self.end_time)


class CalendarEvent(BaseModel):
    """Read-only projection of a scheduled task for the calendar view."""

    id: str
    title: str
    start: str
    end: str
    background_color: str
    border_color: str
    extended_props: dict = Field(default_factory=dict)

    @classmethod
    def from_task(cls, task: Task) -> "CalendarEvent":
        color = AUTO_COLOR if task.auto_scheduled else MANUAL_COLOR
        return cls(
            id=str(task.id),
            title=task.title,
            start=format_timestamp(task.start_time),
            end=format_timestamp(task.end_time),
            background_color=color,
            border_color=color,
            extended_props={
                "priority": task.priority.value,
                "auto_scheduled": task.auto_scheduled,
            },
        )
