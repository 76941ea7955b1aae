from __future__ import annotations
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskplanner.models import MAX_ESTIMATED_MINUTES, Priority, parse_timestamp

class ExtractedTask(BaseModel):
    """One task as returned by the hosted extractor (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    estimated_minutes: int = Field(default=60, gt=0, le=MAX_ESTIMATED_MINUTES, alias="estimatedMinutes")
    priority: Priority = Priority.MEDIUM
    start_time: Optional[datetime] = Field(default=None, alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")

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
        return Priority.parse(v) if v is not None else Priority.MEDIUM

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v)

    @model_validator(mode="after")
    def explicit_window_is_ordered(self) -> "ExtractedTask":
        if self.has_explicit_window and self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime")
        return self

    @property
    def has_explicit_window(self) -> bool:
        return self.start_time is not None and self.end_time is not None

class TaskExtractionResult(BaseModel):
    tasks: List[ExtractedTask] = Field(default_factory=list)
