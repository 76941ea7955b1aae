from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class SchedulingPolicy:
    """Working-hours window and step sizes used by the placement engine."""

    workday_start_hour: int = 9
    workday_end_hour: int = 22
    evening_cutoff_hour: int = 18
    lead_minutes: int = 30
    retry_step_minutes: int = 15
    gap_minutes: int = 15
    max_day_attempts: int = 7

    def __post_init__(self) -> None:
        if not 0 <= self.workday_start_hour < self.workday_end_hour <= 24:
            raise ValueError("workday hours must satisfy 0 <= start < end <= 24")
        if self.max_day_attempts < 1:
            raise ValueError("max_day_attempts must be at least 1")

    @property
    def retry_step(self) -> timedelta:
        return timedelta(minutes=self.retry_step_minutes)

    @property
    def gap(self) -> timedelta:
        return timedelta(minutes=self.gap_minutes)

    def day_start(self, moment: datetime) -> datetime:
        return moment.replace(hour=self.workday_start_hour, minute=0, second=0, microsecond=0)

    def next_day_start(self, moment: datetime) -> datetime:
        return self.day_start(moment + timedelta(days=1))

    def day_end(self, moment: datetime) -> datetime:
        midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + timedelta(hours=self.workday_end_hour)

    def anchor(self, now: datetime) -> datetime:
        """Starting point of a scheduling call, derived from the time of day.

        Evenings roll to tomorrow morning, early mornings wait for the work day,
        otherwise leave a short lead before the first slot.
        """
        if now.hour >= self.evening_cutoff_hour:
            return self.next_day_start(now)
        if now.hour < self.workday_start_hour:
            return self.day_start(now)
        return (now + timedelta(minutes=self.lead_minutes)).replace(second=0, microsecond=0)

    def ends_after_hours(self, start: datetime, end: datetime) -> bool:
        # compared against the start's own day so windows spilling past midnight count too
        return end >= self.day_end(start)

    def past_end_of_day(self, moment: datetime) -> bool:
        return moment.hour >= self.workday_end_hour
