from datetime import datetime

import pytest

from taskplanner.models import Priority, Task


def test_task_defaults():
    t = Task(id=1, title="Test")
    assert t.estimated_minutes == 60
    assert t.priority == Priority.MEDIUM
    assert not t.is_scheduled
    assert t.window is None


def test_title_is_trimmed():
    assert Task(id=1, title="  Test  ").title == "Test"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"title": ""},
        {"title": "   "},
        {"title": "Bad", "estimated_minutes": -5},
        {"title": "Bad", "estimated_minutes": 0},
        {"title": "Bad", "estimated_minutes": 10**10},
        {"title": "Bad", "priority": "someday"},
        {"title": "Bad", "start_time": datetime(2026, 1, 1, 9, 0)},
        {"title": "Bad", "start_time": datetime(2026, 1, 1, 9, 0), "end_time": datetime(2026, 1, 1, 9, 0)},
    ],
)
def test_invalid_task(kwargs):
    with pytest.raises(Exception):
        Task(id=1, **kwargs)


def test_priority_order_and_aliases():
    assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank
    assert Priority.parse("高") == Priority.HIGH
    assert Priority.parse(" Low ") == Priority.LOW


def test_timestamps_serialize_in_minute_format():
    t = Task(id=3, title="X", start_time="2026-01-01 09:00", end_time=datetime(2026, 1, 1, 9, 30, 45))
    data = t.model_dump(mode="json")
    assert data["start_time"] == "2026-01-01 09:00"
    assert data["end_time"] == "2026-01-01 09:30"
    assert t.window == (3, datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 9, 30))


def test_with_schedule_returns_validated_copy():
    t = Task(id=1, title="X", estimated_minutes=30)
    placed = t.with_schedule(datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 9, 30), auto_scheduled=True)
    assert placed.auto_scheduled and placed.is_scheduled
    assert not t.is_scheduled
    assert placed.created_at == t.created_at
