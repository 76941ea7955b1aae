import asyncio
import logging
import time
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, ValidationError

from api.backend import PlannerBackend
from api.dependencies import get_collection, get_extractor
from api.metrics import REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS, TASKS_GAUGE, record_placements
from extraction.task_extractor import FallbackTaskExtractor
from taskplanner import views
from taskplanner.collection import TaskCollection, TaskNotFoundError
from taskplanner.models import MAX_ESTIMATED_MINUTES, Priority

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateTaskIn(BaseModel):
    title: str = Field(..., min_length=1)
    estimated_minutes: int = Field(60, gt=0, le=MAX_ESTIMATED_MINUTES)
    priority: Priority = Priority.MEDIUM


class ParseTextIn(BaseModel):
    text: str


class ScheduleIn(BaseModel):
    start_time: str  # YYYY-MM-DD HH:mm
    end_time: str


def _observe(endpoint: str, status: str, start: float, collection: TaskCollection) -> None:
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
    TASKS_GAUGE.set(len(collection))


def _get_or_404(collection: TaskCollection, task_id: int):
    try:
        return collection.get(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")


@router.get("/tasks")
async def list_tasks(
    status: Literal["all", "active", "completed"] = "all",
    order: Literal["created", "priority"] = "created",
    collection: TaskCollection = Depends(get_collection),
) -> dict:
    tasks = collection.tasks
    if status == "active":
        tasks = views.active_tasks(tasks)
    elif status == "completed":
        tasks = views.completed_tasks(tasks)
    if order == "priority":
        tasks = views.tasks_by_priority(tasks)
    return {
        "tasks": [t.model_dump(mode="json") for t in tasks],
        "total": len(tasks),
    }


@router.post("/tasks")
async def create_task(
    payload: CreateTaskIn,
    collection: TaskCollection = Depends(get_collection),
) -> dict:
    """Add a task and place it on the calendar straight away."""
    start = time.time()
    try:
        task = collection.add_task(
            payload.title, payload.estimated_minutes, payload.priority, auto_schedule=False
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    placement = collection.schedule_task(task.id)
    record_placements([placement])
    _observe("/tasks", "created", start, collection)

    return {
        "status": "created",
        "strategy": placement.strategy,
        "task": collection.get(task.id).model_dump(mode="json"),
    }


@router.post("/tasks/parse")
async def parse_text(
    payload: ParseTextIn,
    collection: TaskCollection = Depends(get_collection),
    extractor: FallbackTaskExtractor = Depends(get_extractor),
) -> dict:
    start = time.time()
    logger.info(f"Received text: {payload.text[:50]}...")

    backend = PlannerBackend(collection, extractor)
    # extraction may block on the hosted model
    result = await asyncio.to_thread(backend.submit_text, payload.text)

    status = "processed" if result["tasks_processed"] else "empty"
    _observe("/tasks/parse", status, start, collection)
    return {"status": status, **result}


@router.post("/tasks/schedule")
async def schedule_all(collection: TaskCollection = Depends(get_collection)) -> dict:
    """Lay out every unscheduled active task in priority order."""
    start = time.time()
    placements = collection.schedule_unscheduled()
    record_placements(placements)
    _observe("/tasks/schedule", "processed", start, collection)
    return {
        "scheduled": [collection.get(p.task_id).model_dump(mode="json") for p in placements],
        "tasks_processed": len(placements),
    }


@router.post("/tasks/{task_id}/schedule")
async def schedule_one(task_id: int, collection: TaskCollection = Depends(get_collection)) -> dict:
    _get_or_404(collection, task_id)
    placement = collection.schedule_task(task_id)
    record_placements([placement])
    return {
        "strategy": placement.strategy,
        "task": collection.get(task_id).model_dump(mode="json"),
    }


@router.put("/tasks/{task_id}/schedule")
async def set_schedule(
    task_id: int,
    payload: ScheduleIn,
    collection: TaskCollection = Depends(get_collection),
) -> dict:
    """Manually pin a task to a window."""
    _get_or_404(collection, task_id)
    try:
        task = collection.set_schedule(task_id, payload.start_time, payload.end_time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid window: {e}")
    return {"task": task.model_dump(mode="json")}


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(task_id: int, collection: TaskCollection = Depends(get_collection)) -> dict:
    _get_or_404(collection, task_id)
    return {"task": collection.toggle_task(task_id).model_dump(mode="json")}


@router.post("/tasks/{task_id}/pomodoro")
async def increment_pomodoro(task_id: int, collection: TaskCollection = Depends(get_collection)) -> dict:
    _get_or_404(collection, task_id)
    return {"task": collection.increment_pomodoro(task_id).model_dump(mode="json")}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: int, collection: TaskCollection = Depends(get_collection)) -> dict:
    _get_or_404(collection, task_id)
    collection.delete_task(task_id)
    TASKS_GAUGE.set(len(collection))
    return {"status": "deleted", "id": task_id}


@router.get("/calendar/events")
async def calendar_events(collection: TaskCollection = Depends(get_collection)) -> dict:
    events = views.calendar_events(collection.tasks)
    return {"events": [e.model_dump() for e in events]}
