import logging
from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import get_collection
from api.metrics import TASKS_GAUGE
from llm.providers.deepseek_provider import is_api_configured
from taskplanner import views
from taskplanner.collection import TaskCollection

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(collection: TaskCollection = Depends(get_collection)) -> dict:
    """Health check endpoint for container orchestration."""
    tasks = collection.tasks
    return {
        "status": "healthy",
        "tasks": len(tasks),
        "scheduled": len(views.scheduled_tasks(tasks)),
        "hosted_extraction": is_api_configured(),
    }


@router.get("/metrics")
async def metrics(collection: TaskCollection = Depends(get_collection)) -> Response:
    """
    Prometheus scrape endpoint.
    """
    TASKS_GAUGE.set(len(collection))
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
