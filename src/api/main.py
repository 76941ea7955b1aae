import logging
import os

from fastapi import FastAPI

from api import state
from api.routers import ops, tasks

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Task Planner")
app.include_router(tasks.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    if state.collection is None:
        collection = state.init_collection()
        logger.info(f"Task collection ready ({len(collection)} task(s))")
