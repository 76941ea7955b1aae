import os
from typing import Optional

from scheduling.policy import SchedulingPolicy
from scheduling.scheduler import Scheduler
from storage.task_store import TaskStore
from taskplanner.collection import TaskCollection

# Configuration
TASKS_PATH = os.getenv("TASKS_PATH", "data/tasks.json").strip()

policy = SchedulingPolicy(
    workday_start_hour=int(os.getenv("WORKDAY_START_HOUR", "9")),
    workday_end_hour=int(os.getenv("WORKDAY_END_HOUR", "22")),
    evening_cutoff_hour=int(os.getenv("EVENING_CUTOFF_HOUR", "18")),
    max_day_attempts=int(os.getenv("SCHEDULE_MAX_DAY_ATTEMPTS", "7")),
)

# Global instance initialized at startup
collection: Optional[TaskCollection] = None


def init_collection() -> TaskCollection:
    global collection
    store = TaskStore(path=TASKS_PATH) if TASKS_PATH else None
    collection = TaskCollection(scheduler=Scheduler(policy), store=store)
    return collection
