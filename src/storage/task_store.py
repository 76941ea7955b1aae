from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Tuple

from pydantic import ValidationError

from taskplanner.models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """JSON file holding the task collection and the next id to hand out."""

    def __init__(self, path: str = "data/tasks.json"):
        self.path = Path(path)

    def load(self) -> Tuple[List[Task], int]:
        """
        Load tasks from disk. Returns an empty collection if the file is missing or invalid.
        """
        if not self.path.exists():
            return [], 1

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            tasks = [Task.model_validate(item) for item in data.get("tasks", [])]
            next_id = int(data.get("next_id", 1))
        except (OSError, ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable task file {self.path}: {e}")
            return [], 1

        # never hand out an id that is already taken
        highest = max((t.id for t in tasks), default=0)
        return tasks, max(next_id, highest + 1)

    def save(self, tasks: List[Task], next_id: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "tasks": [t.model_dump(mode="json") for t in tasks],
            "next_id": next_id,
        }
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
