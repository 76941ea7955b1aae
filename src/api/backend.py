import logging
from datetime import datetime
from typing import Optional

from api.metrics import EXTRACTION_FALLBACK_TOTAL, TASKS_EXTRACTED_TOTAL, record_placements
from extraction.task_extractor import SOURCE_LOCAL, FallbackTaskExtractor
from taskplanner.collection import TaskCollection

logger = logging.getLogger(__name__)


class PlannerBackend:
    """Turns free text into scheduled tasks."""

    def __init__(self, collection: TaskCollection, extractor: Optional[FallbackTaskExtractor] = None):
        self.collection = collection
        self.extractor = extractor or FallbackTaskExtractor()

    def submit_text(self, text: str, now: Optional[datetime] = None) -> dict:
        # 1. Extract tasks (hosted model first, local parser on failure)
        extracted = self.extractor.extract(text, now=now)
        source = self.extractor.last_source
        TASKS_EXTRACTED_TOTAL.labels(source=source).inc(len(extracted))
        if source == SOURCE_LOCAL:
            EXTRACTION_FALLBACK_TOTAL.inc()

        if not extracted:
            logger.info("Nothing to schedule in submitted text")
            return {"tasks": [], "source": source, "tasks_processed": 0}

        # 2. Add and place them
        results = self.collection.apply_extracted(extracted, now=now)
        record_placements([p for _, p in results])

        return {
            "tasks": [
                {**task.model_dump(mode="json"), "strategy": placement.strategy}
                for task, placement in results
            ],
            "source": source,
            "tasks_processed": len(results),
        }
