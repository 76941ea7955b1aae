from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from extraction.text_parser import parse_task_text
from llm.llm_client import LLMClient
from llm.schemas import ExtractedTask

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"


class LocalTaskExtractor:
    """Pattern-based extraction, always available."""

    source = SOURCE_LOCAL

    def extract(self, text: str, now: Optional[datetime] = None) -> List[ExtractedTask]:
        parsed = parse_task_text(text)
        if parsed is None:
            return []
        return [
            ExtractedTask(
                title=parsed.title,
                estimated_minutes=parsed.estimated_minutes,
                priority=parsed.priority,
            )
        ]


class TaskExtractor:
    """Hosted-model extraction. Raises on any failure."""

    source = SOURCE_REMOTE

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm = llm_client or LLMClient()

    @property
    def available(self) -> bool:
        return self.llm.available

    def extract(self, text: str, now: Optional[datetime] = None) -> List[ExtractedTask]:
        return self.llm.extract_tasks(text, now=now)


class FallbackTaskExtractor:
    """Try the hosted extractor, fall through to the local one on any failure.

    ``last_source`` tells the caller which implementation produced the most
    recent result.
    """

    def __init__(
        self,
        remote: Optional[TaskExtractor] = None,
        local: Optional[LocalTaskExtractor] = None,
    ):
        self.remote = remote if remote is not None else TaskExtractor()
        self.local = local or LocalTaskExtractor()
        self.last_source = SOURCE_LOCAL

    def extract(self, text: str, now: Optional[datetime] = None) -> List[ExtractedTask]:
        if self.remote.available:
            try:
                tasks = self.remote.extract(text, now=now)
                if tasks:
                    self.last_source = SOURCE_REMOTE
                    return tasks
                logger.warning("Hosted extractor returned no tasks, using local parser")
            except Exception as e:
                logger.warning(f"Hosted extraction failed, using local parser: {e}")

        self.last_source = SOURCE_LOCAL
        return self.local.extract(text, now=now)
