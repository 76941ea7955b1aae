from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, List, Optional

from pydantic import ValidationError

from llm.providers.base import LLMProvider
from llm.schemas import ExtractedTask, TaskExtractionResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a planning assistant. You turn short notes into schedulable tasks "
    "and answer with JSON only."
)

EXTRACTION_TEMPLATE = """Extract tasks from the note below. Today is {today} ({weekday}), current time {now}.

Return a JSON array. Each element must have:
- "title": short task title without time or priority words
- "estimatedMinutes": positive integer duration in minutes (default 60)
- "priority": one of "high", "medium", "low" (default "medium")
- "startTime" and "endTime": optional, format "YYYY-MM-DD HH:mm", only when the note fixes a time

Note:
{text}
"""


class LLMResponseError(ValueError):
    """The model answered, but not with a usable task list."""


class LLMUnavailableError(RuntimeError):
    """No provider is configured."""


def default_provider() -> Optional[LLMProvider]:
    """Pick the provider named by LLM_PROVIDER, or None when it cannot be used."""
    name = os.getenv("LLM_PROVIDER", "deepseek").strip().lower()
    if name == "mock":
        from llm.providers.mock_provider import MockProvider

        return MockProvider()
    if name == "deepseek":
        from llm.providers.deepseek_provider import DeepSeekProvider, is_api_configured

        if is_api_configured():
            return DeepSeekProvider()
        logger.info("DeepSeek API key not configured, hosted extraction disabled")
    return None


def _json_payload(text: str) -> Any:
    """Parse the JSON array (or {"tasks": [...]} object) inside a model answer.

    Models like to wrap JSON in prose or code fences, so the outermost
    bracketed span is tried when the whole text is not valid JSON.
    """
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError):
        pass

    for open_ch, close_ch in (("[", "]"), ("{", "}")):
        start = text.find(open_ch)
        end = text.rfind(close_ch)
        if start != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue
    raise LLMResponseError("model output is not JSON")


class LLMClient:
    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider if provider is not None else default_provider()

    @property
    def available(self) -> bool:
        return self.provider is not None

    def complete(self, user: str, system: str = SYSTEM_PROMPT) -> str:
        if self.provider is None:
            raise LLMUnavailableError("no LLM provider configured")
        return self.provider.generate(system=system, user=user)

    def extract_tasks(self, text: str, now: Optional[datetime] = None) -> List[ExtractedTask]:
        now = now or datetime.now()
        prompt = EXTRACTION_TEMPLATE.format(
            today=now.strftime("%Y-%m-%d"),
            weekday=now.strftime("%A"),
            now=now.strftime("%H:%M"),
            text=text,
        )
        raw = self.complete(prompt)
        payload = _json_payload(raw)
        if isinstance(payload, list):
            payload = {"tasks": payload}
        if not isinstance(payload, dict):
            raise LLMResponseError("model output is neither an array nor an object")

        try:
            result = TaskExtractionResult.model_validate(payload)
        except ValidationError as e:
            raise LLMResponseError(f"model output failed validation: {e}") from e

        logger.info(f"LLM extracted {len(result.tasks)} task(s)")
        return result.tasks
