from __future__ import annotations
import json
from llm.providers.base import LLMProvider

class MockProvider(LLMProvider):
    def generate(self, *, system: str, user: str) -> str:
        """
        Returns a canned JSON array for extraction prompts.
        """
        if "Extract tasks" in user:
            return json.dumps([
                {
                    "title": "Write the weekly report",
                    "estimatedMinutes": 90,
                    "priority": "high",
                },
                {
                    "title": "Team sync",
                    "estimatedMinutes": 30,
                    "priority": "medium",
                    "startTime": None,
                    "endTime": None,
                },
            ])

        # Default fallback
        return "[]"
