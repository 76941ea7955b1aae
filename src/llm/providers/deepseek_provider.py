from __future__ import annotations
import os
import httpx
from .base import LLMProvider

PLACEHOLDER_KEY = "your-api-key-here"


def is_api_configured() -> bool:
    key = os.getenv("DEEPSEEK_API_KEY", "").strip()
    return bool(key) and key != PLACEHOLDER_KEY


class DeepSeekProvider(LLMProvider):
    """Chat-completions provider (DeepSeek, or any OpenAI-compatible endpoint)."""

    def __init__(self):
        self.api_key = os.getenv("DEEPSEEK_API_KEY", "").strip()
        self.endpoint = os.getenv(
            "DEEPSEEK_API_ENDPOINT", "https://api.deepseek.com/v1/chat/completions"
        ).strip()
        self.model = os.getenv("DEEPSEEK_MODEL", "deepseek-chat").strip()
        self.temperature = float(os.getenv("DEEPSEEK_TEMPERATURE", "0.1"))
        self.max_tokens = int(os.getenv("DEEPSEEK_MAX_TOKENS", "1000"))
        self.timeout_s = float(os.getenv("LLM_TIMEOUT_S", "30"))

        if not is_api_configured():
            raise RuntimeError("DEEPSEEK_API_KEY is missing")

    def generate(self, *, system: str, user: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        with httpx.Client(timeout=self.timeout_s) as client:
            r = client.post(self.endpoint, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"]
