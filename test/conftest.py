from datetime import datetime

import pytest

from scheduling.scheduler import Scheduler
from taskplanner.collection import TaskCollection


class FakeProvider:
    def __init__(self, response_text: str):
        self._response_text = response_text
        self.calls = []

    def generate(self, *, system: str, user: str) -> str:
        self.calls.append(user)
        return self._response_text


class FailingProvider:
    def generate(self, *, system: str, user: str) -> str:
        raise RuntimeError("connection refused")


@pytest.fixture(autouse=True)
def no_hosted_llm(monkeypatch):
    # keep every test offline regardless of the developer's environment
    monkeypatch.setenv("LLM_PROVIDER", "none")
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def failing_provider():
    return FailingProvider()


@pytest.fixture
def morning():
    """09:00 on a fixed day, so the anchor is 09:30 the same day."""
    return datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def collection(scheduler):
    return TaskCollection(scheduler=scheduler)
