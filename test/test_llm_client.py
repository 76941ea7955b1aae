from datetime import datetime

import pytest

from llm.llm_client import LLMClient, LLMResponseError, LLMUnavailableError
from taskplanner.models import Priority


def test_extract_tasks(fake_provider_factory):
    provider = fake_provider_factory(
        '[{"title":"Send invoice","estimatedMinutes":20,"priority":"high"}]'
    )
    client = LLMClient(provider=provider)
    tasks = client.extract_tasks("Send invoice")
    assert len(tasks) == 1
    assert tasks[0].title == "Send invoice"
    assert tasks[0].estimated_minutes == 20
    assert tasks[0].priority == Priority.HIGH
    assert not tasks[0].has_explicit_window


def test_prompt_embeds_text_and_date(fake_provider_factory):
    provider = fake_provider_factory("[]")
    LLMClient(provider=provider).extract_tasks("买牛奶", now=datetime(2026, 3, 2, 9, 0))
    assert "买牛奶" in provider.calls[0]
    assert "2026-03-02" in provider.calls[0]


def test_llm_extra_text_around_json(fake_provider_factory):
    provider = fake_provider_factory(
        'Sure! Here is the result:\n```json\n[{"title":"Call mom","estimatedMinutes":10}]\n```\nThanks.'
    )
    tasks = LLMClient(provider=provider).extract_tasks("Call mom")
    assert [t.title for t in tasks] == ["Call mom"]


def test_object_with_tasks_key_is_accepted(fake_provider_factory):
    provider = fake_provider_factory('{"tasks":[{"title":"Gym","estimatedMinutes":45,"priority":"低"}]}')
    tasks = LLMClient(provider=provider).extract_tasks("Gym")
    assert tasks[0].priority == Priority.LOW


def test_explicit_window_is_parsed(fake_provider_factory):
    provider = fake_provider_factory(
        '[{"title":"Dentist","estimatedMinutes":30,"priority":"medium",'
        '"startTime":"2026-03-03 14:00","endTime":"2026-03-03 14:30"}]'
    )
    task = LLMClient(provider=provider).extract_tasks("Dentist")[0]
    assert task.has_explicit_window
    assert task.start_time == datetime(2026, 3, 3, 14, 0)
    assert task.end_time == datetime(2026, 3, 3, 14, 30)


@pytest.mark.parametrize(
    "answer",
    [
        "INVALID OUTPUT",
        '[{"title":"","estimatedMinutes":10}]',
        '[{"title":"x","estimatedMinutes":-5}]',
        '[{"title":"x","estimatedMinutes":10000000000}]',
        '[{"title":"x","priority":"whenever"}]',
        '[{"title":"x","startTime":"2026-03-03 15:00","endTime":"2026-03-03 14:00"}]',
        '"just a string"',
    ],
)
def test_unusable_answer_raises(fake_provider_factory, answer):
    client = LLMClient(provider=fake_provider_factory(answer))
    with pytest.raises(LLMResponseError):
        client.extract_tasks("anything")


def test_no_provider_configured():
    client = LLMClient()
    assert not client.available
    with pytest.raises(LLMUnavailableError):
        client.complete("hello")


def test_mock_provider_selected_by_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    tasks = LLMClient().extract_tasks("plan my week")
    assert len(tasks) == 2
    assert tasks[0].priority == Priority.HIGH
