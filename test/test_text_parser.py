import pytest

from extraction.text_parser import parse_duration, parse_priority, parse_task_text
from taskplanner.models import Priority


def test_meeting_tomorrow_morning():
    parsed = parse_task_text("明天上午开会2小时")
    assert parsed.title == "开会"
    assert parsed.estimated_minutes == 120
    assert parsed.priority == Priority.MEDIUM


def test_defaults_when_nothing_recognised():
    parsed = parse_task_text("整理书架")
    assert (parsed.estimated_minutes, parsed.priority) == (60, Priority.MEDIUM)
    assert parsed.title == "整理书架"


@pytest.mark.parametrize(
    "text, minutes",
    [
        ("写周报 45分钟", 45),
        ("读书3小时", 180),
        ("复习 2个小时", 120),
        # hours are checked first, so the minutes part is ignored
        ("开发 2小时30分钟", 120),
        ("write report 1 hour", 60),
        ("call the bank 20 mins", 20),
        ("gym 2 hrs", 120),
    ],
)
def test_duration_first_pattern_wins(text, minutes):
    assert parse_duration(text) == minutes


@pytest.mark.parametrize(
    "text, priority",
    [
        ("重要 客户演示", Priority.HIGH),
        ("紧急修复线上问题", Priority.HIGH),
        ("一般 的例会", Priority.MEDIUM),
        ("低优先级 整理邮件", Priority.LOW),
        ("URGENT fix login", Priority.HIGH),
        ("low priority cleanup", Priority.LOW),
        # contains "紧急", and high is checked before low
        ("不紧急 的事", Priority.HIGH),
        ("重要 但也是低优先级", Priority.HIGH),
    ],
)
def test_priority_keywords(text, priority):
    assert parse_priority(text) == priority


def test_title_strips_duration_and_keywords():
    parsed = parse_task_text("重要  准备   发布会 30分钟")
    assert parsed.title == "准备 发布会"
    assert parsed.priority == Priority.HIGH
    assert parsed.estimated_minutes == 30


def test_low_priority_phrase_removed_whole():
    assert parse_task_text("不紧急 洗车").title == "洗车"


@pytest.mark.parametrize("text", ["", "   ", "2小时", "紧急 30分钟", "明天 重要"])
def test_no_title_means_no_task(text):
    assert parse_task_text(text) is None


def test_zero_duration_falls_back_to_default():
    assert parse_task_text("冥想 0分钟").estimated_minutes == 60


def test_huge_duration_falls_back_to_default():
    assert parse_task_text("读书 99999999小时").estimated_minutes == 60


@pytest.mark.parametrize(
    "text",
    ["invite 3 ministers", "5 hoursmith reunion", "review abnormal logs", "tune the slow priority queue"],
)
def test_english_words_only_match_whole(text):
    parsed = parse_task_text(text)
    assert parsed.title == text
    assert parsed.estimated_minutes == 60
    assert parsed.priority == Priority.MEDIUM


def test_english_unit_next_to_chinese_text():
    parsed = parse_task_text("30min开会")
    assert (parsed.title, parsed.estimated_minutes) == ("开会", 30)
