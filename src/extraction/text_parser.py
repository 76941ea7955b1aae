"""Heuristic extraction of a task from free text.

Pulls a duration and a priority out of a short note such as
"明天上午开会2小时" or "urgent: write report 45 minutes" and keeps whatever
is left as the title. Pattern matching only; anything richer is the hosted
extractor's job.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from pydantic import BaseModel, Field

from taskplanner.models import MAX_ESTIMATED_MINUTES, Priority

logger = logging.getLogger(__name__)

DEFAULT_MINUTES = 60
DEFAULT_PRIORITY = Priority.MEDIUM

# English units must not run on into a longer word ("3 ministers"); CJK text has
# no spaces, so the Chinese units stay unbounded.
_HOURS = r"(\d+)\s*(?:个?小时|(?:hours?|hrs?)(?![A-Za-z]))"
_MINUTES = r"(\d+)\s*(?:分钟|(?:minutes?|mins?)(?![A-Za-z]))"

# Checked in this order and the first hit wins, so "2小时30分钟" reads as two hours.
DURATION_PATTERNS = [
    (re.compile(_HOURS, re.IGNORECASE), 60),
    (re.compile(_MINUTES, re.IGNORECASE), 1),
    (re.compile(_HOURS + r"\s*" + _MINUTES, re.IGNORECASE), 60),
]

# High is checked first, so "不紧急" still reads as high because it contains "紧急".
PRIORITY_KEYWORDS = [
    (Priority.HIGH, ["重要", "紧急", "高优先级", "important", "urgent", "high priority"]),
    (Priority.MEDIUM, ["一般", "普通", "normal"]),
    (Priority.LOW, ["低优先级", "不紧急", "low priority", "not urgent"]),
]

DATE_HINTS = ["今天", "明天", "后天", "今晚", "上午", "下午", "晚上", "早上", "中午", "today", "tomorrow", "tonight"]


def _word(word: str) -> str:
    if word.isascii():
        return r"(?<![A-Za-z])" + re.escape(word) + r"(?![A-Za-z])"
    return re.escape(word)


def _alternation(words: List[str]) -> re.Pattern:
    # longest first so "不紧急" is removed whole rather than leaving "不"
    ordered = sorted(words, key=len, reverse=True)
    return re.compile("|".join(_word(w) for w in ordered), re.IGNORECASE)


_KEYWORD_RE = _alternation([w for _, words in PRIORITY_KEYWORDS for w in words])
_DATE_HINT_RE = _alternation(DATE_HINTS)
_PRIORITY_RES = [(priority, _alternation(words)) for priority, words in PRIORITY_KEYWORDS]


class ParsedTask(BaseModel):
    title: str = Field(..., min_length=1)
    estimated_minutes: int = Field(DEFAULT_MINUTES, gt=0, le=MAX_ESTIMATED_MINUTES)
    priority: Priority = DEFAULT_PRIORITY


def parse_duration(text: str) -> int:
    for pattern, multiplier in DURATION_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        if match.lastindex and match.lastindex >= 2:
            return int(match.group(1)) * 60 + int(match.group(2))
        return int(match.group(1)) * multiplier
    return DEFAULT_MINUTES


def parse_priority(text: str) -> Priority:
    for priority, pattern in _PRIORITY_RES:
        if pattern.search(text):
            return priority
    return DEFAULT_PRIORITY


def derive_title(text: str) -> str:
    title = text
    for pattern, _ in DURATION_PATTERNS[:2]:
        title = pattern.sub(" ", title)
    title = _KEYWORD_RE.sub(" ", title)
    title = _DATE_HINT_RE.sub(" ", title)
    return re.sub(r"\s+", " ", title).strip()


def parse_task_text(text: str) -> Optional[ParsedTask]:
    """Return the task described by ``text``, or None when no title is left."""
    title = derive_title(text)
    if not title:
        logger.info("No title left after stripping %r", text)
        return None

    minutes = parse_duration(text)
    if not 0 < minutes <= MAX_ESTIMATED_MINUTES:
        logger.info("Ignoring out-of-range duration %d in %r", minutes, text)
        minutes = DEFAULT_MINUTES
    return ParsedTask(title=title, estimated_minutes=minutes, priority=parse_priority(text))
