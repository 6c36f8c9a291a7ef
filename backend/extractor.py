"""
Keyword extraction for quick-capture messages (simulated SMS).

Turns a sentence like "Urgent: Buy groceries today" into a structured task.
All matching is case-insensitive and whole-word, so "homework" is left alone
even though it contains both "home" and "work".
"""
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Union

from models import ExtractionResult


def _word_pattern(words: tuple[str, ...]) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(words) + r")\b", re.IGNORECASE)


@dataclass(frozen=True)
class KeywordRule:
    """If any of `keywords` appears in the text, the field takes `value`."""
    keywords: tuple[str, ...]
    value: Union[str, timedelta]
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", _word_pattern(self.keywords))

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


# Rules are checked top to bottom; the first match wins.
CATEGORY_RULES = [
    KeywordRule(("life", "personal", "home"), "life"),
]

PRIORITY_RULES = [
    KeywordRule(("urgent", "important", "asap"), "high"),
    KeywordRule(("low", "whenever"), "low"),
]

# Offsets from `now`, truncated to a calendar date.
DUE_DATE_RULES = [
    KeywordRule(("today",), timedelta(0)),
    KeywordRule(("tomorrow",), timedelta(hours=24)),
]

# "work", "high" and "medium" are stripped but never select a value:
# a task is "work" only because no life keyword was present.
STRIPPED_KEYWORDS = (
    "work", "life", "personal", "home",
    "urgent", "important", "asap", "low", "high", "medium", "whenever",
    "today", "tomorrow",
)

_KEYWORD_RE = _word_pattern(STRIPPED_KEYWORDS)
_WHITESPACE_RE = re.compile(r"\s+")

# Keywords at either end of the text are removed together with the separators
# next to them ("Urgent: ...", "... - asap"); other punctuation is left alone.
_SEPARATORS = r"[\s:;,-]*"
_KEYWORD_RUN = r"(?:\b(?:" + "|".join(STRIPPED_KEYWORDS) + r")\b" + _SEPARATORS + r")+"
_LEADING_RE = re.compile("^" + _SEPARATORS + _KEYWORD_RUN, re.IGNORECASE)
_TRAILING_RE = re.compile(_SEPARATORS + _KEYWORD_RUN + "$", re.IGNORECASE)


def _first_match(rules: list[KeywordRule], text: str, default=None):
    for rule in rules:
        if rule.matches(text):
            return rule.value
    return default


def strip_keywords(text: str) -> str:
    """Remove every recognised keyword and tidy the leftover whitespace."""
    title = _LEADING_RE.sub("", text)
    title = _TRAILING_RE.sub("", title)
    title = _KEYWORD_RE.sub("", title)
    return _WHITESPACE_RE.sub(" ", title).strip()


def extract(text: Optional[str], now: datetime) -> ExtractionResult:
    """
    Extract title, category, priority and due date from free text.

    `now` is the reference instant for "today"/"tomorrow". A message made of
    nothing but keywords (or nothing at all) comes back with is_empty=True;
    callers must not create a task from it.
    """
    raw_text = (text or "").strip()

    offset = _first_match(DUE_DATE_RULES, raw_text)
    due_date = (now + offset).date() if offset is not None else None

    title = strip_keywords(raw_text)
    return ExtractionResult(
        raw_text=raw_text,
        title=title,
        category=_first_match(CATEGORY_RULES, raw_text, "work"),
        priority=_first_match(PRIORITY_RULES, raw_text, "medium"),
        due_date=due_date,
        is_empty=not title,
    )
