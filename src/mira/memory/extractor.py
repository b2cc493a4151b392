"""Personal fact extraction from user utterances.

Pattern-matches an utterance into a typed Fact: reminder, problem, note,
attribute or name. Rules are tried in priority order and the first match
wins.
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime

from .models import Fact, FactKey
from .timeparse import resolve

logger = logging.getLogger(__name__)

# "<when>" must start with a day word, with "on" followed by a weekday, or
# with at/by followed by a clock time, noon or midnight. Anything else stays
# in the task, so "look at the report" and "turn on the lights" are kept whole.
_WEEKDAY = r"(?:next\s+|this\s+)?(?:mon|tues|wednes|thurs|fri|satur|sun)day\b"
_WHEN = (
    r"(?:(?:at|on|by)\s+)?(?:tomorrow|tonight|today)\b.*"
    rf"|on\s+{_WEEKDAY}.*"
    r"|(?:at|by)\s+(?:\d{1,2}(?::\d{2})?\s*(?:am|pm)?|noon|midnight)\b.*"
)

REMINDER_PATTERN = re.compile(
    rf"remind\s+me\s+(?:to|about)\s+(?P<task>.+?)(?:\s+(?P<when>{_WHEN}))?$",
    re.IGNORECASE,
)
PROBLEM_PATTERN = re.compile(
    r"(?:i\s+have|i'm\s+facing|i\s+am\s+facing|i\s+got)\s+"
    r"(?:a\s+|an\s+)?problem(?:\s+with)?\s+(?P<desc>.+)",
    re.IGNORECASE,
)
NOTE_PATTERN = re.compile(r"remember\s+that\s+(?P<statement>.+)", re.IGNORECASE)
ATTRIBUTE_PATTERNS = [
    re.compile(r"remember\s+my\s+(?P<attr>.+?)\s+is\s+(?P<value>.+)$", re.IGNORECASE),
    re.compile(r"my\s+(?P<attr>.+?)\s+is\s+(?P<value>.+)$", re.IGNORECASE),
]
NAME_PATTERN = re.compile(
    r"(?:i\s+am|i'm|my\s+name\s+is)\s+(?P<name>[a-z ]{2,40})$",
    re.IGNORECASE,
)


class FactExtractor:
    """Extracts typed personal facts from utterances.

    The extractor only computes facts. Whether a fact is persisted is
    decided by the turn controller.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize extractor.

        Args:
            clock: Returns the reference time for reminder resolution
        """
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._rules: list[Callable[[str, datetime], Fact | None]] = [
            self._try_reminder,
            self._try_problem,
            self._try_note,
            self._try_attribute,
            self._try_name,
        ]

    def extract(self, utterance: str, now: datetime | None = None) -> Fact | None:
        """Extract the first matching fact from an utterance.

        Args:
            utterance: User utterance text
            now: Reference time for reminders, defaults to the clock

        Returns:
            Fact or None if no rule matches
        """
        text = utterance.strip().rstrip(".!?")
        if not text:
            return None

        reference = now or self._clock()
        for rule in self._rules:
            fact = rule(text, reference)
            if fact is not None:
                logger.debug(f"Extracted fact {fact.key}: {fact.value!r}")
                return fact
        return None

    def _try_reminder(self, text: str, now: datetime) -> Fact | None:
        match = REMINDER_PATTERN.search(text)
        if not match:
            return None

        when = match.group("when")
        remind_at = resolve(when, now) if when else None
        return Fact(key=FactKey.REMINDER, value=match.group("task").strip(), remind_at=remind_at)

    def _try_problem(self, text: str, _now: datetime) -> Fact | None:
        match = PROBLEM_PATTERN.search(text)
        if not match:
            return None
        return Fact(key=FactKey.PROBLEM, value=match.group("desc").strip())

    def _try_note(self, text: str, _now: datetime) -> Fact | None:
        match = NOTE_PATTERN.search(text)
        if not match:
            return None
        return Fact(key=FactKey.NOTE, value=match.group("statement").strip())

    def _try_attribute(self, text: str, _now: datetime) -> Fact | None:
        for pattern in ATTRIBUTE_PATTERNS:
            match = pattern.search(text)
            if match:
                return Fact(
                    key=match.group("attr").strip().lower(),
                    value=match.group("value").strip(),
                )
        return None

    def _try_name(self, text: str, _now: datetime) -> Fact | None:
        match = NAME_PATTERN.search(text)
        if not match:
            return None
        return Fact(key=FactKey.NAME, value=match.group("name").strip())


__all__ = ["FactExtractor"]
