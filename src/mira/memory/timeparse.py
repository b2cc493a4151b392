"""Loose natural-language time resolution for reminders.

Turns phrases like "tomorrow at 6pm" or "tonight" into absolute datetimes.
"""

import re
from datetime import datetime, timedelta

DEFAULT_HOUR = 9
TONIGHT_HOUR = 20
NAMED_HOURS = {"noon": 12, "midnight": 0}

CLOCK_PATTERN = re.compile(r"(\d{1,2})(?::(\d{2}))?\s?(am|pm)?", re.IGNORECASE)


def _apply_clock(phrase: str, remind_at: datetime) -> datetime:
    """Override hour/minute from the first clock time in the phrase."""
    match = CLOCK_PATTERN.search(phrase)
    if not match:
        for name, hour in NAMED_HOURS.items():
            if re.search(rf"\b{name}\b", phrase):
                return remind_at.replace(hour=hour, minute=0)
        return remind_at

    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    meridiem = (match.group(3) or "").lower()

    if meridiem == "pm" and hours < 12:
        hours += 12
    if meridiem == "am" and hours == 12:
        hours = 0

    if hours > 23 or minutes > 59:
        return remind_at

    return remind_at.replace(hour=hours, minute=minutes)


def resolve(phrase: str, now: datetime) -> datetime:
    """Resolve a time phrase relative to now.

    Defaults to 09:00 on now's day. "tomorrow" moves one day ahead,
    "tonight" means 20:00, "today" keeps the day. An explicit clock time
    ("6pm", "18:30", "7:15 am"), or else "noon" or "midnight", overrides the
    hour. A result that lands before now is pushed to the next day.

    Args:
        phrase: Free-form time phrase
        now: Reference time (its tzinfo is kept)

    Returns:
        Absolute datetime for the phrase
    """
    text = phrase.lower().strip()
    remind_at = now.replace(hour=DEFAULT_HOUR, minute=0, second=0, microsecond=0)

    if "tomorrow" in text:
        remind_at += timedelta(days=1)
    elif "tonight" in text:
        remind_at = remind_at.replace(hour=TONIGHT_HOUR)

    remind_at = _apply_clock(text, remind_at)

    if remind_at < now:
        remind_at += timedelta(days=1)

    return remind_at


__all__ = ["resolve"]
