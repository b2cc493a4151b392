"""Keyword-based mood heuristic for user utterances."""

import re
from enum import Enum


class Mood(Enum):
    """Detected user mood."""

    NEUTRAL = "neutral"
    HAPPY = "happy"
    SAD = "sad"
    STRESSED = "stressed"
    ANGRY = "angry"
    CRISIS = "crisis"


# Checked in priority order; crisis always wins. Crisis phrases match
# anywhere in the text. Other keywords match whole words, including their
# common inflections ("crying", "panicked").
MOOD_PATTERNS: list[tuple[Mood, re.Pattern[str]]] = [
    (Mood.CRISIS, re.compile(r"suicid|kill myself|end my life|i want to die", re.IGNORECASE)),
    (
        Mood.SAD,
        re.compile(
            r"\b(?:sad(?:ly|ness|der|dest)?|down|upset(?:ting)?|lonel(?:y|iness)"
            r"|cry|cries|cried|crying)\b",
            re.IGNORECASE,
        ),
    ),
    (
        Mood.STRESSED,
        re.compile(
            r"\b(?:stress(?:ed|ful|ing)?|anxious|anxiety|overwhelm(?:ed|ing)?"
            r"|panic(?:s|ked|king|ky)?)\b",
            re.IGNORECASE,
        ),
    ),
    (
        Mood.ANGRY,
        re.compile(
            r"\b(?:angry|angrier|frustrat(?:ed|ing|ion)|furious|irritat(?:ed|ing)"
            r"|rage|raging)\b",
            re.IGNORECASE,
        ),
    ),
    (
        Mood.HAPPY,
        re.compile(
            r"\b(?:happy|happier|happiest|excited|exciting|joyful|great(?:est)?|awesome)\b",
            re.IGNORECASE,
        ),
    ),
]


def classify(text: str) -> Mood:
    """Classify the mood expressed in text.

    Args:
        text: User utterance

    Returns:
        First matching mood in priority order, or NEUTRAL
    """
    for mood, pattern in MOOD_PATTERNS:
        if pattern.search(text or ""):
            return mood
    return Mood.NEUTRAL


__all__ = ["MOOD_PATTERNS", "Mood", "classify"]
