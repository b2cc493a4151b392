"""Language-model intent parsing and wake-word resolution.

The model corrects typos in the transcript and returns one JSON object
describing whether the assistant was addressed and what was asked.
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Any

from ..llm.model import LanguageModel

logger = logging.getLogger(__name__)

DEFAULT_WAKE_WORDS = ["mira", "meera", "myra", "mirra", "miraah", "sweetheart", "babe", "baby"]

INTENT_PROMPT = """You are a command parser for the AI assistant Mira.

1. First, correct all typos in the transcript. For example, "yutu" -> "YouTube", "vcode" -> "VSCode".
2. Then parse the corrected transcript into JSON with exactly these fields:
{
  "wake": true | false,
  "intent": "string",
  "target": "string|null",
  "query": "string|null",
  "corrected_transcript": "string"
}

Rules:
- "wake" must be true if the transcript mentions Mira or variants (even with minor typos) like "mira", "meera", "mirra", "myra", "mirah", "mierra" or affectionate terms like "baby", "babe", "sweetheart".
- If wake is false, set other fields to null.
- "intent" is a short verb like "open", "search", "play", "chat", "greet", "introduce", "mood_boost", "open_software".
- "target" is the app, site, or entity.
- "query" is the rest of the user request.
- Do not explain. JSON only.

Examples:
Transcript: "hey mira open yutu"
{"wake": true, "intent": "open", "target": "youtube", "query": null, "corrected_transcript": "hey mira open YouTube"}

Transcript: "what is the weather today"
{"wake": false, "intent": null, "target": null, "query": null, "corrected_transcript": "what is the weather today"}
"""


@dataclass(frozen=True)
class IntentRecord:
    """Structured interpretation of one transcript.

    Attributes:
        wake: Whether the assistant was addressed
        intent: Short verb such as "open" or "chat"
        target: App, site or entity
        query: Remainder of the request
        corrected_transcript: Typo-corrected transcript
    """

    wake: bool
    intent: str | None = None
    target: str | None = None
    query: str | None = None
    corrected_transcript: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntentRecord":
        """Build a record from model JSON.

        Non-string fields become None. When wake is false, intent,
        target and query are cleared.
        """

        def text(key: str) -> str | None:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        wake = data.get("wake") is True
        if not wake:
            return cls(wake=False, corrected_transcript=text("corrected_transcript"))

        intent = text("intent")
        return cls(
            wake=True,
            intent=intent.lower() if intent else None,
            target=text("target"),
            query=text("query"),
            corrected_transcript=text("corrected_transcript"),
        )


class IntentParser:
    """Parses transcripts into IntentRecords with a language model."""

    def __init__(self, llm: LanguageModel) -> None:
        """Initialize parser.

        Args:
            llm: Language model used for parsing
        """
        self._llm = llm

    def parse(self, transcript: str, prompt: str = INTENT_PROMPT) -> IntentRecord | None:
        """Parse a transcript.

        Never raises: model errors and malformed output yield None.

        Args:
            transcript: Raw transcript
            prompt: Instruction template

        Returns:
            IntentRecord, or None when no usable JSON object came back
        """
        try:
            response = self._llm.generate(f'{prompt}\nUser: "{transcript}"')
        except Exception as e:
            logger.warning(f"Intent parse failed: {e}")
            return None

        return self.parse_response(response.text)

    @staticmethod
    def parse_response(response_text: str) -> IntentRecord | None:
        """Extract the JSON object from a model reply.

        Uses the span from the first "{" to the last "}".
        """
        raw = (response_text or "").strip()
        json_start = raw.find("{")
        json_end = raw.rfind("}")
        if json_start == -1 or json_end == -1 or json_end < json_start:
            logger.debug(f"No JSON object in intent reply: {raw[:80]!r}")
            return None

        try:
            data = json.loads(raw[json_start : json_end + 1])
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse intent JSON: {e}")
            return None

        return IntentRecord.from_dict(data)


def detect_wake_word(transcript: str, wake_words: list[str] | None = None) -> bool:
    """Check whether any wake word occurs in the transcript."""
    text = (transcript or "").lower()
    return any(word in text for word in (wake_words or DEFAULT_WAKE_WORDS))


def resolve_wake(
    record: IntentRecord | None,
    transcript: str,
    wake_words: list[str] | None = None,
) -> IntentRecord | None:
    """Combine the model's wake decision with the local wake-word check.

    Args:
        record: Parsed record, if any
        transcript: Raw transcript
        wake_words: Local wake words

    Returns:
        The record when woken; a chat record when only the local check
        fires; None when the assistant was not addressed
    """
    if record is not None and record.wake:
        return record

    if detect_wake_word(transcript, wake_words):
        logger.debug("Local wake word matched; treating turn as chat")
        if record is None:
            return IntentRecord(wake=True, intent="chat")
        return replace(record, wake=True, intent="chat")

    return None


__all__ = [
    "DEFAULT_WAKE_WORDS",
    "INTENT_PROMPT",
    "IntentParser",
    "IntentRecord",
    "detect_wake_word",
    "resolve_wake",
]
