"""Synthesizer protocol and data classes.

Defines the interface for text-to-speech synthesis.
"""

from dataclasses import dataclass
from typing import Protocol

MAX_SPEECH_CHARS = 500


class SpeechError(Exception):
    """Raised when a provider cannot synthesize speech."""


@dataclass
class SynthesisResult:
    """Result of text-to-speech synthesis.

    Attributes:
        audio: Raw PCM audio bytes (16-bit little-endian, mono)
        sample_rate: Audio sample rate in Hz
        duration_ms: Audio duration in milliseconds
        latency_ms: Synthesis latency in milliseconds
    """

    audio: bytes
    sample_rate: int
    duration_ms: int
    latency_ms: int


def truncate_text(text: str, max_chars: int = MAX_SPEECH_CHARS) -> str:
    """Clip text to the provider's character limit."""
    return text[:max_chars]


class Synthesizer(Protocol):
    """Interface for text-to-speech synthesis.

    Implementations convert text to speech audio.
    """

    def synthesize(self, text: str) -> SynthesisResult:
        """Convert text to speech audio.

        Text longer than the character limit is truncated.

        Args:
            text: Text to synthesize

        Returns:
            SynthesisResult with audio data

        Raises:
            SpeechError: If synthesis fails
        """
        ...


__all__ = [
    "MAX_SPEECH_CHARS",
    "SpeechError",
    "SynthesisResult",
    "Synthesizer",
    "truncate_text",
]
