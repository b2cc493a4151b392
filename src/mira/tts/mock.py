"""Mock synthesizer for testing.

Produces silence sized to the text instead of calling a provider.
"""

from .synthesizer import MAX_SPEECH_CHARS, SpeechError, SynthesisResult, truncate_text


class MockSynthesizer:
    """Mock synthesizer for testing.

    Records every text it is asked to speak.
    """

    def __init__(self, sample_rate: int = 22050, max_chars: int = MAX_SPEECH_CHARS) -> None:
        """Initialize mock synthesizer.

        Args:
            sample_rate: Output sample rate
            max_chars: Character limit applied before synthesis
        """
        self._sample_rate = sample_rate
        self._max_chars = max_chars
        self._synthesized_texts: list[str] = []
        self._error_message: str | None = None

    def set_error(self, message: str | None) -> None:
        """Make synthesis fail with SpeechError (None clears it)."""
        self._error_message = message

    def synthesize(self, text: str) -> SynthesisResult:
        """Return silence roughly 100ms per word."""
        spoken = truncate_text(text, self._max_chars)
        self._synthesized_texts.append(spoken)

        if self._error_message:
            raise SpeechError(self._error_message)

        duration_ms = max(100, len(spoken.split()) * 100)
        num_samples = int(self._sample_rate * duration_ms / 1000)
        return SynthesisResult(
            audio=b"\x00\x00" * num_samples,
            sample_rate=self._sample_rate,
            duration_ms=duration_ms,
            latency_ms=0,
        )

    @property
    def call_count(self) -> int:
        """Get number of synthesize calls."""
        return len(self._synthesized_texts)

    @property
    def synthesized_texts(self) -> list[str]:
        """Get list of synthesized texts."""
        return self._synthesized_texts.copy()

    def clear(self) -> None:
        """Reset mock state."""
        self._synthesized_texts.clear()
        self._error_message = None


__all__ = ["MockSynthesizer"]
