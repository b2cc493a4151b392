"""Mock language model for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from collections import deque

from .model import LLMResponse


class MockLanguageModel:
    """Mock language model for testing.

    Returns queued responses first, then the default response.
    """

    def __init__(self, response: str = "This is a mock response.") -> None:
        """Initialize mock language model.

        Args:
            response: Default text returned when the queue is empty
        """
        self._response_text = response
        self._queue: deque[str] = deque()
        self._prompts: list[str] = []
        self._error_message: str | None = None

    def set_response(self, text: str) -> None:
        """Set the default response and clear any pending error.

        Args:
            text: Text to return
        """
        self._response_text = text
        self._error_message = None

    def queue_response(self, text: str) -> None:
        """Queue a one-shot response returned before the default.

        Args:
            text: Text to return once
        """
        self._queue.append(text)

    def set_error(self, message: str) -> None:
        """Set an error to raise on generation.

        Args:
            message: Error message
        """
        self._error_message = message

    def generate(self, prompt: str) -> LLMResponse:
        """Return the next queued or preset response."""
        self._prompts.append(prompt)

        if self._error_message:
            raise RuntimeError(self._error_message)

        text = self._queue.popleft() if self._queue else self._response_text
        return LLMResponse(
            text=text,
            tokens_used=len(text.split()) + len(prompt.split()),
            model="mock-model",
            latency_ms=0,
        )

    @property
    def call_count(self) -> int:
        """Get number of generate calls."""
        return len(self._prompts)

    @property
    def prompts(self) -> list[str]:
        """Get prompts received so far."""
        return self._prompts.copy()


__all__ = ["MockLanguageModel"]
