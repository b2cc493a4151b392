"""Language model protocol and data classes.

Defines the interface for language model inference.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class LLMResponse:
    """Response from language model.

    Attributes:
        text: Generated response text
        tokens_used: Number of tokens consumed
        model: Model identifier
        latency_ms: Response latency in milliseconds
    """

    text: str
    tokens_used: int
    model: str
    latency_ms: int


class LanguageModel(Protocol):
    """Interface for language model inference.

    Each call is independent: prompts carry their own context, so intent
    parsing and conversation never share hidden history.
    """

    def generate(self, prompt: str) -> LLMResponse:
        """Generate response for prompt.

        Args:
            prompt: Full prompt text

        Returns:
            LLMResponse with generated text

        Raises:
            RuntimeError: If generation fails
        """
        ...


__all__ = ["LLMResponse", "LanguageModel"]
