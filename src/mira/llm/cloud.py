"""Cloud LLM integration using Anthropic Claude API."""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import anthropic

from .model import LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class CloudLLMConfig:
    """Configuration for cloud LLM."""

    api_key: str
    model: str = "claude-3-haiku-20240307"
    max_tokens: int = 300
    temperature: float = 0.7

    @classmethod
    def from_env(cls, **overrides: Any) -> "CloudLLMConfig":
        """Create config from environment variables.

        Args:
            **overrides: Field values replacing the defaults

        Returns:
            CloudLLMConfig with API key from environment.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to use the cloud language model."
            )
        return cls(api_key=api_key, **overrides)


class CloudLanguageModel:
    """Cloud-based language model using Claude API."""

    def __init__(self, config: CloudLLMConfig, client: "anthropic.Anthropic | None" = None) -> None:
        """Initialize the cloud language model.

        Args:
            config: Cloud LLM configuration.
            client: Pre-built Anthropic client.
        """
        self._config = config
        self._client = client or anthropic.Anthropic(api_key=config.api_key)

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._config.model

    def generate(self, prompt: str) -> LLMResponse:
        """Generate a response using the cloud API.

        Args:
            prompt: Full prompt text.

        Returns:
            LLMResponse with generated text.

        Raises:
            RuntimeError: If the API call fails.
        """
        start_time = time.time()
        try:
            response = self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error(f"Claude generation failed: {e}")
            raise RuntimeError(f"LLM generation failed: {e}") from e
        latency_ms = int((time.time() - start_time) * 1000)

        text = "".join(block.text for block in response.content if block.type == "text")
        tokens = response.usage.input_tokens + response.usage.output_tokens

        return LLMResponse(
            text=text,
            tokens_used=tokens,
            model=self._config.model,
            latency_ms=latency_ms,
        )


__all__ = ["CloudLLMConfig", "CloudLanguageModel"]
