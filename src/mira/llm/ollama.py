"""Ollama language model implementation.

Uses Ollama for local LLM inference with models like Llama 3.2.
"""

import logging
import time

import ollama

from .model import LLMResponse

logger = logging.getLogger(__name__)


class OllamaLanguageModel:
    """Language model using Ollama for local inference."""

    def __init__(
        self,
        model: str = "llama3.2:3b",
        host: str = "http://localhost:11434",
        max_tokens: int = 300,
        temperature: float = 0.7,
        client: "ollama.Client | None" = None,
    ) -> None:
        """Initialize Ollama language model.

        Args:
            model: Ollama model name
            host: Ollama server URL
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            client: Pre-built Ollama client
        """
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = client or ollama.Client(host=host)

        logger.info(f"Ollama initialized with model: {model} at {host}")

    def generate(self, prompt: str) -> LLMResponse:
        """Generate response for prompt.

        Args:
            prompt: Full prompt text

        Returns:
            LLMResponse with generated text

        Raises:
            RuntimeError: If the Ollama call fails
        """
        start_time = time.time()

        try:
            response = self._client.chat(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                options={
                    "num_predict": self._max_tokens,
                    "temperature": self._temperature,
                },
            )
        except Exception as e:
            logger.error(f"Ollama generation failed: {e}")
            raise RuntimeError(f"LLM generation failed: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        response_text = response["message"]["content"]
        tokens_used = response.get("eval_count") or len(response_text.split())

        logger.debug(
            f"Generated {tokens_used} tokens in {latency_ms}ms: '{response_text[:50]}...'"
        )

        return LLMResponse(
            text=response_text,
            tokens_used=tokens_used,
            model=self._model,
            latency_ms=latency_ms,
        )


__all__ = ["OllamaLanguageModel"]
