"""Language model module for Mira Voice Assistant.

Provides LLM inference using Ollama, Claude or a mock implementation.
"""

import logging
from typing import TYPE_CHECKING

from .mock import MockLanguageModel
from .model import LanguageModel, LLMResponse

if TYPE_CHECKING:
    from ..config import LLMConfig

logger = logging.getLogger(__name__)


def create_language_model(
    config: "LLMConfig | None" = None,
    use_mock: bool = False,
) -> LanguageModel:
    """Create a language model instance.

    Args:
        config: LLM configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        LanguageModel implementation

    Raises:
        ValueError: If the provider is unknown or misconfigured
    """
    provider = config.provider if config is not None else "ollama"

    if use_mock or provider == "mock":
        return MockLanguageModel()

    if provider == "anthropic":
        from .cloud import CloudLanguageModel, CloudLLMConfig

        overrides = {}
        if config is not None:
            overrides = {
                "model": config.model,
                "max_tokens": config.max_tokens,
                "temperature": config.temperature,
            }
        logger.info("Using Claude language model")
        return CloudLanguageModel(CloudLLMConfig.from_env(**overrides))

    if provider == "ollama":
        from .ollama import OllamaLanguageModel

        if config is None:
            return OllamaLanguageModel()
        return OllamaLanguageModel(
            model=config.model,
            host=config.host,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

    raise ValueError(f"Unknown LLM provider: {provider}")


__all__ = [
    "LLMResponse",
    "LanguageModel",
    "MockLanguageModel",
    "create_language_model",
]
