"""Text-to-speech module for Mira Voice Assistant.

Provides speech synthesis through Cartesia, with a mock synthesizer for
tests and keyless runs.
"""

import logging
from typing import TYPE_CHECKING

from .mock import MockSynthesizer
from .synthesizer import MAX_SPEECH_CHARS, SpeechError, SynthesisResult, Synthesizer

if TYPE_CHECKING:
    from ..config import TTSConfig

logger = logging.getLogger(__name__)


def create_synthesizer(
    config: "TTSConfig | None" = None,
    use_mock: bool = False,
) -> Synthesizer:
    """Create the configured synthesizer.

    Args:
        config: TTS configuration (optional)
        use_mock: If True, force mock synthesizer for testing

    Returns:
        Synthesizer implementation. Falls back to MockSynthesizer when
        Cartesia has no API key.

    Raises:
        ValueError: If the provider is unknown
    """
    provider = config.provider if config is not None else "cartesia"

    if use_mock or provider == "mock":
        logger.info("TTS: Using MockSynthesizer (requested)")
        return MockSynthesizer()

    if provider != "cartesia":
        raise ValueError(f"Unknown TTS provider: {provider}")

    from .cartesia import CartesiaSynthesizer

    if config is None:
        synth = CartesiaSynthesizer()
    else:
        synth = CartesiaSynthesizer(
            voice_id=config.voice_id,
            model_id=config.model_id,
            sample_rate=config.sample_rate,
            max_chars=config.max_chars,
        )

    if synth.is_available:
        logger.info("TTS: Using CartesiaSynthesizer")
        return synth

    logger.warning("TTS: Using MockSynthesizer (Cartesia key missing)")
    return MockSynthesizer()


__all__ = [
    "MAX_SPEECH_CHARS",
    "MockSynthesizer",
    "SpeechError",
    "SynthesisResult",
    "Synthesizer",
    "create_synthesizer",
]
