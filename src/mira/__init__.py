"""Mira Voice Assistant - voice-driven personal assistant with memory.

Mira provides natural voice interaction with:
- Speech-to-text (Whisper)
- LLM intent parsing and conversation (Ollama / Claude)
- Personal fact and reminder memory (MongoDB)
- Text-to-speech (Cartesia)

Usage:
    python -m mira --profile dev
    python -m mira --mock --text "hey mira open youtube"
"""

__version__ = "0.1.0"

from .config import MiraConfig
from .config.loader import load_config

__all__ = [
    "MiraConfig",
    "__version__",
    "load_config",
]
