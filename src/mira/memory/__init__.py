"""Personal memory module for Mira Voice Assistant.

Provides fact extraction, time resolution and the session working set.
"""

from .extractor import FactExtractor
from .models import ChatMessage, Fact, FactKey, Role
from .session import SessionMemory
from .timeparse import resolve

__all__ = [
    "ChatMessage",
    "Fact",
    "FactExtractor",
    "FactKey",
    "Role",
    "SessionMemory",
    "resolve",
]
