"""Turn logging for Mira Voice Assistant."""

from .turns import TurnLogger

__all__ = ["TurnLogger"]
