"""Router module for Mira Voice Assistant.

Provides the turn pipeline: intent parsing, mood detection, command
dispatch and the controller that runs a turn end to end.
"""

from .controller import TurnController
from .dispatcher import CommandDispatcher, DispatchAction
from .intent import IntentParser, IntentRecord, detect_wake_word, resolve_wake
from .mood import Mood, classify
from .responder import ConversationalResponder
from .turn import TurnGuard, TurnOutcome, TurnResult, TurnState

__all__ = [
    "CommandDispatcher",
    "ConversationalResponder",
    "DispatchAction",
    "IntentParser",
    "IntentRecord",
    "Mood",
    "TurnController",
    "TurnGuard",
    "TurnOutcome",
    "TurnResult",
    "TurnState",
    "classify",
    "detect_wake_word",
    "resolve_wake",
]
