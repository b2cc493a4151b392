"""Turn state and the guard that serializes turns.

A turn moves IDLE -> CAPTURING -> TRANSCRIBING -> PARSING -> DISPATCHING
-> SPEAKING -> IDLE. The guard owns the state together with the `busy`
and `speaking` flags, and every transition goes through one lock.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class TurnState(Enum):
    """Phase of the current turn."""

    IDLE = "idle"
    CAPTURING = "capturing"
    TRANSCRIBING = "transcribing"
    PARSING = "parsing"
    DISPATCHING = "dispatching"
    SPEAKING = "speaking"


class TurnOutcome(Enum):
    """How a turn ended."""

    COMPLETED = "completed"
    NOT_ADDRESSED = "not_addressed"
    NOT_READY = "not_ready"
    HEARD_NOTHING = "heard_nothing"
    TRANSCRIPTION_FAILED = "transcription_failed"
    ERROR = "error"
    REFUSED = "refused"


@dataclass
class TurnResult:
    """Record of one completed turn.

    Attributes:
        transcript: Raw transcript (empty when nothing was heard)
        corrected_transcript: Model-corrected transcript
        mood: Detected mood value
        intent: Dispatched intent, if any
        outcome: How the turn ended
        replies: Utterances spoken during the turn
        started_at: When the turn started
        latency_ms: End-to-end duration
    """

    transcript: str = ""
    corrected_transcript: str | None = None
    mood: str | None = None
    intent: str | None = None
    outcome: TurnOutcome = TurnOutcome.COMPLETED
    replies: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    latency_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "timestamp": self.started_at.isoformat(),
            "transcript": self.transcript,
            "corrected_transcript": self.corrected_transcript,
            "mood": self.mood,
            "intent": self.intent,
            "outcome": self.outcome.value,
            "replies": list(self.replies),
            "latency_ms": self.latency_ms,
        }


class TurnGuard:
    """Thread-safe owner of turn state.

    `busy` covers a whole turn from transcription to the end of dispatch.
    `speaking` covers playback only. Capture is refused while either is
    set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = TurnState.IDLE
        self._busy = False
        self._speaking = False
        self._generation = 0

    @property
    def generation(self) -> int:
        """Counter identifying the turn that currently holds the guard."""
        with self._lock:
            return self._generation

    @property
    def state(self) -> TurnState:
        """Current turn phase."""
        with self._lock:
            return self._state

    @property
    def busy(self) -> bool:
        """Whether a turn is being processed."""
        with self._lock:
            return self._busy

    @property
    def speaking(self) -> bool:
        """Whether speech is playing."""
        with self._lock:
            return self._speaking

    def try_start_capture(self) -> bool:
        """Enter CAPTURING if no turn is running.

        Returns:
            False when busy, speaking or already capturing
        """
        with self._lock:
            if self._busy or self._speaking or self._state == TurnState.CAPTURING:
                return False
            self._state = TurnState.CAPTURING
            return True

    def cancel_capture(self) -> None:
        """Leave CAPTURING without starting a turn."""
        with self._lock:
            if self._state == TurnState.CAPTURING:
                self._state = TurnState.IDLE

    def try_begin(self, state: TurnState = TurnState.TRANSCRIBING) -> bool:
        """Mark the guard busy and enter the given phase.

        Returns:
            False when another turn already holds the guard
        """
        with self._lock:
            if self._busy or self._speaking:
                return False
            self._busy = True
            self._generation += 1
            self._state = state
            return True

    def advance(self, state: TurnState) -> None:
        """Move the running turn to a new phase."""
        with self._lock:
            if self._busy:
                self._state = state

    def begin_speaking(self) -> None:
        """Set the speaking flag."""
        with self._lock:
            self._speaking = True
            self._state = TurnState.SPEAKING

    def end_speaking(self) -> None:
        """Clear the speaking flag."""
        with self._lock:
            self._speaking = False
            if self._busy:
                self._state = TurnState.DISPATCHING

    def finish(self, generation: int | None = None) -> None:
        """Clear both flags and return to IDLE.

        Args:
            generation: Turn that is finishing. A stale turn, whose guard
                was already force-cleared and reused, leaves the guard alone.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            self._busy = False
            self._speaking = False
            self._state = TurnState.IDLE

    def force_clear_if_stuck(self) -> bool:
        """Clear `busy` if it is set while nothing is speaking.

        Returns:
            True if the guard was reset
        """
        with self._lock:
            if self._busy and not self._speaking:
                self._busy = False
                self._generation += 1
                self._state = TurnState.IDLE
                return True
            return False


__all__ = ["TurnGuard", "TurnOutcome", "TurnResult", "TurnState"]
