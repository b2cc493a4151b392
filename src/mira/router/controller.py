"""Turn controller: runs one voice turn end to end.

Capture -> transcription job -> intent parse -> wake resolution -> fact
capture -> mood -> dispatch -> speech, with a watchdog that releases a
stuck turn.
"""

import logging
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..memory.extractor import FactExtractor
from ..memory.models import Fact, FactKey, Role
from ..memory.session import SessionMemory
from ..stt.transcriber import (
    Transcriber,
    TranscriptionError,
    candidate_paths,
    read_artifact,
    remove_job_files,
    wait_for_artifact,
    write_clip,
)
from ..tts.synthesizer import SpeechError, Synthesizer
from .dispatcher import CommandDispatcher, DispatchAction
from .intent import IntentParser, resolve_wake
from .mood import classify
from .turn import TurnGuard, TurnOutcome, TurnResult, TurnState

if TYPE_CHECKING:
    from ..audio.playback import AudioPlayback
    from ..audio.recorder import ClipRecorder
    from ..config import MiraConfig
    from ..logger.turns import TurnLogger

logger = logging.getLogger(__name__)

ACTIVATION_GREETING = "Hello"
NOT_READY_REPLY = "Sorry Sir, file is not ready"
HEARD_NOTHING_REPLY = "Sorry Sir, I didn't listen anything"
ERROR_REPLY = "Something went wrong."


def problem_follow_up(fact: Fact) -> str:
    """Activation line asking about an earlier problem."""
    return (
        f'Previously, you mentioned facing the problem: "{fact.value}". '
        "May I ask if it has been resolved?"
    )


def reminder_notice(fact: Fact) -> str:
    """Activation line delivering a due reminder."""
    return f'Reminder: You asked me to remind you about "{fact.value}".'


def persistable_fact(fact: Fact, now: datetime) -> Fact | None:
    """Apply the persist policy to an extracted fact.

    Reminders already in the past are dropped. Problems are stored open
    and not yet followed up.

    Returns:
        Fact to store, or None to discard
    """
    if fact.key == FactKey.REMINDER and fact.remind_at is not None and fact.remind_at < now:
        return None
    if fact.key == FactKey.PROBLEM:
        fact.resolved = False
        fact.reminded = False
    return fact


class TurnController:
    """Coordinates a voice turn across all collaborators.

    One turn runs at a time on the calling thread. The guard refuses new
    captures while a turn is busy or speech is playing.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        parser: IntentParser,
        dispatcher: CommandDispatcher,
        memory: SessionMemory,
        synthesizer: Synthesizer,
        playback: "AudioPlayback",
        work_dir: Path,
        recorder: "ClipRecorder | None" = None,
        extractor: FactExtractor | None = None,
        guard: TurnGuard | None = None,
        wake_words: list[str] | None = None,
        sample_rate: int = 16000,
        channels: int = 1,
        watchdog_timeout_s: float = 6.0,
        artifact_retries: int = 5,
        artifact_delay_s: float = 0.3,
        turn_logger: "TurnLogger | None" = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize controller with components.

        Args:
            transcriber: Speech-to-text job runner
            parser: Intent parser
            dispatcher: Command dispatcher
            memory: Session working set
            synthesizer: Text-to-speech
            playback: Audio output
            work_dir: Directory for clips and transcript artifacts
            recorder: Push-to-talk recorder (None for text-only use)
            extractor: Fact extractor
            guard: Turn guard
            wake_words: Local wake words
            sample_rate: Recorded audio sample rate
            channels: Recorded audio channel count
            watchdog_timeout_s: Seconds before a stuck turn is released
            artifact_retries: Transcript polling attempts
            artifact_delay_s: Seconds between polling attempts
            turn_logger: Optional JSONL turn log
            clock: Returns the current aware datetime
            sleep: Sleep function used while polling
        """
        self._transcriber = transcriber
        self._parser = parser
        self._dispatcher = dispatcher
        self._memory = memory
        self._synthesizer = synthesizer
        self._playback = playback
        self._work_dir = work_dir
        self._recorder = recorder
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._extractor = extractor or FactExtractor(clock=self._clock)
        self._guard = guard or TurnGuard()
        self._wake_words = wake_words
        self._sample_rate = sample_rate
        self._channels = channels
        self._watchdog_timeout_s = watchdog_timeout_s
        self._artifact_retries = artifact_retries
        self._artifact_delay_s = artifact_delay_s
        self._turn_logger = turn_logger
        self._sleep = sleep

        self._watchdog: threading.Timer | None = None
        self._watchdog_lock = threading.Lock()
        self._activated = False

    @classmethod
    def from_config(cls, config: "MiraConfig", use_mocks: bool = False) -> "TurnController":
        """Create a controller from configuration.

        Args:
            config: Mira configuration
            use_mocks: Use mock implementations for every external service

        Returns:
            Configured TurnController
        """
        from ..audio import ClipRecorder, create_audio_capture, create_audio_playback
        from ..launcher import create_launcher, create_navigator
        from ..llm import create_language_model
        from ..logger.turns import TurnLogger
        from ..search import create_search_client
        from ..storage import create_persistence
        from ..stt import create_transcriber
        from ..tts import create_synthesizer
        from .responder import ConversationalResponder

        use_mocks = use_mocks or config.testing.mock_enabled

        persistence = create_persistence(config.storage, use_mock=use_mocks)
        memory = SessionMemory(
            persistence,
            chat_limit=config.turn.chat_history_limit,
            facts_limit=config.turn.facts_limit,
        )
        llm = create_language_model(config.llm, use_mock=use_mocks)
        responder = ConversationalResponder(llm, memory, chat_window=config.turn.chat_window)
        dispatcher = CommandDispatcher(
            responder=responder,
            search=create_search_client(config.search, use_mock=use_mocks),
            navigator=create_navigator(use_mock=use_mocks),
            launcher=create_launcher(use_mock=use_mocks),
        )

        turn_logger = None
        if config.logging.turn_log_enabled:
            turn_logger = TurnLogger(Path(config.logging.log_dir).expanduser())

        capture = create_audio_capture(config.audio, use_mock=use_mocks)

        return cls(
            transcriber=create_transcriber(config.stt, use_mock=use_mocks),
            parser=IntentParser(llm),
            dispatcher=dispatcher,
            memory=memory,
            synthesizer=create_synthesizer(config.tts, use_mock=use_mocks),
            playback=create_audio_playback(config.audio, use_mock=use_mocks),
            work_dir=Path(config.stt.work_dir).expanduser(),
            recorder=ClipRecorder(capture),
            wake_words=config.assistant.wake_words,
            sample_rate=config.audio.sample_rate,
            channels=config.audio.channels,
            watchdog_timeout_s=config.turn.watchdog_timeout_s,
            artifact_retries=config.stt.artifact_retries,
            artifact_delay_s=config.stt.artifact_delay_s,
            turn_logger=turn_logger,
        )

    @property
    def guard(self) -> TurnGuard:
        """Turn guard."""
        return self._guard

    @property
    def memory(self) -> SessionMemory:
        """Session working set."""
        return self._memory

    @property
    def activated(self) -> bool:
        """Whether activate() has run this session."""
        return self._activated

    # ------------------------------------------------------------------
    # Session activation
    # ------------------------------------------------------------------

    def activate(self) -> list[str]:
        """Greet the user and deliver pending follow-ups.

        Runs once per session under `busy`, without the watchdog: the
        greeting, then the first open problem not yet followed up, then
        every due reminder. Each line is saved to chat history and each
        follow-up is marked reminded.

        Returns:
            Utterances spoken (empty if already activated or busy)
        """
        if self._activated:
            return []
        if not self._guard.try_begin(TurnState.DISPATCHING):
            logger.info("Activation refused: turn in progress")
            return []

        generation = self._guard.generation
        self._activated = True
        result = TurnResult(intent="activate")
        try:
            self._memory.load()
            self._reply(ACTIVATION_GREETING, result)

            problem = next(
                (
                    f
                    for f in self._memory.facts
                    if f.key == FactKey.PROBLEM and not f.resolved and not f.reminded
                ),
                None,
            )
            if problem is not None:
                self._reply(problem_follow_up(problem), result)
                if problem.id is not None:
                    self._memory.update_fact(problem.id, reminded=True)

            try:
                due = self._memory.persistence.list_due_reminders(self._clock())
            except Exception as e:
                logger.warning(f"Failed to load due reminders: {e}")
                due = []

            for reminder in due:
                self._reply(reminder_notice(reminder), result)
                if reminder.id is not None:
                    self._memory.update_fact(reminder.id, reminded=True)
        finally:
            self._guard.finish(generation)

        logger.info(f"Session activated ({len(result.replies)} utterances)")
        return result.replies

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def start_capture(self) -> bool:
        """Start recording a turn.

        Returns:
            False when a turn is busy, speech is playing or no recorder exists
        """
        if self._recorder is None:
            return False
        if not self._guard.try_start_capture():
            logger.debug("Capture refused: assistant busy")
            return False

        try:
            self._recorder.start()
        except RuntimeError as e:
            logger.error(f"Could not start recording: {e}")
            self._guard.cancel_capture()
            return False
        return True

    def stop_capture(self) -> TurnResult:
        """Stop recording and process the captured audio."""
        if self._recorder is None or not self._recorder.is_recording:
            return TurnResult(outcome=TurnOutcome.REFUSED)

        audio = self._recorder.stop()
        self._guard.cancel_capture()
        return self.process_audio(audio)

    # ------------------------------------------------------------------
    # Turn processing
    # ------------------------------------------------------------------

    def process_audio(self, audio: bytes) -> TurnResult:
        """Run a turn from recorded PCM audio.

        Args:
            audio: 16-bit PCM audio

        Returns:
            TurnResult describing the turn
        """
        if not self._guard.try_begin(TurnState.TRANSCRIBING):
            return TurnResult(outcome=TurnOutcome.REFUSED)

        generation = self._guard.generation
        result = TurnResult()
        start_time = time.time()
        try:
            try:
                transcript = self._transcribe(audio)
            except TranscriptionError as e:
                logger.error(f"Transcription failed: {e}")
                result.outcome = TurnOutcome.TRANSCRIPTION_FAILED
                self._say(NOT_READY_REPLY, result)
                return result

            if transcript is None:
                result.outcome = TurnOutcome.NOT_READY
                self._say(NOT_READY_REPLY, result)
                return result
            if not transcript:
                result.outcome = TurnOutcome.HEARD_NOTHING
                self._say(HEARD_NOTHING_REPLY, result)
                return result

            self._run_turn(transcript, result)
            return result
        finally:
            self._end_turn(generation, result, start_time)

    def process_text(self, text: str) -> TurnResult:
        """Run a turn from typed input, skipping transcription.

        Args:
            text: User input

        Returns:
            TurnResult describing the turn
        """
        if not self._guard.try_begin(TurnState.PARSING):
            return TurnResult(outcome=TurnOutcome.REFUSED)

        generation = self._guard.generation
        result = TurnResult()
        start_time = time.time()
        try:
            transcript = text.strip()
            if not transcript:
                result.outcome = TurnOutcome.HEARD_NOTHING
                self._say(HEARD_NOTHING_REPLY, result)
                return result

            self._run_turn(transcript, result)
            return result
        finally:
            self._end_turn(generation, result, start_time)

    def _transcribe(self, audio: bytes) -> str | None:
        """Run the transcription job for a clip.

        Returns:
            Transcript text, "" when nothing was heard, or None when no
            artifact appeared

        Raises:
            TranscriptionError: If the job could not be submitted
        """
        self._work_dir.mkdir(parents=True, exist_ok=True)
        clip_path = self._work_dir / f"{uuid.uuid4().hex}.wav"
        candidates = candidate_paths(clip_path, self._work_dir)

        try:
            write_clip(clip_path, audio, self._sample_rate, self._channels)
            self._transcriber.submit(clip_path, self._work_dir)
            artifact = wait_for_artifact(
                candidates,
                retries=self._artifact_retries,
                delay=self._artifact_delay_s,
                sleep=self._sleep,
            )
            if artifact is None:
                return None
            return read_artifact(artifact)
        finally:
            remove_job_files(clip_path, candidates)

    def _run_turn(self, transcript: str, result: TurnResult) -> None:
        """Parse, remember, dispatch and speak for one transcript."""
        result.transcript = transcript
        self._ensure_memory_loaded()

        self._guard.advance(TurnState.PARSING)
        record = self._parser.parse(transcript)
        if record is not None:
            result.corrected_transcript = record.corrected_transcript

        effective = resolve_wake(record, transcript, self._wake_words)
        if effective is None:
            logger.debug("Not addressed; ending turn")
            result.outcome = TurnOutcome.NOT_ADDRESSED
            return

        self._memory.append_message(Role.USER, transcript)
        self._remember(transcript)

        mood = classify(transcript)
        result.mood = mood.value

        self._guard.advance(TurnState.DISPATCHING)
        try:
            action = self._dispatcher.dispatch(effective, transcript, mood)
        except Exception as e:
            logger.exception(f"Dispatch failed: {e}")
            result.outcome = TurnOutcome.ERROR
            action = DispatchAction(intent="error", utterance=ERROR_REPLY)

        if action is None:
            result.outcome = TurnOutcome.NOT_ADDRESSED
            return

        result.intent = action.intent
        self._arm_watchdog()
        self._perform(action, result)

    def _remember(self, transcript: str) -> None:
        """Extract a fact and persist it under the persist policy."""
        fact = self._extractor.extract(transcript)
        if fact is None:
            return

        stored = persistable_fact(fact, self._clock())
        if stored is None:
            logger.info(f"Ignoring reminder in the past: {fact.value}")
            return

        self._memory.add_fact(stored)

    def _perform(self, action: DispatchAction | None, result: TurnResult) -> None:
        """Speak an action, then follow its post-speech chain."""
        while action is not None:
            self._reply(action.utterance, result)
            action = action.after_speech()

    def _reply(self, text: str, result: TurnResult) -> None:
        """Save an assistant line to chat history, then speak it."""
        self._memory.append_message(Role.ASSISTANT, text)
        self._say(text, result)

    def _say(self, text: str, result: TurnResult) -> None:
        """Record and speak an utterance."""
        result.replies.append(text)
        self._speak(text)

    def _speak(self, text: str) -> None:
        self._guard.begin_speaking()
        try:
            synthesis = self._synthesizer.synthesize(text)
            self._playback.play(synthesis.audio, synthesis.sample_rate)
        except SpeechError as e:
            logger.warning(f"Could not speak: {e}")
        except RuntimeError as e:
            logger.warning(f"Could not play speech: {e}")
        finally:
            self._guard.end_speaking()

    def _ensure_memory_loaded(self) -> None:
        if not self._memory.is_loaded:
            self._memory.load()

    def _end_turn(self, generation: int, result: TurnResult, start_time: float) -> None:
        self._cancel_watchdog()
        self._guard.finish(generation)
        result.latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Turn finished: outcome={result.outcome.value} intent={result.intent} "
            f"({result.latency_ms}ms)"
        )
        if self._turn_logger is not None:
            self._turn_logger.write(result)

    # ------------------------------------------------------------------
    # Watchdog
    # ------------------------------------------------------------------

    def _arm_watchdog(self) -> None:
        """Start the stuck-turn timer for the current dispatch."""
        with self._watchdog_lock:
            if self._watchdog is not None:
                self._watchdog.cancel()
            self._watchdog = threading.Timer(self._watchdog_timeout_s, self._on_watchdog)
            self._watchdog.daemon = True
            self._watchdog.start()

    def _cancel_watchdog(self) -> None:
        with self._watchdog_lock:
            if self._watchdog is not None:
                self._watchdog.cancel()
                self._watchdog = None

    def _on_watchdog(self) -> None:
        if self._guard.force_clear_if_stuck():
            logger.warning(
                f"Turn still busy after {self._watchdog_timeout_s}s; released by watchdog"
            )

    def shutdown(self) -> None:
        """Stop timers and recording, then release the storage connection."""
        from ..storage.persistence import MongoPersistence

        self._cancel_watchdog()
        if self._recorder is not None and self._recorder.is_recording:
            self._recorder.stop()
        self._guard.finish()

        persistence = self._memory.persistence
        if isinstance(persistence, MongoPersistence):
            persistence.close()


__all__ = [
    "ACTIVATION_GREETING",
    "ERROR_REPLY",
    "HEARD_NOTHING_REPLY",
    "NOT_READY_REPLY",
    "TurnController",
    "persistable_fact",
    "problem_follow_up",
    "reminder_notice",
]
