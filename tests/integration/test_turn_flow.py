"""Integration tests for complete turns through the turn controller."""

import threading
import time
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mira.audio.mock_capture import MockAudioCapture, MockAudioPlayback
from mira.launcher.mock import MockNavigator
from mira.llm.mock import MockLanguageModel
from mira.logger import TurnLogger
from mira.memory.extractor import FactExtractor
from mira.memory.models import Fact, FactKey, Role
from mira.memory.session import SessionMemory
from mira.router.controller import (
    ERROR_REPLY,
    HEARD_NOTHING_REPLY,
    NOT_READY_REPLY,
    TurnController,
    persistable_fact,
)
from mira.router.dispatcher import APP_MAP, DispatchAction
from mira.router.intent import IntentParser
from mira.router.responder import CRISIS_SCRIPT
from mira.router.turn import TurnOutcome, TurnState
from mira.search.mock import MockSearch
from mira.storage.persistence import InMemoryPersistence
from mira.stt.mock import MockTranscriber
from mira.stt.transcriber import ArtifactNaming
from mira.tts.mock import MockSynthesizer

AUDIO = b"\x01\x00" * 1600

OPEN_YOUTUBE = (
    '{"wake": true, "intent": "open", "target": "youtube", "query": null, '
    '"corrected_transcript": "hey mira open YouTube"}'
)


class TestTranscription:
    """Turns driven by recorded audio."""

    def test_transcript_runs_turn(
        self,
        controller: TurnController,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        work_dir: Path,
    ) -> None:
        """Test a transcript flows through to a spoken reply."""
        transcriber.set_response("mira how are you")

        result = controller.process_audio(AUDIO)

        assert result.outcome == TurnOutcome.COMPLETED
        assert result.transcript == "mira how are you"
        assert result.intent == "chat"
        assert result.replies == ["Of course, I'm here for you."]
        assert synthesizer.synthesized_texts == ["Of course, I'm here for you."]
        assert list(work_dir.iterdir()) == []

    def test_stem_artifact_is_found(
        self, controller: TurnController, transcriber: MockTranscriber, work_dir: Path
    ) -> None:
        """Test engines writing <stem>.txt are picked up and cleaned."""
        transcriber.set_response("mira hello there", naming=ArtifactNaming.STEM)

        result = controller.process_audio(AUDIO)

        assert result.transcript == "mira hello there"
        assert list(work_dir.iterdir()) == []

    def test_missing_artifact(
        self,
        controller: TurnController,
        transcriber: MockTranscriber,
        work_dir: Path,
    ) -> None:
        """Test no artifact speaks 'not ready' and frees the guard."""
        transcriber.set_no_artifact()

        result = controller.process_audio(AUDIO)

        assert result.outcome == TurnOutcome.NOT_READY
        assert result.replies == [NOT_READY_REPLY]
        assert controller.guard.busy is False
        assert controller.guard.state == TurnState.IDLE
        assert list(work_dir.iterdir()) == []

    def test_empty_transcript(
        self,
        controller: TurnController,
        transcriber: MockTranscriber,
        parser_llm: MockLanguageModel,
    ) -> None:
        """Test silence speaks 'heard nothing' without parsing."""
        transcriber.set_response("   ")

        result = controller.process_audio(AUDIO)

        assert result.outcome == TurnOutcome.HEARD_NOTHING
        assert result.replies == [HEARD_NOTHING_REPLY]
        assert parser_llm.call_count == 0

    def test_submission_error(
        self, controller: TurnController, transcriber: MockTranscriber, work_dir: Path
    ) -> None:
        """Test a failing engine is reported as not ready."""
        transcriber.set_error("model not loaded")

        result = controller.process_audio(AUDIO)

        assert result.outcome == TurnOutcome.TRANSCRIPTION_FAILED
        assert result.replies == [NOT_READY_REPLY]
        assert controller.guard.busy is False
        assert list(work_dir.iterdir()) == []

    def test_status_replies_not_saved_to_chat(
        self, controller: TurnController, transcriber: MockTranscriber, memory: SessionMemory
    ) -> None:
        """Test "not ready" and "heard nothing" stay out of the chat history."""
        transcriber.set_no_artifact()
        controller.process_audio(AUDIO)
        transcriber.set_response("")
        controller.process_audio(AUDIO)

        assert memory.chat == []


class TestCapture:
    """Push-to-talk capture."""

    def test_capture_round_trip(
        self,
        controller: TurnController,
        capture: MockAudioCapture,
        transcriber: MockTranscriber,
    ) -> None:
        """Test start, stop and the resulting turn."""
        capture.set_audio_data(AUDIO)
        transcriber.set_response("mira hi")

        assert controller.start_capture() is True
        assert controller.guard.state == TurnState.CAPTURING
        result = controller.stop_capture()

        assert result.transcript == "mira hi"
        assert transcriber.call_count == 1
        assert controller.guard.state == TurnState.IDLE

    def test_capture_refused_while_busy(self, controller: TurnController) -> None:
        """Test capture cannot start while a turn holds the guard."""
        controller.guard.try_begin(TurnState.DISPATCHING)

        assert controller.start_capture() is False

    def test_capture_refused_while_speaking(self, controller: TurnController) -> None:
        """Test capture cannot start during playback."""
        controller.guard.begin_speaking()

        assert controller.start_capture() is False

    def test_stop_without_capture(self, controller: TurnController) -> None:
        """Test stopping when nothing records is refused."""
        assert controller.stop_capture().outcome == TurnOutcome.REFUSED

    def test_turn_refused_while_busy(
        self, controller: TurnController, parser_llm: MockLanguageModel
    ) -> None:
        """Test a second turn is refused while one is running."""
        controller.guard.try_begin(TurnState.PARSING)

        result = controller.process_text("mira hello")

        assert result.outcome == TurnOutcome.REFUSED
        assert parser_llm.call_count == 0


class TestRoutingFlow:
    """Wake resolution and dispatch."""

    def test_not_addressed(
        self,
        controller: TurnController,
        chat_llm: MockLanguageModel,
        synthesizer: MockSynthesizer,
        memory: SessionMemory,
    ) -> None:
        """Test turns without a wake word end silently."""
        result = controller.process_text("what's the weather like")

        assert result.outcome == TurnOutcome.NOT_ADDRESSED
        assert result.replies == []
        assert synthesizer.call_count == 0
        assert chat_llm.call_count == 0
        assert memory.chat == []

    def test_model_wake_without_local_word(
        self,
        controller: TurnController,
        parser_llm: MockLanguageModel,
        navigator: MockNavigator,
    ) -> None:
        """Test the model's wake decision alone is enough."""
        parser_llm.set_response(OPEN_YOUTUBE.replace("hey mira open YouTube", "hey mia open"))

        result = controller.process_text("hey mia open yutu")

        assert result.intent == "open"
        assert navigator.urls == [APP_MAP["youtube"]]

    def test_open_youtube_navigates_directly(
        self,
        controller: TurnController,
        parser_llm: MockLanguageModel,
        navigator: MockNavigator,
        search: MockSearch,
    ) -> None:
        """Test 'open youtube' opens the site with no lookup."""
        parser_llm.set_response(OPEN_YOUTUBE)

        result = controller.process_text("hey mira open yutu")

        assert result.replies == ["Opening youtube"]
        assert result.corrected_transcript == "hey mira open YouTube"
        assert navigator.urls == ["https://www.youtube.com"]
        assert search.queries == []

    def test_crisis_uses_script(
        self,
        controller: TurnController,
        chat_llm: MockLanguageModel,
    ) -> None:
        """Test a crisis utterance gets the fixed script without the model."""
        result = controller.process_text("mira I want to die")

        assert result.mood == "crisis"
        assert result.replies == [" ".join(CRISIS_SCRIPT)]
        assert chat_llm.call_count == 0

    def test_chat_history_persisted(
        self,
        controller: TurnController,
        persistence: InMemoryPersistence,
    ) -> None:
        """Test user and assistant messages are saved in order."""
        controller.process_text("mira how are you")

        assert [(m.role, m.content) for m in persistence.messages] == [
            (Role.USER, "mira how are you"),
            (Role.ASSISTANT, "Of course, I'm here for you."),
        ]

    def test_chained_actions_are_all_spoken(
        self,
        controller: TurnController,
        parser_llm: MockLanguageModel,
        synthesizer: MockSynthesizer,
        persistence: InMemoryPersistence,
    ) -> None:
        """Test follow-up utterances are spoken and saved."""
        parser_llm.set_response(
            '{"wake": true, "intent": "open_software", "target": "notepad", "query": null}'
        )

        result = controller.process_text("mira open notepad")

        assert result.replies == ["Attempting to open notepad...", "Opened notepad."]
        assert synthesizer.synthesized_texts == result.replies
        assert [m.content for m in persistence.messages][1:] == result.replies


class TestMemoryFlow:
    """Fact capture during turns."""

    def test_reminder_persisted(
        self,
        controller: TurnController,
        persistence: InMemoryPersistence,
        now: datetime,
    ) -> None:
        """Test 'remind me to call mom tomorrow at 6pm' is stored."""
        controller.process_text("mira remind me to call mom tomorrow at 6pm")

        assert len(persistence.facts) == 1
        fact = persistence.facts[0]
        assert fact.key == FactKey.REMINDER
        assert fact.value == "call mom"
        assert fact.remind_at == (now + timedelta(days=1)).replace(hour=18, minute=0)

    def test_fact_saved_before_dispatch(
        self,
        controller: TurnController,
        chat_llm: MockLanguageModel,
    ) -> None:
        """Test the responder already sees the new fact."""
        controller.process_text("mira my favorite color is teal")

        assert "favorite color: teal" in chat_llm.prompts[0]

    def test_problem_persisted_open(
        self, controller: TurnController, persistence: InMemoryPersistence
    ) -> None:
        """Test problems are stored unresolved and not yet reminded."""
        controller.process_text("mira I have a problem with my knee")

        fact = persistence.facts[0]
        assert fact.key == FactKey.PROBLEM
        assert fact.value == "my knee"
        assert fact.resolved is False
        assert fact.reminded is False

    def test_past_reminder_discarded(
        self,
        parser_llm: MockLanguageModel,
        persistence: InMemoryPersistence,
        memory: SessionMemory,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        playback: MockAudioPlayback,
        work_dir: Path,
        now: datetime,
    ) -> None:
        """Test a reminder resolved into the past is never stored."""
        stale_extractor = FactExtractor(clock=lambda: now - timedelta(days=3))
        controller = TurnController(
            transcriber=transcriber,
            parser=IntentParser(parser_llm),
            dispatcher=MagicMock(
                dispatch=MagicMock(return_value=DispatchAction(intent="chat", utterance="Okay."))
            ),
            memory=memory,
            synthesizer=synthesizer,
            playback=playback,
            work_dir=work_dir,
            extractor=stale_extractor,
            clock=lambda: now,
        )

        result = controller.process_text("mira remind me to water plants today at 10am")

        assert result.outcome == TurnOutcome.COMPLETED
        assert persistence.facts == []
        assert memory.facts == []

    def test_persistable_fact_policy(self, now: datetime) -> None:
        """Test the persist policy directly."""
        past = Fact(key=FactKey.REMINDER, value="x", remind_at=now - timedelta(minutes=1))
        future = Fact(key=FactKey.REMINDER, value="y", remind_at=now + timedelta(minutes=1))
        undated = Fact(key=FactKey.REMINDER, value="z")
        problem = Fact(key=FactKey.PROBLEM, value="p", resolved=True, reminded=True)

        assert persistable_fact(past, now) is None
        assert persistable_fact(future, now) is future
        assert persistable_fact(undated, now) is undated

        stored = persistable_fact(problem, now)
        assert stored is not None
        assert stored.resolved is False
        assert stored.reminded is False

    def test_persistence_failure_does_not_abort(
        self,
        parser_llm: MockLanguageModel,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        playback: MockAudioPlayback,
        work_dir: Path,
        now: datetime,
    ) -> None:
        """Test a dead store still lets the turn speak."""
        backend = MagicMock()
        backend.append_chat_message.side_effect = ConnectionError("down")
        backend.create_fact.side_effect = ConnectionError("down")
        backend.list_recent_chat.side_effect = ConnectionError("down")
        memory = SessionMemory(backend)
        controller = TurnController(
            transcriber=transcriber,
            parser=IntentParser(parser_llm),
            dispatcher=MagicMock(
                dispatch=MagicMock(return_value=DispatchAction(intent="chat", utterance="Sure."))
            ),
            memory=memory,
            synthesizer=synthesizer,
            playback=playback,
            work_dir=work_dir,
            clock=lambda: now,
        )

        result = controller.process_text("mira remember that the keys are in the drawer")

        assert result.outcome == TurnOutcome.COMPLETED
        assert result.replies == ["Sure."]


class TestFailures:
    """Recoverable failures inside a turn."""

    def test_speech_failure_continues(
        self, controller: TurnController, synthesizer: MockSynthesizer
    ) -> None:
        """Test a TTS failure is logged and the turn still completes."""
        synthesizer.set_error("quota exceeded")

        result = controller.process_text("mira tell me a joke")

        assert result.outcome == TurnOutcome.COMPLETED
        assert result.replies == ["Of course, I'm here for you."]
        assert controller.guard.speaking is False

    def test_playback_failure_continues(
        self, controller: TurnController, playback: MockAudioPlayback
    ) -> None:
        """Test an audio device failure does not break the turn."""
        playback.set_error("device unplugged")

        result = controller.process_text("mira hello")

        assert result.outcome == TurnOutcome.COMPLETED
        assert controller.guard.busy is False

    def test_dispatch_exception(
        self,
        memory: SessionMemory,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        playback: MockAudioPlayback,
        parser_llm: MockLanguageModel,
        work_dir: Path,
    ) -> None:
        """Test unexpected dispatcher errors become a spoken apology."""
        dispatcher = MagicMock()
        dispatcher.dispatch.side_effect = KeyError("intent")
        controller = TurnController(
            transcriber=transcriber,
            parser=IntentParser(parser_llm),
            dispatcher=dispatcher,
            memory=memory,
            synthesizer=synthesizer,
            playback=playback,
            work_dir=work_dir,
        )

        result = controller.process_text("mira do something")

        assert result.outcome == TurnOutcome.ERROR
        assert result.replies == [ERROR_REPLY]
        assert controller.guard.busy is False


class TestWatchdog:
    """Stuck-turn release."""

    def test_releases_stuck_turn(
        self,
        memory: SessionMemory,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        playback: MockAudioPlayback,
        parser_llm: MockLanguageModel,
        work_dir: Path,
    ) -> None:
        """Test a side effect that hangs is released by the watchdog."""
        observed: dict[str, bool] = {}
        released = threading.Event()
        controller: TurnController

        def hang() -> None:
            deadline = time.time() + 2.0
            while controller.guard.busy and time.time() < deadline:
                time.sleep(0.01)
            observed["busy"] = controller.guard.busy
            observed["capture_allowed"] = controller.guard.try_start_capture()
            controller.guard.cancel_capture()
            released.set()

        dispatcher = MagicMock()
        dispatcher.dispatch.return_value = DispatchAction(
            intent="open", utterance="Opening", on_spoken=hang
        )
        controller = TurnController(
            transcriber=transcriber,
            parser=IntentParser(parser_llm),
            dispatcher=dispatcher,
            memory=memory,
            synthesizer=synthesizer,
            playback=playback,
            work_dir=work_dir,
            watchdog_timeout_s=0.05,
        )

        controller.process_text("mira open something slow")

        assert released.is_set()
        assert observed == {"busy": False, "capture_allowed": True}
        assert controller.guard.busy is False

    def test_stale_turn_does_not_clear_successor(self, controller: TurnController) -> None:
        """Test a released turn finishing late leaves a new turn alone."""
        controller.guard.try_begin(TurnState.DISPATCHING)
        stale = controller.guard.generation
        controller.guard.force_clear_if_stuck()
        controller.guard.try_begin(TurnState.TRANSCRIBING)

        controller.guard.finish(stale)

        assert controller.guard.busy is True

    def test_watchdog_cancelled_after_turn(self, controller: TurnController) -> None:
        """Test no timer outlives a finished turn."""
        controller.process_text("mira hello")

        assert controller._watchdog is None


class TestTurnLog:
    """Turn logging."""

    def test_turns_are_logged(
        self,
        memory: SessionMemory,
        transcriber: MockTranscriber,
        synthesizer: MockSynthesizer,
        playback: MockAudioPlayback,
        parser_llm: MockLanguageModel,
        work_dir: Path,
        tmp_path: Path,
    ) -> None:
        """Test each finished turn is appended to the log."""
        turn_logger = TurnLogger(tmp_path / "logs")
        controller = TurnController(
            transcriber=transcriber,
            parser=IntentParser(parser_llm),
            dispatcher=MagicMock(
                dispatch=MagicMock(return_value=DispatchAction(intent="chat", utterance="Hi."))
            ),
            memory=memory,
            synthesizer=synthesizer,
            playback=playback,
            work_dir=work_dir,
            turn_logger=turn_logger,
        )

        controller.process_text("mira hi")
        controller.process_text("nobody here")

        records = turn_logger.read()
        assert [r["outcome"] for r in records] == ["completed", "not_addressed"]
        assert records[0]["replies"] == ["Hi."]


class TestFromConfig:
    """Building the controller from configuration."""

    def test_test_profile(self) -> None:
        """Test the test profile wires every collaborator to a mock."""
        from mira.config.loader import load_config

        controller = TurnController.from_config(load_config(profile="test"))
        try:
            result = controller.process_text("hey mira how are you")
        finally:
            controller.shutdown()

        assert result.outcome == TurnOutcome.COMPLETED
        assert result.replies == ["This is a mock response."]

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_text(self, controller: TurnController, text: str) -> None:
        """Test blank typed input counts as heard nothing."""
        assert controller.process_text(text).outcome == TurnOutcome.HEARD_NOTHING
