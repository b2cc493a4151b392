"""Shared fixtures for turn pipeline integration tests."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from mira.audio import ClipRecorder
from mira.audio.mock_capture import MockAudioCapture, MockAudioPlayback
from mira.launcher.mock import MockLauncher, MockNavigator
from mira.llm.mock import MockLanguageModel
from mira.memory.session import SessionMemory
from mira.router.controller import TurnController
from mira.router.dispatcher import CommandDispatcher
from mira.router.intent import IntentParser
from mira.router.responder import ConversationalResponder
from mira.search.mock import MockSearch
from mira.storage.persistence import InMemoryPersistence
from mira.stt.mock import MockTranscriber
from mira.tts.mock import MockSynthesizer

NOW = datetime(2024, 3, 10, 14, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used as the controller clock."""
    return NOW


@pytest.fixture
def parser_llm() -> MockLanguageModel:
    """Model behind the intent parser (replies with no JSON by default)."""
    return MockLanguageModel(response="no intent")


@pytest.fixture
def chat_llm() -> MockLanguageModel:
    """Model behind the conversational responder."""
    return MockLanguageModel(response="Of course, I'm here for you.")


@pytest.fixture
def persistence() -> InMemoryPersistence:
    """In-memory backing store."""
    return InMemoryPersistence()


@pytest.fixture
def memory(persistence: InMemoryPersistence) -> SessionMemory:
    """Session working set over the in-memory store."""
    return SessionMemory(persistence)


@pytest.fixture
def transcriber() -> MockTranscriber:
    """Mock speech-to-text."""
    return MockTranscriber()


@pytest.fixture
def synthesizer() -> MockSynthesizer:
    """Mock text-to-speech."""
    return MockSynthesizer()


@pytest.fixture
def playback() -> MockAudioPlayback:
    """Mock speaker."""
    return MockAudioPlayback()


@pytest.fixture
def capture() -> MockAudioCapture:
    """Mock microphone."""
    return MockAudioCapture()


@pytest.fixture
def navigator() -> MockNavigator:
    """Mock browser."""
    return MockNavigator()


@pytest.fixture
def search() -> MockSearch:
    """Mock top-result lookup."""
    return MockSearch()


@pytest.fixture
def launcher() -> MockLauncher:
    """Mock application launcher."""
    return MockLauncher()


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Directory for clips and transcript artifacts."""
    return tmp_path / "uploads"


@pytest.fixture
def controller(
    parser_llm: MockLanguageModel,
    chat_llm: MockLanguageModel,
    memory: SessionMemory,
    transcriber: MockTranscriber,
    synthesizer: MockSynthesizer,
    playback: MockAudioPlayback,
    capture: MockAudioCapture,
    navigator: MockNavigator,
    search: MockSearch,
    launcher: MockLauncher,
    work_dir: Path,
) -> TurnController:
    """Turn controller wired entirely to mocks with a fixed clock."""
    dispatcher = CommandDispatcher(
        responder=ConversationalResponder(chat_llm, memory),
        search=search,
        navigator=navigator,
        launcher=launcher,
    )
    controller = TurnController(
        transcriber=transcriber,
        parser=IntentParser(parser_llm),
        dispatcher=dispatcher,
        memory=memory,
        synthesizer=synthesizer,
        playback=playback,
        work_dir=work_dir,
        recorder=ClipRecorder(capture),
        watchdog_timeout_s=6.0,
        clock=lambda: NOW,
        sleep=lambda _delay: None,
    )
    yield controller
    controller.shutdown()
