"""Configuration module for Mira Voice Assistant.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field


@dataclass
class AssistantConfig:
    """Assistant identity and wake word configuration."""

    name: str = "Mira"
    wake_words: list[str] = field(
        default_factory=lambda: [
            "mira",
            "meera",
            "myra",
            "mirra",
            "miraah",
            "sweetheart",
            "babe",
            "baby",
        ]
    )


@dataclass
class AudioConfig:
    """Audio input/output configuration."""

    input_device: str = "default"
    output_device: str = "default"
    sample_rate: int = 16000
    channels: int = 1
    chunk_size: int = 1024


@dataclass
class STTConfig:
    """Speech-to-text configuration."""

    provider: str = "faster-whisper"
    model: str = "base.en"
    device: str = "cpu"
    compute_type: str = "int8"
    work_dir: str = "~/.mira/uploads"
    artifact_retries: int = 5
    artifact_delay_s: float = 0.3


@dataclass
class LLMConfig:
    """Language model configuration."""

    provider: str = "ollama"
    model: str = "llama3.2:3b"
    host: str = "http://localhost:11434"
    max_tokens: int = 300
    temperature: float = 0.7


@dataclass
class TTSConfig:
    """Text-to-speech configuration."""

    provider: str = "cartesia"
    voice_id: str = "32b3f3c5-7171-46aa-abe7-b598964aa793"
    model_id: str = "sonic-2"
    sample_rate: int = 22050
    max_chars: int = 500


@dataclass
class SearchConfig:
    """Web search configuration."""

    enabled: bool = True
    timeout_s: float = 5.0


@dataclass
class StorageConfig:
    """Persistence configuration."""

    backend: str = "mongodb"
    uri: str = "mongodb://localhost:27017"
    database: str = "mira"


@dataclass
class TurnConfig:
    """Turn pipeline configuration."""

    watchdog_timeout_s: float = 6.0
    chat_window: int = 12
    chat_history_limit: int = 20
    facts_limit: int = 20


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    turn_log_enabled: bool = True
    log_dir: str = "~/.mira/logs"


@dataclass
class TestingConfig:
    """Testing configuration."""

    mock_enabled: bool = False


@dataclass
class MiraConfig:
    """Main Mira Voice Assistant configuration."""

    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    stt: STTConfig = field(default_factory=STTConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    tts: TTSConfig = field(default_factory=TTSConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    turn: TurnConfig = field(default_factory=TurnConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


__all__ = [
    "AssistantConfig",
    "AudioConfig",
    "LLMConfig",
    "LoggingConfig",
    "MiraConfig",
    "STTConfig",
    "SearchConfig",
    "StorageConfig",
    "TTSConfig",
    "TestingConfig",
    "TurnConfig",
]
