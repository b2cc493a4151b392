"""Speech-to-text module for Mira Voice Assistant.

Provides file-based transcription using faster-whisper, the whisper CLI
or a mock implementation.
"""

from typing import TYPE_CHECKING

from .mock import MockTranscriber
from .transcriber import (
    ArtifactNaming,
    Transcriber,
    TranscriptionError,
    candidate_paths,
    read_artifact,
    remove_job_files,
    wait_for_artifact,
    write_clip,
)

if TYPE_CHECKING:
    from ..config import STTConfig


def create_transcriber(
    config: "STTConfig | None" = None,
    use_mock: bool = False,
) -> Transcriber:
    """Create a transcriber instance.

    Args:
        config: STT configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        Transcriber implementation

    Raises:
        ValueError: If the provider is unknown
    """
    provider = config.provider if config is not None else "faster-whisper"

    if use_mock or provider == "mock":
        return MockTranscriber()

    if provider == "whisper-cli":
        from .cli import WhisperCLITranscriber

        return WhisperCLITranscriber(model=config.model if config is not None else "medium")

    if provider == "faster-whisper":
        from .whisper import WhisperTranscriber

        if config is None:
            return WhisperTranscriber()
        return WhisperTranscriber(
            model_size=config.model,
            device=config.device,
            compute_type=config.compute_type,
        )

    raise ValueError(f"Unknown STT provider: {provider}")


__all__ = [
    "ArtifactNaming",
    "MockTranscriber",
    "Transcriber",
    "TranscriptionError",
    "candidate_paths",
    "create_transcriber",
    "read_artifact",
    "remove_job_files",
    "wait_for_artifact",
    "write_clip",
]
