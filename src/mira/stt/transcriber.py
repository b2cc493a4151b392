"""Transcriber protocol and transcript artifact handling.

Transcription is a file job: a WAV clip is submitted to an engine that
writes a plain-text artifact next to it. The caller polls the candidate
artifact locations, reads the first one found, then removes the clip and
every artifact.
"""

import logging
import time
import wave
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Raised when a transcription job cannot be submitted or run."""


class ArtifactNaming(Enum):
    """Names an engine may give the transcript, in polling order.

    `{name}` is the full clip filename and `{stem}` the name without the
    .wav suffix.
    """

    FULL_NAME = "{name}.txt"
    STEM = "{stem}.txt"

    def path_for(self, clip_path: Path, output_dir: Path) -> Path:
        """Resolve the artifact path for a clip."""
        return output_dir / self.value.format(name=clip_path.name, stem=clip_path.stem)


def candidate_paths(clip_path: Path, output_dir: Path) -> list[Path]:
    """List artifact locations for a clip, in polling order."""
    return [naming.path_for(clip_path, output_dir) for naming in ArtifactNaming]


def wait_for_artifact(
    candidates: list[Path],
    retries: int = 5,
    delay: float = 0.3,
    sleep: Callable[[float], None] = time.sleep,
) -> Path | None:
    """Poll candidate paths until one exists.

    Every attempt checks all candidates in order. Sleeps `delay` seconds
    between attempts.

    Args:
        candidates: Artifact paths to check
        retries: Number of attempts
        delay: Seconds between attempts
        sleep: Sleep function

    Returns:
        First existing path, or None after the last attempt
    """
    for attempt in range(retries):
        for path in candidates:
            if path.exists():
                logger.debug(f"Found transcript artifact {path.name} on attempt {attempt + 1}")
                return path
        if attempt < retries - 1:
            sleep(delay)

    logger.warning(f"No transcript artifact after {retries} attempts")
    return None


def read_artifact(path: Path) -> str:
    """Read and trim a transcript artifact."""
    return path.read_text(encoding="utf-8").strip()


def remove_job_files(clip_path: Path, candidates: list[Path]) -> None:
    """Delete a clip and all of its artifacts. Missing files are fine."""
    for path in [clip_path, *candidates]:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")


def write_clip(path: Path, audio: bytes, sample_rate: int, channels: int = 1) -> Path:
    """Write 16-bit PCM audio as a WAV clip.

    Args:
        path: Destination path
        audio: Raw PCM bytes (16-bit)
        sample_rate: Sample rate in Hz
        channels: Channel count

    Returns:
        The written path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(audio)
    return path


class Transcriber(Protocol):
    """Interface for speech-to-text engines.

    Implementations write the transcript of a clip as a text artifact
    named by one of the ArtifactNaming patterns.
    """

    def submit(self, clip_path: Path, output_dir: Path) -> None:
        """Transcribe a WAV clip into output_dir.

        Args:
            clip_path: WAV clip to transcribe
            output_dir: Directory receiving the text artifact

        Raises:
            TranscriptionError: If the job cannot be run
        """
        ...


__all__ = [
    "ArtifactNaming",
    "Transcriber",
    "TranscriptionError",
    "candidate_paths",
    "read_artifact",
    "remove_job_files",
    "wait_for_artifact",
    "write_clip",
]
