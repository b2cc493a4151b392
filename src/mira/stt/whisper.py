"""Faster-whisper transcriber implementation.

Uses faster-whisper (CTranslate2) for efficient speech-to-text on CPU/GPU.
"""

import logging
import time
from pathlib import Path
from typing import Any

from faster_whisper import WhisperModel

from .transcriber import ArtifactNaming, TranscriptionError

logger = logging.getLogger(__name__)


class WhisperTranscriber:
    """Speech-to-text transcriber using faster-whisper.

    Writes the transcript as `<stem>.txt` in the output directory.
    """

    def __init__(
        self,
        model_size: str = "base.en",
        device: str = "cpu",
        compute_type: str = "int8",
        language: str = "en",
    ) -> None:
        """Initialize Whisper transcriber.

        Args:
            model_size: Whisper model size (tiny.en, base.en, small.en, etc.)
            device: Device to run on ("cpu", "cuda", "auto")
            compute_type: Computation type ("float16", "int8", "float32")
            language: Expected language code
        """
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._language = language
        self._model: Any = None

    def _ensure_model_loaded(self) -> None:
        """Load model if not already loaded."""
        if self._model is not None:
            return

        logger.info(
            f"Loading Whisper model: {self._model_size} "
            f"(device={self._device}, compute={self._compute_type})"
        )

        start = time.time()
        self._model = WhisperModel(
            self._model_size,
            device=self._device,
            compute_type=self._compute_type,
        )
        load_time = (time.time() - start) * 1000
        logger.info(f"Whisper model loaded in {load_time:.0f}ms")

    def submit(self, clip_path: Path, output_dir: Path) -> None:
        """Transcribe a clip and write `<stem>.txt`.

        Raises:
            TranscriptionError: If the model fails
        """
        self._ensure_model_loaded()
        start_time = time.time()

        try:
            segments, _info = self._model.transcribe(
                str(clip_path),
                language=self._language,
                beam_size=1,
                vad_filter=True,
            )
            text = " ".join(segment.text.strip() for segment in segments).strip()
        except Exception as e:
            raise TranscriptionError(f"Whisper transcription failed: {e}") from e

        artifact = ArtifactNaming.STEM.path_for(clip_path, output_dir)
        artifact.write_text(text, encoding="utf-8")

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Transcribed {clip_path.name} in {latency_ms}ms: '{text[:50]}...'")

    @property
    def model_size(self) -> str:
        """Get model size."""
        return self._model_size

    @property
    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self._model is not None


__all__ = ["WhisperTranscriber"]
