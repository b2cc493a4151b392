"""Push-to-talk clip recorder.

Collects audio from a capture device on a background thread between
start() and stop().
"""

import logging
import threading

from .capture import AudioCapture

logger = logging.getLogger(__name__)


class ClipRecorder:
    """Records one clip at a time from an AudioCapture device."""

    def __init__(self, capture: AudioCapture) -> None:
        """Initialize recorder.

        Args:
            capture: Audio input device
        """
        self._capture = capture
        self._chunks: list[bytes] = []
        self._lock = threading.Lock()
        self._stop_flag = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start collecting audio.

        Raises:
            RuntimeError: If a recording is already running or the device fails
        """
        if self._thread is not None:
            raise RuntimeError("Recording already in progress")

        with self._lock:
            self._chunks = []
        self._stop_flag.clear()
        self._capture.start()

        self._thread = threading.Thread(target=self._collect, name="mira-recorder", daemon=True)
        self._thread.start()
        logger.debug("Recording started")

    def _collect(self) -> None:
        while not self._stop_flag.is_set() and self._capture.is_active:
            try:
                chunk = self._capture.read(self._capture.chunk_size)
            except RuntimeError as e:
                logger.warning(f"Audio read failed: {e}")
                break
            with self._lock:
                self._chunks.append(chunk.data)

    def stop(self) -> bytes:
        """Stop collecting and return the recorded PCM audio."""
        self._stop_flag.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self._capture.stop()

        with self._lock:
            audio = b"".join(self._chunks)
            self._chunks = []
        logger.debug(f"Recording stopped ({len(audio)} bytes)")
        return audio

    @property
    def is_recording(self) -> bool:
        """Check if a recording is running."""
        return self._thread is not None

    @property
    def sample_rate(self) -> int:
        """Sample rate of recorded audio."""
        return self._capture.sample_rate

    @property
    def channels(self) -> int:
        """Channel count of recorded audio."""
        return self._capture.channels


__all__ = ["ClipRecorder"]
