"""Mock audio devices for testing.

Provide AudioCapture and AudioPlayback implementations that need no audio
hardware.
"""

import time

from .capture import AudioChunk


class MockAudioCapture:
    """Mock audio capture for testing.

    Serves preset PCM data, then silence. Implements the AudioCapture
    protocol.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        sample_width: int = 2,
        chunk_size: int = 1024,
    ) -> None:
        """Initialize mock capture.

        Args:
            sample_rate: Sample rate in Hz
            channels: Number of audio channels
            sample_width: Bytes per sample
            chunk_size: Frames per chunk
        """
        self._sample_rate = sample_rate
        self._channels = channels
        self._sample_width = sample_width
        self._chunk_size = chunk_size
        self._is_active = False
        self._audio_source: bytes | None = None
        self._source_position = 0
        self._start_time_ms = 0

    def set_audio_data(self, data: bytes) -> None:
        """Set raw audio data served by read().

        Args:
            data: Raw PCM audio bytes
        """
        self._audio_source = data
        self._source_position = 0

    def start(self) -> None:
        """Start mock capture."""
        self._is_active = True
        self._source_position = 0
        self._start_time_ms = int(time.time() * 1000)

    def stop(self) -> None:
        """Stop mock capture."""
        self._is_active = False

    def read(self, frames: int) -> AudioChunk:
        """Read audio frames.

        Reads from the preset source while it lasts. Once it is exhausted
        capture deactivates itself.
        """
        if not self._is_active:
            raise RuntimeError("Capture not active")

        bytes_needed = frames * self._sample_width * self._channels
        timestamp = int(time.time() * 1000) - self._start_time_ms

        if self._audio_source is not None:
            data = self._audio_source[self._source_position : self._source_position + bytes_needed]
            self._source_position += len(data)
            if self._source_position >= len(self._audio_source):
                self._is_active = False
        else:
            data = bytes(bytes_needed)
            time.sleep(frames / self._sample_rate)

        return AudioChunk(
            data=data,
            sample_rate=self._sample_rate,
            channels=self._channels,
            sample_width=self._sample_width,
            timestamp_ms=timestamp,
        )

    @property
    def is_active(self) -> bool:
        """Return True if capture is active."""
        return self._is_active

    @property
    def sample_rate(self) -> int:
        """Get sample rate."""
        return self._sample_rate

    @property
    def channels(self) -> int:
        """Get channel count."""
        return self._channels

    @property
    def chunk_size(self) -> int:
        """Get frames per chunk."""
        return self._chunk_size


class MockAudioPlayback:
    """Mock audio playback for testing.

    Records all audio that would be played for later verification.
    Implements the AudioPlayback protocol.
    """

    def __init__(self) -> None:
        """Initialize mock playback."""
        self._is_playing = False
        self._played_audio: list[tuple[bytes, int]] = []
        self._error_message: str | None = None

    def set_error(self, message: str | None) -> None:
        """Make play() raise RuntimeError (None clears it)."""
        self._error_message = message

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Record audio that would be played."""
        if self._error_message:
            raise RuntimeError(self._error_message)
        self._played_audio.append((audio, sample_rate))

    def stop(self) -> None:
        """Stop mock playback."""
        self._is_playing = False

    @property
    def is_playing(self) -> bool:
        """Return True if 'playing'."""
        return self._is_playing

    @property
    def play_count(self) -> int:
        """Get number of times play was called."""
        return len(self._played_audio)

    @property
    def all_played_audio(self) -> list[tuple[bytes, int]]:
        """Get list of all (audio, sample_rate) pairs that were played."""
        return self._played_audio.copy()


__all__ = ["MockAudioCapture", "MockAudioPlayback"]
