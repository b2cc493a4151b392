"""Audio capture protocol and data classes.

Defines the interface for audio input capture that all backends follow.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class AudioChunk:
    """Raw audio data chunk.

    Attributes:
        data: Raw PCM audio bytes
        sample_rate: Sample rate in Hz (e.g., 16000)
        channels: Number of audio channels (1=mono, 2=stereo)
        sample_width: Bytes per sample (2 for 16-bit audio)
        timestamp_ms: Milliseconds since capture started
    """

    data: bytes
    sample_rate: int
    channels: int
    sample_width: int
    timestamp_ms: int

    @property
    def duration_ms(self) -> float:
        """Calculate duration of this chunk in milliseconds."""
        if self.sample_rate == 0 or self.sample_width == 0 or self.channels == 0:
            return 0.0
        num_samples = len(self.data) / (self.sample_width * self.channels)
        return (num_samples / self.sample_rate) * 1000


class AudioCapture(Protocol):
    """Interface for audio input capture."""

    def start(self) -> None:
        """Start capturing audio from input device.

        Raises:
            RuntimeError: If capture cannot be started
        """
        ...

    def stop(self) -> None:
        """Stop capturing audio.

        Safe to call even if not currently capturing.
        """
        ...

    def read(self, frames: int) -> AudioChunk:
        """Read specified number of frames from buffer.

        Raises:
            RuntimeError: If not currently capturing
        """
        ...

    @property
    def is_active(self) -> bool:
        """Return True if capture is currently active."""
        ...

    @property
    def sample_rate(self) -> int:
        """Get the configured sample rate in Hz."""
        ...

    @property
    def channels(self) -> int:
        """Get the number of channels."""
        ...

    @property
    def chunk_size(self) -> int:
        """Get frames per read."""
        ...


__all__ = ["AudioCapture", "AudioChunk"]
