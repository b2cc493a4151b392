"""PortAudio backend using PyAudio.

Provides AudioCapture and AudioPlayback implementations for any platform
PortAudio supports.
"""

import threading
import time
from typing import Any

import pyaudio

from ..capture import AudioChunk


class PortAudioCapture:
    """Audio capture using PyAudio.

    Implements the AudioCapture protocol.
    """

    def __init__(
        self,
        device_name: str = "default",
        sample_rate: int = 16000,
        channels: int = 1,
        chunk_size: int = 1024,
    ) -> None:
        """Initialize audio capture.

        Args:
            device_name: Audio input device name or "default"
            sample_rate: Sample rate in Hz
            channels: Number of channels (1 for mono)
            chunk_size: Frames per buffer
        """
        self._device_name = device_name
        self._sample_rate = sample_rate
        self._channels = channels
        self._chunk_size = chunk_size
        self._sample_width = 2  # 16-bit audio

        self._pa: Any = None
        self._stream: Any = None
        self._is_active = False
        self._start_time_ms = 0

    def _get_device_index(self) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default" or self._pa is None:
            return None

        for i in range(self._pa.get_device_count()):
            info = self._pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxInputChannels"] > 0:
                return i

        return None  # Fall back to default

    def start(self) -> None:
        """Start audio capture."""
        if self._is_active:
            return

        self._pa = pyaudio.PyAudio()
        try:
            self._stream = self._pa.open(
                format=pyaudio.paInt16,
                channels=self._channels,
                rate=self._sample_rate,
                input=True,
                input_device_index=self._get_device_index(),
                frames_per_buffer=self._chunk_size,
            )
        except OSError as e:
            self._pa.terminate()
            self._pa = None
            raise RuntimeError(f"Could not open input device: {e}") from e

        self._is_active = True
        self._start_time_ms = int(time.time() * 1000)

    def stop(self) -> None:
        """Stop audio capture."""
        if not self._is_active:
            return

        self._is_active = False

        if self._stream is not None:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None

        if self._pa is not None:
            self._pa.terminate()
            self._pa = None

    def read(self, frames: int) -> AudioChunk:
        """Read audio frames from input."""
        if not self._is_active or self._stream is None:
            raise RuntimeError("Capture not active")

        data = self._stream.read(frames, exception_on_overflow=False)
        timestamp = int(time.time() * 1000) - self._start_time_ms

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
        """Get frames per buffer."""
        return self._chunk_size


class PortAudioPlayback:
    """Audio playback using PyAudio.

    Implements the AudioPlayback protocol.
    """

    def __init__(self, device_name: str = "default") -> None:
        """Initialize audio playback.

        Args:
            device_name: Audio output device name or "default"
        """
        self._device_name = device_name
        self._is_playing = False
        self._stop_flag = threading.Event()

    def _get_device_index(self, pa: Any) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default":
            return None

        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxOutputChannels"] > 0:
                return i

        return None

    def play(self, audio: bytes, sample_rate: int) -> None:
        """Play audio synchronously."""
        self._is_playing = True
        self._stop_flag.clear()

        pa = pyaudio.PyAudio()
        try:
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=sample_rate,
                output=True,
                output_device_index=self._get_device_index(pa),
            )

            try:
                chunk_size = 1024
                for i in range(0, len(audio), chunk_size * 2):
                    if self._stop_flag.is_set():
                        break
                    stream.write(audio[i : i + chunk_size * 2])
            finally:
                stream.stop_stream()
                stream.close()
        except OSError as e:
            raise RuntimeError(f"Playback failed: {e}") from e
        finally:
            pa.terminate()
            self._is_playing = False

    def stop(self) -> None:
        """Stop current playback."""
        self._stop_flag.set()

    @property
    def is_playing(self) -> bool:
        """Return True if audio is playing."""
        return self._is_playing


__all__ = ["PortAudioCapture", "PortAudioPlayback"]
