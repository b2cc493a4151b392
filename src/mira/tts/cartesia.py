"""Cartesia TTS synthesizer.

Calls the Cartesia bytes endpoint and receives raw 16-bit PCM.
"""

import logging
import os
import time

import httpx

from .synthesizer import MAX_SPEECH_CHARS, SpeechError, SynthesisResult, truncate_text

logger = logging.getLogger(__name__)

CARTESIA_API_URL = "https://api.cartesia.ai/tts/bytes"
CARTESIA_VERSION = "2025-04-16"
CARTESIA_TIMEOUT = 30.0  # seconds


class CartesiaSynthesizer:
    """Text-to-speech synthesizer using the Cartesia API."""

    DEFAULT_VOICE_ID = "32b3f3c5-7171-46aa-abe7-b598964aa793"
    DEFAULT_MODEL = "sonic-2"

    def __init__(
        self,
        api_key: str | None = None,
        voice_id: str = DEFAULT_VOICE_ID,
        model_id: str = DEFAULT_MODEL,
        sample_rate: int = 22050,
        max_chars: int = MAX_SPEECH_CHARS,
        timeout: float = CARTESIA_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Cartesia synthesizer.

        Args:
            api_key: Cartesia API key. Falls back to CARTESIA_API_KEY.
            voice_id: Voice identifier
            model_id: Cartesia model name
            sample_rate: Output sample rate in Hz
            max_chars: Maximum characters sent per request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._api_key = api_key or os.environ.get("CARTESIA_API_KEY")
        self._voice_id = voice_id
        self._model_id = model_id
        self._sample_rate = sample_rate
        self._max_chars = max_chars
        self._timeout = timeout
        self._transport = transport

        if not self._api_key:
            logger.warning("CARTESIA_API_KEY not set - Cartesia TTS unavailable")

    @property
    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._api_key)

    def build_payload(self, text: str) -> dict:
        """Build the request body for a transcript."""
        return {
            "model_id": self._model_id,
            "transcript": truncate_text(text, self._max_chars),
            "voice": {"mode": "id", "id": self._voice_id},
            "output_format": {
                "container": "raw",
                "encoding": "pcm_s16le",
                "sample_rate": self._sample_rate,
            },
            "language": "en",
        }

    def synthesize(self, text: str) -> SynthesisResult:
        """Synthesize text to PCM audio.

        Raises:
            SpeechError: If the key is missing or the request fails
        """
        if not self._api_key:
            raise SpeechError("Cartesia API key not configured")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Cartesia-Version": CARTESIA_VERSION,
            "Content-Type": "application/json",
        }

        start_time = time.time()
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    CARTESIA_API_URL,
                    headers=headers,
                    json=self.build_payload(text),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SpeechError(
                f"Cartesia HTTP error {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SpeechError(f"Cartesia request failed: {e}") from e

        audio = response.content
        duration_ms = int(len(audio) / (self._sample_rate * 2) * 1000)
        latency_ms = int((time.time() - start_time) * 1000)

        logger.debug(f"Synthesized '{text[:30]}...' in {latency_ms}ms ({duration_ms}ms audio)")

        return SynthesisResult(
            audio=audio,
            sample_rate=self._sample_rate,
            duration_ms=duration_ms,
            latency_ms=latency_ms,
        )


__all__ = ["CartesiaSynthesizer"]
