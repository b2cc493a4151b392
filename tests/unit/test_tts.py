"""Unit tests for text-to-speech."""

import json

import httpx
import pytest

from mira.config import TTSConfig
from mira.tts import MAX_SPEECH_CHARS, create_synthesizer
from mira.tts.cartesia import CARTESIA_API_URL, CARTESIA_VERSION, CartesiaSynthesizer
from mira.tts.mock import MockSynthesizer
from mira.tts.synthesizer import SpeechError, truncate_text


class TestTruncate:
    """Tests for truncate_text()."""

    def test_short_text_unchanged(self) -> None:
        """Test text under the limit is kept."""
        assert truncate_text("hello") == "hello"

    def test_long_text_clipped(self) -> None:
        """Test text is clipped to the 500 character limit."""
        assert len(truncate_text("a" * 900)) == MAX_SPEECH_CHARS == 500


class TestCartesiaSynthesizer:
    """Tests for CartesiaSynthesizer over a mock transport."""

    def test_synthesize(self) -> None:
        """Test a successful request returns the PCM body."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=b"\x01\x00" * 22050)

        synth = CartesiaSynthesizer(api_key="sk-test", transport=httpx.MockTransport(handler))
        result = synth.synthesize("Hello sir")

        assert result.audio == b"\x01\x00" * 22050
        assert result.sample_rate == 22050
        assert result.duration_ms == 1000

        request = requests[0]
        assert str(request.url) == CARTESIA_API_URL
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["Cartesia-Version"] == CARTESIA_VERSION
        body = json.loads(request.content)
        assert body["transcript"] == "Hello sir"
        assert body["output_format"]["encoding"] == "pcm_s16le"

    def test_payload_truncates(self) -> None:
        """Test long text is clipped before sending."""
        synth = CartesiaSynthesizer(api_key="sk-test", max_chars=10)
        assert synth.build_payload("x" * 50)["transcript"] == "x" * 10

    def test_http_error(self) -> None:
        """Test provider errors raise SpeechError."""
        synth = CartesiaSynthesizer(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(401, text="bad key")),
        )
        with pytest.raises(SpeechError, match="401"):
            synth.synthesize("hello")

    def test_network_error(self) -> None:
        """Test connection failures raise SpeechError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        synth = CartesiaSynthesizer(api_key="sk-test", transport=httpx.MockTransport(handler))
        with pytest.raises(SpeechError, match="request failed"):
            synth.synthesize("hello")

    def test_missing_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test synthesis without a key raises SpeechError."""
        monkeypatch.delenv("CARTESIA_API_KEY", raising=False)
        synth = CartesiaSynthesizer()

        assert synth.is_available is False
        with pytest.raises(SpeechError):
            synth.synthesize("hello")


class TestMockSynthesizer:
    """Tests for MockSynthesizer."""

    def test_records_texts(self) -> None:
        """Test spoken texts are recorded."""
        synth = MockSynthesizer()
        result = synth.synthesize("one two three")

        assert synth.synthesized_texts == ["one two three"]
        assert result.duration_ms == 300

    def test_error(self) -> None:
        """Test configured failures."""
        synth = MockSynthesizer()
        synth.set_error("quota exceeded")

        with pytest.raises(SpeechError):
            synth.synthesize("hi")


class TestCreateSynthesizer:
    """Tests for the synthesizer factory."""

    def test_mock(self) -> None:
        """Test use_mock returns the mock."""
        assert isinstance(create_synthesizer(TTSConfig(), use_mock=True), MockSynthesizer)

    def test_cartesia_with_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test Cartesia is used when a key is set."""
        monkeypatch.setenv("CARTESIA_API_KEY", "sk-test")
        assert isinstance(create_synthesizer(TTSConfig()), CartesiaSynthesizer)

    def test_cartesia_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing key falls back to the mock."""
        monkeypatch.delenv("CARTESIA_API_KEY", raising=False)
        assert isinstance(create_synthesizer(TTSConfig()), MockSynthesizer)

    def test_unknown_provider(self) -> None:
        """Test unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unknown TTS provider"):
            create_synthesizer(TTSConfig(provider="robot"))
