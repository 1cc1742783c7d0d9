"""ElevenLabs TTS synthesizer.

Converts motivational quotes to speech using the ElevenLabs API and maps
provider failures onto the typed errors in :mod:`nurtra.tts.errors`.
"""

import logging
import os
import time

import httpx
from elevenlabs import ElevenLabs
from elevenlabs.core.api_error import ApiError
from elevenlabs.types import VoiceSettings

from .errors import (
    EncodingFailedError,
    InvalidResponseError,
    SynthesisError,
    UnauthorizedError,
    error_for_status,
)
from .synthesizer import SynthesisResult, VoiceParams, is_speakable

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "ELEVENLABS_API_KEY"
PLACEHOLDER_API_KEYS = frozenset({"your-elevenlabs-api-key", "YOUR_ELEVENLABS_API_KEY_HERE"})


class ElevenLabsSynthesizer:
    """Text-to-speech synthesizer using the ElevenLabs API."""

    TARGET_SAMPLE_RATE = 22050
    OUTPUT_FORMAT = "pcm_22050"

    def __init__(
        self,
        api_key: str | None = None,
        voice: VoiceParams | None = None,
        client: ElevenLabs | None = None,
    ) -> None:
        """Initialize ElevenLabs synthesizer.

        Args:
            api_key: ElevenLabs API key (defaults to ELEVENLABS_API_KEY env var)
            voice: Default voice parameters
            client: Pre-built client, mainly for tests
        """
        self._api_key = api_key or os.getenv(API_KEY_ENV_VAR)
        self._voice = voice or VoiceParams()
        self._client = client

        if self._client is None and self.has_valid_key:
            try:
                self._client = ElevenLabs(api_key=self._api_key)
                logger.info("ElevenLabs client initialized")
            except Exception as e:
                logger.warning(f"Failed to initialize ElevenLabs client: {e}")
                self._client = None

    @property
    def has_valid_key(self) -> bool:
        """Check that an API key is configured and is not a placeholder."""
        return bool(self._api_key) and self._api_key not in PLACEHOLDER_API_KEYS

    @property
    def is_available(self) -> bool:
        """Check if ElevenLabs is available and configured."""
        return self.has_valid_key and self._client is not None

    @property
    def sample_rate(self) -> int:
        """Sample rate of produced audio."""
        return self.TARGET_SAMPLE_RATE

    @property
    def voice(self) -> VoiceParams:
        """Default voice parameters."""
        return self._voice

    def synthesize(self, text: str, voice: VoiceParams | None = None) -> SynthesisResult:
        """Convert text to speech.

        Args:
            text: Text to synthesize
            voice: Voice parameters (defaults to the configured voice)

        Returns:
            SynthesisResult with PCM audio data

        Raises:
            UnauthorizedError: API key missing or rejected (401)
            RateLimitedError: Too many requests (429)
            ServerError: Provider 5xx
            InvalidResponseError: No usable response
            EncodingFailedError: Text cannot be encoded into a request
        """
        start_time = time.time()

        if not self.is_available:
            raise UnauthorizedError("ElevenLabs API key not configured")

        if not is_speakable(text):
            raise EncodingFailedError("Refusing to synthesize empty or placeholder text")

        try:
            text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingFailedError(f"Failed to encode request text: {e}") from e

        params = voice or self._voice
        voice_settings = VoiceSettings(
            stability=params.stability,
            similarity_boost=params.similarity_boost,
            style=params.style,
            use_speaker_boost=params.use_speaker_boost,
            speed=params.speed,
        )

        try:
            audio_generator = self._client.text_to_speech.convert(
                text=text,
                voice_id=params.voice_id,
                model_id=params.model_id,
                output_format=self.OUTPUT_FORMAT,
                voice_settings=voice_settings,
            )
            audio_data = b"".join(audio_generator)
        except ApiError as e:
            if e.status_code is None:
                raise InvalidResponseError(f"ElevenLabs returned no status: {e.body}") from e
            raise error_for_status(e.status_code, str(e.body)) from e
        except httpx.HTTPError as e:
            raise InvalidResponseError(f"ElevenLabs request failed: {e}") from e
        except SynthesisError:
            raise
        except Exception as e:
            raise InvalidResponseError(f"ElevenLabs synthesis failed: {e}") from e

        if not audio_data:
            raise InvalidResponseError("ElevenLabs returned empty audio")

        # 16-bit mono PCM
        duration_ms = int(len(audio_data) / (self.TARGET_SAMPLE_RATE * 2) * 1000)
        latency_ms = int((time.time() - start_time) * 1000)

        logger.debug(
            f"ElevenLabs synthesized '{text[:30]}...' in {latency_ms}ms ({duration_ms}ms audio)"
        )

        return SynthesisResult(
            audio=audio_data,
            sample_rate=self.TARGET_SAMPLE_RATE,
            duration_ms=max(1, duration_ms),
            latency_ms=latency_ms,
        )


__all__ = ["API_KEY_ENV_VAR", "ElevenLabsSynthesizer"]
