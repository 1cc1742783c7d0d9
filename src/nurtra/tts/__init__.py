"""Text-to-speech module for Nurtra.

Provides speech synthesis for motivational quotes:
- ElevenLabs: Expressive cloud TTS (requires ELEVENLABS_API_KEY)
- Mock: Tone generator for tests and offline runs
- SpeechCache: Content-addressed store of synthesized clips
"""

import logging
from typing import TYPE_CHECKING

from .cache import CacheMissError, SpeechCache
from .errors import (
    EncodingFailedError,
    InvalidResponseError,
    RateLimitedError,
    ServerError,
    SynthesisError,
    UnauthorizedError,
)
from .mock import MockSynthesizer
from .synthesizer import LOADING_PLACEHOLDER, SynthesisResult, Synthesizer, VoiceParams

if TYPE_CHECKING:
    from ..config import TTSConfig

logger = logging.getLogger(__name__)


def voice_params_from_config(config: "TTSConfig") -> VoiceParams:
    """Build voice parameters from TTS configuration."""
    return VoiceParams(
        voice_id=config.voice_id,
        model_id=config.model,
        stability=config.stability,
        similarity_boost=config.similarity_boost,
        style=config.style,
        use_speaker_boost=config.use_speaker_boost,
        speed=config.speed,
    )


def create_synthesizer(
    config: "TTSConfig | None" = None,
    use_mock: bool = False,
) -> Synthesizer:
    """Create the synthesizer selected by configuration.

    Args:
        config: TTS configuration (optional)
        use_mock: If True, force mock synthesizer for testing

    Returns:
        Synthesizer implementation. When ElevenLabs is selected but has no
        API key, the ElevenLabs synthesizer is still returned; every call
        then fails with UnauthorizedError and the playback loop skips it.
    """
    if use_mock or (config is not None and config.provider == "mock"):
        logger.info("TTS: Using MockSynthesizer")
        return MockSynthesizer()

    from .elevenlabs import ElevenLabsSynthesizer

    voice = voice_params_from_config(config) if config is not None else VoiceParams()
    synth = ElevenLabsSynthesizer(voice=voice)
    if synth.is_available:
        logger.info("TTS: Using ElevenLabsSynthesizer")
    else:
        logger.warning("TTS: ElevenLabs API key not configured, quotes will be skipped")
    return synth


__all__ = [
    "CacheMissError",
    "EncodingFailedError",
    "InvalidResponseError",
    "LOADING_PLACEHOLDER",
    "MockSynthesizer",
    "RateLimitedError",
    "ServerError",
    "SpeechCache",
    "SynthesisError",
    "SynthesisResult",
    "Synthesizer",
    "UnauthorizedError",
    "VoiceParams",
    "create_synthesizer",
    "voice_params_from_config",
]
