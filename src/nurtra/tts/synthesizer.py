"""Synthesizer protocol and data classes.

Defines the interface for text-to-speech synthesis.
"""

from dataclasses import dataclass
from typing import Protocol

# Text shown while quotes are still being fetched; never sent for synthesis.
LOADING_PLACEHOLDER = "Loading..."


@dataclass(frozen=True)
class VoiceParams:
    """Voice parameters sent with every synthesis request.

    Attributes:
        voice_id: Provider voice identifier
        model_id: Provider model identifier
        stability: Lower values give more expressive variation
        similarity_boost: How closely to match the original voice
        style: Style exaggeration
        use_speaker_boost: Enhance voice clarity
        speed: Speaking rate multiplier
    """

    voice_id: str = "EXAVITQu4vr4xnSDxMaL"
    model_id: str = "eleven_multilingual_v2"
    stability: float = 0.1
    similarity_boost: float = 0.8
    style: float = 1.0
    use_speaker_boost: bool = True
    speed: float = 1.1


@dataclass
class SynthesisResult:
    """Result of text-to-speech synthesis.

    Attributes:
        audio: Raw PCM audio bytes
        sample_rate: Audio sample rate in Hz
        duration_ms: Audio duration in milliseconds
        latency_ms: Synthesis latency in milliseconds
    """

    audio: bytes
    sample_rate: int
    duration_ms: int
    latency_ms: int


class Synthesizer(Protocol):
    """Interface for text-to-speech synthesis.

    Implementations convert text to speech audio.
    """

    def synthesize(self, text: str, voice: VoiceParams | None = None) -> SynthesisResult:
        """Convert text to speech audio.

        Args:
            text: Text to synthesize
            voice: Voice parameters, or None for the synthesizer's defaults

        Returns:
            SynthesisResult with audio data

        Raises:
            SynthesisError: If synthesis fails
        """
        ...

    @property
    def sample_rate(self) -> int:
        """Sample rate of the audio this synthesizer produces."""
        ...


def is_speakable(text: str) -> bool:
    """Return True if text may be sent for synthesis."""
    stripped = text.strip()
    return bool(stripped) and stripped != LOADING_PLACEHOLDER


__all__ = [
    "LOADING_PLACEHOLDER",
    "SynthesisResult",
    "Synthesizer",
    "VoiceParams",
    "is_speakable",
]
