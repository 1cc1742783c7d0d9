"""Audio output for Nurtra.

Usage:
    playback = create_audio_playback(config.audio)
    playback.play(audio, 22050, on_finished=lambda: print("done"))

    # For testing, use the mock implementation
    from nurtra.audio.mock import MockAudioPlayback
"""

from typing import TYPE_CHECKING

from .mock import MockAudioPlayback
from .playback import AudioPlayback, OnFinished

if TYPE_CHECKING:
    from ..config import AudioConfig


def create_audio_playback(
    config: "AudioConfig | None" = None,
    use_mock: bool = False,
) -> AudioPlayback:
    """Create an audio playback instance.

    Args:
        config: Audio configuration (uses defaults if None)
        use_mock: If True, return mock implementation for testing

    Returns:
        AudioPlayback implementation

    Raises:
        RuntimeError: If PyAudio is not installed and mocks were not requested
    """
    device_name = "default"
    sample_rate = 22050

    if config is not None:
        device_name = config.output_device
        sample_rate = config.sample_rate

    if use_mock:
        # Clips "play" for a second so the loop can be watched from the CLI
        return MockAudioPlayback(sample_rate=sample_rate, finish_after=1.0)

    from .pyaudio_backend import PyAudioPlayback

    return PyAudioPlayback(device_name=device_name, sample_rate=sample_rate)


__all__ = [
    "AudioPlayback",
    "MockAudioPlayback",
    "OnFinished",
    "create_audio_playback",
]
