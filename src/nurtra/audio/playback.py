"""Audio playback protocol.

Defines the interface for audio output that all backends must follow.
"""

from collections.abc import Callable
from typing import Protocol

OnFinished = Callable[[], None]


class AudioPlayback(Protocol):
    """Interface for fire-and-forget audio output.

    ``play`` returns as soon as playback has started. When the clip runs to
    the end, ``on_finished`` is called exactly once from the backend's
    thread. Starting another clip or calling ``stop`` discards the pending
    callback, so a stopped or superseded clip never reports completion.
    """

    def play(
        self,
        audio: bytes,
        sample_rate: int,
        on_finished: OnFinished | None = None,
    ) -> None:
        """Start playing audio in the background.

        Any clip already playing is stopped first and its callback discarded.

        Args:
            audio: Raw PCM audio bytes (16-bit, mono)
            sample_rate: Sample rate in Hz
            on_finished: One-shot completion callback
        """
        ...

    def stop(self) -> None:
        """Halt playback and discard the pending completion callback.

        Safe to call even if nothing is playing.
        """
        ...

    @property
    def is_playing(self) -> bool:
        """Return True if audio is currently playing."""
        ...

    @property
    def sample_rate(self) -> int:
        """Get the configured output sample rate in Hz."""
        ...


__all__ = ["AudioPlayback", "OnFinished"]
