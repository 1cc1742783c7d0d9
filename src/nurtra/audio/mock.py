"""Mock audio playback for testing.

Records every clip instead of playing it. Completion is driven by the test
through ``finish()``, or automatically after ``finish_after`` seconds.
"""

import threading

from .playback import OnFinished


class MockAudioPlayback:
    """Mock audio playback implementing the AudioPlayback protocol."""

    def __init__(self, sample_rate: int = 22050, finish_after: float | None = None) -> None:
        """Initialize mock playback.

        Args:
            sample_rate: Output sample rate in Hz
            finish_after: If set, each clip completes on its own after this
                many seconds; otherwise the test calls finish().
        """
        self._sample_rate = sample_rate
        self._finish_after = finish_after
        self._lock = threading.Lock()
        self._played_audio: list[tuple[bytes, int]] = []
        self._on_finished: OnFinished | None = None
        self._generation = 0
        self._stop_count = 0
        self._is_playing = False
        self._timer: threading.Timer | None = None

    def play(
        self,
        audio: bytes,
        sample_rate: int,
        on_finished: OnFinished | None = None,
    ) -> None:
        """Record audio that would be played."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._played_audio.append((audio, sample_rate))
            self._on_finished = on_finished
            self._is_playing = True
            if self._finish_after is not None:
                self._timer = threading.Timer(
                    self._finish_after, self._finish_generation, args=(self._generation,)
                )
                self._timer.daemon = True
                self._timer.start()

    def _finish_generation(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            callback, self._on_finished = self._on_finished, None
            self._is_playing = False
        if callback is not None:
            callback()

    def finish(self) -> bool:
        """Complete the current clip and fire its callback.

        Returns:
            True if a pending callback was fired.
        """
        with self._lock:
            callback, self._on_finished = self._on_finished, None
            self._is_playing = False
        if callback is None:
            return False
        callback()
        return True

    def stop(self) -> None:
        """Stop mock playback and drop the pending callback."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            self._on_finished = None
            self._is_playing = False
            self._stop_count += 1

    @property
    def is_playing(self) -> bool:
        """Return True if 'playing'."""
        return self._is_playing

    @property
    def has_pending_callback(self) -> bool:
        """Return True if a completion callback is waiting."""
        return self._on_finished is not None

    @property
    def sample_rate(self) -> int:
        """Get output sample rate."""
        return self._sample_rate

    @property
    def play_count(self) -> int:
        """Get number of times play was called."""
        return len(self._played_audio)

    @property
    def stop_count(self) -> int:
        """Get number of times stop was called."""
        return self._stop_count

    @property
    def played_audio(self) -> bytes | None:
        """Get the last played audio bytes."""
        with self._lock:
            if not self._played_audio:
                return None
            return self._played_audio[-1][0]

    @property
    def all_played_audio(self) -> list[tuple[bytes, int]]:
        """Get list of all (audio, sample_rate) pairs that were played."""
        with self._lock:
            return self._played_audio.copy()

    def clear(self) -> None:
        """Clear recorded audio."""
        with self._lock:
            self._played_audio.clear()
            self._stop_count = 0


__all__ = ["MockAudioPlayback"]
