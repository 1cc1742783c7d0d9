"""Mock synthesizer for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

import math
import struct
import threading
import time

from .errors import SynthesisError
from .synthesizer import SynthesisResult, VoiceParams


class MockSynthesizer:
    """Mock synthesizer for testing.

    Generates simple tones instead of actual speech. Failures can be
    scripted per text, and synthesis can be held until released to
    simulate a slow network.
    """

    def __init__(self, sample_rate: int = 22050) -> None:
        """Initialize mock synthesizer.

        Args:
            sample_rate: Output sample rate
        """
        self._sample_rate = sample_rate
        self._call_count = 0
        self._synthesized_texts: list[str] = []
        self._failures: dict[str, SynthesisError] = {}
        self._latency_ms = 0
        self._gate: threading.Event | None = None
        self._lock = threading.Lock()

    def synthesize(self, text: str, voice: VoiceParams | None = None) -> SynthesisResult:
        """Synthesize text to audio (generates tone).

        The tone duration is proportional to text length.
        """
        with self._lock:
            self._call_count += 1
            self._synthesized_texts.append(text)
            gate = self._gate
            failure = self._failures.get(text)

        start_time = time.time()

        if gate is not None:
            gate.wait()
        if self._latency_ms:
            time.sleep(self._latency_ms / 1000)

        if failure is not None:
            raise failure

        # Roughly 100ms per word
        duration_ms = max(100, len(text.split()) * 100)
        audio = self._generate_tone(440, duration_ms)

        return SynthesisResult(
            audio=audio,
            sample_rate=self._sample_rate,
            duration_ms=duration_ms,
            latency_ms=int((time.time() - start_time) * 1000),
        )

    def _generate_tone(self, frequency: int, duration_ms: int) -> bytes:
        """Generate a simple sine wave tone."""
        num_samples = int(self._sample_rate * duration_ms / 1000)
        return b"".join(
            struct.pack(
                "<h", int(32767 * 0.3 * math.sin(2 * math.pi * frequency * i / self._sample_rate))
            )
            for i in range(num_samples)
        )

    def fail_on(self, text: str, error: SynthesisError) -> None:
        """Raise error whenever text is synthesized."""
        with self._lock:
            self._failures[text] = error

    def hold(self) -> threading.Event:
        """Block every synthesis call until the returned event is set."""
        with self._lock:
            self._gate = threading.Event()
            return self._gate

    def release(self) -> None:
        """Let held synthesis calls complete."""
        with self._lock:
            gate, self._gate = self._gate, None
        if gate is not None:
            gate.set()

    def set_latency(self, latency_ms: int) -> None:
        """Set simulated latency."""
        self._latency_ms = latency_ms

    @property
    def sample_rate(self) -> int:
        """Get output sample rate."""
        return self._sample_rate

    @property
    def call_count(self) -> int:
        """Get number of synthesize calls."""
        return self._call_count

    @property
    def synthesized_texts(self) -> list[str]:
        """Get list of synthesized texts."""
        with self._lock:
            return self._synthesized_texts.copy()

    def clear(self) -> None:
        """Reset mock state."""
        with self._lock:
            self._call_count = 0
            self._synthesized_texts.clear()
            self._failures.clear()


__all__ = ["MockSynthesizer"]
