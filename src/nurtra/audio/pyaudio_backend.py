"""PyAudio playback backend.

Plays 16-bit mono PCM on a background thread and reports completion
through the callback given to ``play``.
"""

import logging
import threading
from typing import Any

from .playback import OnFinished

logger = logging.getLogger(__name__)

# PyAudio needs the PortAudio system library and is an optional extra
PYAUDIO_AVAILABLE = False
try:
    import pyaudio

    PYAUDIO_AVAILABLE = True
except ImportError:
    pyaudio = None

CHUNK_FRAMES = 1024


class PyAudioPlayback:
    """Audio playback using PyAudio.

    Implements the AudioPlayback protocol.
    """

    def __init__(
        self,
        device_name: str = "default",
        sample_rate: int = 22050,
    ) -> None:
        """Initialize PyAudio playback.

        Args:
            device_name: Audio output device name or "default"
            sample_rate: Default output sample rate in Hz

        Raises:
            RuntimeError: If PyAudio is not available
        """
        if not PYAUDIO_AVAILABLE:
            raise RuntimeError("PyAudio not available. Install with: pip install 'nurtra[audio]'")

        self._device_name = device_name
        self._sample_rate = sample_rate
        self._lock = threading.Lock()
        self._generation = 0
        self._stop_flag = threading.Event()
        self._on_finished: OnFinished | None = None
        self._play_thread: threading.Thread | None = None
        self._is_playing = False

    def _get_device_index(self, pa: Any) -> int | None:
        """Get device index for configured device name."""
        if self._device_name == "default":
            return None

        for i in range(pa.get_device_count()):
            info = pa.get_device_info_by_index(i)
            if self._device_name.lower() in info["name"].lower() and info["maxOutputChannels"] > 0:
                return i

        return None

    def play(
        self,
        audio: bytes,
        sample_rate: int,
        on_finished: OnFinished | None = None,
    ) -> None:
        """Start playing audio in a background thread."""
        with self._lock:
            self._stop_flag.set()
            self._generation += 1
            generation = self._generation
            stop_flag = threading.Event()
            self._stop_flag = stop_flag
            self._on_finished = on_finished
            self._is_playing = True
            self._play_thread = threading.Thread(
                target=self._play_worker,
                args=(audio, sample_rate, generation, stop_flag),
                daemon=True,
                name="nurtra-playback",
            )
            self._play_thread.start()

    def _play_worker(
        self,
        audio: bytes,
        sample_rate: int,
        generation: int,
        stop_flag: threading.Event,
    ) -> None:
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
                for i in range(0, len(audio), CHUNK_FRAMES * 2):
                    if stop_flag.is_set():
                        break
                    stream.write(audio[i : i + CHUNK_FRAMES * 2])
            finally:
                stream.stop_stream()
                stream.close()
        except Exception as e:
            # A clip that cannot play still counts as finished so the caller advances
            logger.error(f"Audio playback failed: {e}")
        finally:
            pa.terminate()
            self._finish(generation, stop_flag)

    def _finish(self, generation: int, stop_flag: threading.Event) -> None:
        with self._lock:
            if generation != self._generation or stop_flag.is_set():
                return
            callback, self._on_finished = self._on_finished, None
            self._is_playing = False

        if callback is not None:
            callback()

    def stop(self) -> None:
        """Stop current playback and drop its completion callback."""
        with self._lock:
            self._generation += 1
            self._on_finished = None
            self._stop_flag.set()
            thread, self._play_thread = self._play_thread, None
            self._is_playing = False

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    @property
    def is_playing(self) -> bool:
        """Return True if audio is playing."""
        return self._is_playing

    @property
    def sample_rate(self) -> int:
        """Get output sample rate."""
        return self._sample_rate


__all__ = ["PYAUDIO_AVAILABLE", "PyAudioPlayback"]
