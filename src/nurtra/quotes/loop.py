"""Self-rescheduling playback loop over a user's quotes.

The loop plays one quote at a time and only moves on when the playback sink
reports completion, wrapping back to the first quote after the last one.
Audio comes from the speech cache when possible and is otherwise synthesized
and written through to the cache.

Every continuation (audio resolved, clip finished, skip after failure)
carries the generation it was scheduled under. It does nothing unless the
loop is still active under that same generation, so work that was in flight
when ``stop()`` ran can never play audio or advance the index.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from functools import partial

from ..audio.playback import AudioPlayback
from ..tts.cache import CacheMissError, SpeechCache
from ..tts.errors import EncodingFailedError, SynthesisError
from ..tts.synthesizer import LOADING_PLACEHOLDER, Synthesizer, VoiceParams, is_speakable
from .models import Quote

logger = logging.getLogger(__name__)

Dispatch = Callable[[Callable[[], None]], None]


def spawn_thread(work: Callable[[], None]) -> None:
    """Run work on a new daemon thread."""
    threading.Thread(target=work, daemon=True, name="nurtra-quote-audio").start()


def run_inline(work: Callable[[], None]) -> None:
    """Run work on the calling thread."""
    work()


class QuotePlaybackLoop:
    """Plays quotes back to back until stopped.

    Usage:
        loop = QuotePlaybackLoop(synthesizer, cache, playback)
        loop.start(quotes)
        ...
        loop.stop()
    """

    def __init__(
        self,
        synthesizer: Synthesizer,
        cache: SpeechCache,
        playback: AudioPlayback,
        voice: VoiceParams | None = None,
        dispatch: Dispatch = spawn_thread,
        skip_delay: float = 1.0,
        retry_delay: float = 5.0,
    ) -> None:
        """Initialize the loop.

        Args:
            synthesizer: Synthesizes audio on a cache miss.
            cache: Speech cache read before and written after synthesis.
            playback: Sink that plays one clip and reports completion.
            voice: Voice parameters for synthesis.
            dispatch: Runs audio resolution off the caller's thread.
            skip_delay: Seconds to wait before moving past a failed quote.
            retry_delay: Seconds to wait after a full pass in which no quote
                could be played, before trying the list again.

        Raises:
            ValueError: If retry_delay is not positive.
        """
        if retry_delay <= 0:
            raise ValueError(f"retry_delay must be positive, got {retry_delay}")

        self._synthesizer = synthesizer
        self._cache = cache
        self._playback = playback
        self._voice = voice
        self._dispatch = dispatch
        self._skip_delay = skip_delay
        self._retry_delay = retry_delay

        self._lock = threading.RLock()
        self._quotes: list[Quote] = []
        self._index = 0
        self._active = False
        self._generation = 0
        self._stopped = threading.Event()
        self._completed_plays = 0
        self._failed_in_row = 0

    @property
    def is_active(self) -> bool:
        """Return True while the loop is running."""
        return self._active

    @property
    def current_index(self) -> int:
        """Index of the quote playing or about to play."""
        return self._index

    @property
    def current_quote(self) -> str:
        """Text of the current quote, or the loading placeholder."""
        with self._lock:
            if not self._quotes:
                return LOADING_PLACEHOLDER
            return self._quotes[self._index].text

    @property
    def voice(self) -> VoiceParams | None:
        """Voice parameters used for synthesis."""
        return self._voice

    @property
    def completed_plays(self) -> int:
        """Number of clips that finished since the last start."""
        return self._completed_plays

    def start(self, quotes: Iterable[Quote]) -> bool:
        """Begin looping over quotes from the first one.

        A loop that is already running is replaced.

        Returns:
            False if quotes is empty and nothing was started.
        """
        quotes = list(quotes)
        if not quotes:
            logger.debug("No quotes to play, loop not started")
            return False

        with self._lock:
            if self._active:
                logger.info("Restarting quote loop with a new quote set")
                self._stopped.set()
            self._quotes = quotes
            self._index = 0
            self._completed_plays = 0
            self._failed_in_row = 0
            self._active = True
            self._generation += 1
            self._stopped = threading.Event()
            generation = self._generation

        logger.info(f"Quote loop started with {len(quotes)} quotes")
        self._play_current(generation)
        return True

    def stop(self) -> None:
        """Deactivate the loop and halt any clip that is playing.

        The flag flips under the loop lock first, then the sink is forced to
        stop, which also drops its pending completion callback.
        """
        with self._lock:
            was_active = self._active
            self._active = False
            self._generation += 1
            self._stopped.set()

        self._playback.stop()

        if was_active:
            logger.info("Quote loop stopped")

    def _is_current(self, generation: int) -> bool:
        return self._active and generation == self._generation

    def _play_current(self, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                logger.debug("Quote loop no longer active, not scheduling")
                return
            quote = self._quotes[self._index]

        self._dispatch(partial(self._resolve_and_play, generation, quote))

    def _resolve_and_play(self, generation: int, quote: Quote) -> None:
        try:
            audio, sample_rate = self._resolve_audio(quote.text)
        except SynthesisError as e:
            logger.warning(f"Skipping quote {quote.id}: {e}")
            self._skip(generation)
            return
        except Exception:
            logger.exception(f"Unexpected error resolving audio for quote {quote.id}")
            self._skip(generation)
            return

        with self._lock:
            if not self._is_current(generation):
                logger.debug(f"Discarding audio for quote {quote.id}, loop stopped meanwhile")
                return
            try:
                self._playback.play(
                    audio, sample_rate, on_finished=partial(self._on_finished, generation)
                )
                self._failed_in_row = 0
                logger.debug(f"Playing quote {quote.id}: '{quote.text[:40]}'")
                return
            except Exception as e:
                logger.error(f"Failed to start playback of quote {quote.id}: {e}")

        self._skip(generation)

    def _resolve_audio(self, text: str) -> tuple[bytes, int]:
        if not is_speakable(text):
            raise EncodingFailedError("Invalid text for speech synthesis")

        if self._cache.has(text):
            try:
                return self._cache.load(text), self._synthesizer.sample_rate
            except (CacheMissError, OSError) as e:
                logger.warning(f"Cached audio unreadable, synthesizing again: {e}")

        result = self._synthesizer.synthesize(text, self._voice)

        try:
            self._cache.store(text, result.audio)
        except OSError as e:
            logger.warning(f"Failed to cache synthesized audio: {e}")

        return result.audio, result.sample_rate

    def _skip(self, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            stopped = self._stopped
            self._failed_in_row += 1
            pass_failed = self._failed_in_row >= len(self._quotes)
            if pass_failed:
                self._failed_in_row = 0

        if pass_failed:
            logger.warning(
                f"No quote could be played, retrying in {self._retry_delay:.1f}s"
            )
            delay = self._retry_delay
        else:
            delay = self._skip_delay
        if delay > 0 and stopped.wait(delay):
            return
        self._advance(generation, played=False)

    def _on_finished(self, generation: int) -> None:
        self._advance(generation, played=True)

    def _advance(self, generation: int, played: bool) -> None:
        with self._lock:
            if not self._is_current(generation):
                logger.debug("Quote loop inactive, not advancing")
                return
            if played:
                self._completed_plays += 1
            self._index = (self._index + 1) % len(self._quotes)

        self._play_current(generation)


__all__ = ["Dispatch", "QuotePlaybackLoop", "run_inline", "spawn_thread"]
