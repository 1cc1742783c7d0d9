"""Pre-caching of quote audio.

Run after a quote set is generated so the first craving session plays
straight from the speech cache.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..tts.cache import SpeechCache
from ..tts.errors import SynthesisError
from ..tts.synthesizer import Synthesizer, VoiceParams, is_speakable

logger = logging.getLogger(__name__)


@dataclass
class PrecacheResult:
    """Outcome of a pre-caching run.

    Attributes:
        cached: Quotes synthesized and written to the cache.
        skipped: Quotes already cached or not speakable.
        failed: Quotes whose synthesis or cache write failed.
    """

    cached: int = 0
    skipped: int = 0
    failed: int = 0


def precache_quotes(
    texts: Iterable[str],
    synthesizer: Synthesizer,
    cache: SpeechCache,
    voice: VoiceParams | None = None,
) -> PrecacheResult:
    """Synthesize and cache every quote that is not cached yet.

    Failures are logged and counted; they never stop the run.

    Args:
        texts: Quote texts to cache.
        synthesizer: Synthesizer used on a cache miss.
        cache: Destination cache.
        voice: Voice parameters for synthesis.

    Returns:
        Counts of cached, skipped and failed quotes.
    """
    result = PrecacheResult()

    for text in texts:
        if not is_speakable(text) or cache.has(text):
            result.skipped += 1
            continue

        try:
            synthesis = synthesizer.synthesize(text, voice)
            cache.store(text, synthesis.audio)
        except SynthesisError as e:
            logger.warning(f"Pre-cache synthesis failed for '{text[:30]}...': {e}")
            result.failed += 1
            continue
        except OSError as e:
            logger.warning(f"Pre-cache write failed for '{text[:30]}...': {e}")
            result.failed += 1
            continue

        result.cached += 1

    logger.info(
        f"Pre-cached quote audio: {result.cached} new, "
        f"{result.skipped} skipped, {result.failed} failed"
    )
    return result


__all__ = ["PrecacheResult", "precache_quotes"]
