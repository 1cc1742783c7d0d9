"""Motivational quotes: model, playback loop and audio pre-caching."""

from .loop import QuotePlaybackLoop, run_inline, spawn_thread
from .models import MAX_QUOTES, Quote, QuoteSource, StaticQuoteSource
from .precache import PrecacheResult, precache_quotes

__all__ = [
    "MAX_QUOTES",
    "PrecacheResult",
    "Quote",
    "QuotePlaybackLoop",
    "QuoteSource",
    "StaticQuoteSource",
    "precache_quotes",
    "run_inline",
    "spawn_thread",
]
