"""Content-addressed on-disk cache of synthesized speech.

Each entry is keyed by the SHA-256 of the quote text, so the same text maps
to the same file in every process and pre-cached audio is reused later.
Entries are never rewritten and there is no eviction; ``clear`` is the only
way to remove them.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class CacheMissError(KeyError):
    """Raised when loading text that has no cached audio."""


class SpeechCache:
    """Maps quote text to previously synthesized audio bytes."""

    def __init__(self, directory: str | Path, suffix: str = ".pcm") -> None:
        """Initialize the cache.

        Args:
            directory: Cache directory, created if missing. ``~`` is expanded.
            suffix: File extension for cached clips.
        """
        self._directory = Path(directory).expanduser()
        self._directory.mkdir(parents=True, exist_ok=True)
        self._suffix = suffix

    @property
    def directory(self) -> Path:
        """Directory holding cached clips."""
        return self._directory

    @staticmethod
    def key(text: str) -> str:
        """Return the deterministic cache key for text."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def path_for(self, text: str) -> Path:
        """Return the file path the audio for text lives at."""
        return self._directory / f"{self.key(text)}{self._suffix}"

    def has(self, text: str) -> bool:
        """Return True if audio for text is cached."""
        return self.path_for(text).is_file()

    def store(self, text: str, audio: bytes) -> Path:
        """Write audio for text.

        The file is written to a temporary name and renamed into place so a
        reader never sees a partial clip.

        Returns:
            Path of the cached clip.
        """
        path = self.path_for(text)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(audio)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached {len(audio)} bytes for '{text[:30]}...' at {path.name}")
        return path

    def load(self, text: str) -> bytes:
        """Read cached audio for text.

        Raises:
            CacheMissError: If no audio is cached for text.
        """
        path = self.path_for(text)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise CacheMissError(text) from e

    def clear(self) -> int:
        """Delete every cached clip.

        Returns:
            Number of clips removed.
        """
        removed = 0
        for path in self._directory.glob(f"*{self._suffix}"):
            path.unlink(missing_ok=True)
            removed += 1
        logger.info(f"Cleared {removed} cached speech clips from {self._directory}")
        return removed

    def __len__(self) -> int:
        return sum(1 for _ in self._directory.glob(f"*{self._suffix}"))


__all__ = ["CacheMissError", "SpeechCache"]
