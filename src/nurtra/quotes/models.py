"""Quote data model."""

import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

MAX_QUOTES = 30


@dataclass(frozen=True)
class Quote:
    """A motivational quote belonging to one user.

    Attributes:
        id: Identifier, unique within the user's quote set.
        text: Quote text that is displayed and spoken.
        order: Position the quote was generated at (1-based).
        created_at: When the quote set was generated.
    """

    id: str
    text: str
    order: int
    created_at: datetime


class QuoteSource(Protocol):
    """Provides the current user's quotes for a craving session."""

    def fetch_quotes(self) -> list[Quote]:
        """Return the user's quotes, already shuffled for this session.

        Raises:
            StorageError: If the quotes cannot be read.
        """
        ...


class StaticQuoteSource:
    """QuoteSource over a fixed list of texts, for tests and offline runs."""

    def __init__(
        self,
        texts: list[str],
        shuffle: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        created_at = datetime.now(UTC)
        self._quotes = [
            Quote(id=str(order), text=text, order=order, created_at=created_at)
            for order, text in enumerate(texts[:MAX_QUOTES], start=1)
        ]
        self._shuffle = shuffle
        self._rng = rng or random.Random()

    def fetch_quotes(self) -> list[Quote]:
        quotes = list(self._quotes)
        if self._shuffle:
            self._rng.shuffle(quotes)
        return quotes


__all__ = ["MAX_QUOTES", "Quote", "QuoteSource", "StaticQuoteSource"]
