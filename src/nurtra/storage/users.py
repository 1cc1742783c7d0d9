"""User-scoped repositories.

Each user has one document in ``users`` keyed by user ID, holding the timer
record, the generated quotes and account counters. Completed binge-free
periods live in their own collection, tagged with the user ID.

Writes to the user document merge: only the named fields change.
"""

import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from ..quotes.models import MAX_QUOTES, Quote
from ..timer.models import BingeFreePeriod, TimerRecord, ensure_aware
from .client import retry_on_connection_failure
from .errors import NotAuthenticatedError
from .identity import IdentityProvider

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
PERIODS_COLLECTION = "bingeFreePeriods"


class UserScopedRepository:
    """Base for repositories that act on the signed-in user's data."""

    COLLECTION_NAME = USERS_COLLECTION

    def __init__(self, database: Database[dict[str, Any]], identity: IdentityProvider) -> None:
        """Initialize repository.

        Args:
            database: MongoDB database.
            identity: Source of the current user ID.
        """
        self._collection: Collection[dict[str, Any]] = database[self.COLLECTION_NAME]
        self._identity = identity

    def _require_user(self) -> str:
        user_id = self._identity.current_user_id
        if not user_id:
            raise NotAuthenticatedError()
        return user_id

    def _user_document(self, user_id: str) -> dict[str, Any]:
        return self._collection.find_one({"_id": user_id}) or {}

    def _merge(
        self,
        user_id: str,
        fields: dict[str, Any],
        remove: tuple[str, ...] = (),
    ) -> None:
        update: dict[str, Any] = {"$set": fields}
        if remove:
            update["$unset"] = {name: "" for name in remove}
        self._collection.update_one({"_id": user_id}, update, upsert=True)


class TimerRepository(UserScopedRepository):
    """Timer record fields of the user document."""

    @retry_on_connection_failure()
    def save_start(self, start_time: datetime) -> None:
        user_id = self._require_user()
        self._merge(
            user_id,
            {
                "timerStartTime": start_time,
                "timerIsRunning": True,
                "timerLastUpdated": datetime.now(UTC),
            },
            remove=("timerStopTime",),
        )
        logger.debug(f"Saved timer start for {user_id}")

    @retry_on_connection_failure()
    def save_stop(self, stop_time: datetime) -> None:
        user_id = self._require_user()
        self._merge(
            user_id,
            {
                "timerIsRunning": False,
                "timerStopTime": stop_time,
                "timerLastUpdated": datetime.now(UTC),
            },
        )
        logger.debug(f"Saved timer stop for {user_id}")

    @retry_on_connection_failure()
    def clear(self) -> None:
        user_id = self._require_user()
        self._merge(
            user_id,
            {"timerIsRunning": False, "timerLastUpdated": datetime.now(UTC)},
            remove=("timerStartTime", "timerStopTime"),
        )
        logger.debug(f"Cleared timer for {user_id}")

    @retry_on_connection_failure()
    def fetch(self) -> TimerRecord | None:
        user_id = self._require_user()
        return TimerRecord.from_dict(self._user_document(user_id))


class PeriodRepository(UserScopedRepository):
    """Completed binge-free periods, newest first."""

    COLLECTION_NAME = PERIODS_COLLECTION

    def __init__(self, database: Database[dict[str, Any]], identity: IdentityProvider) -> None:
        super().__init__(database, identity)
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("userId", 1), ("createdAt", DESCENDING)])

    @retry_on_connection_failure()
    def append_period(self, period: BingeFreePeriod) -> str:
        """Store a completed period.

        Returns:
            The generated document ID.
        """
        user_id = self._require_user()
        doc = period.to_dict()
        doc["userId"] = user_id
        result = self._collection.insert_one(doc)
        logger.info(f"Logged binge-free period of {period.duration:.0f}s")
        return str(result.inserted_id)

    @retry_on_connection_failure()
    def recent_periods(self, limit: int = 3) -> list[BingeFreePeriod]:
        """Get the user's most recent periods.

        Documents missing a field are skipped.
        """
        user_id = self._require_user()
        cursor = (
            self._collection.find({"userId": user_id})
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        periods = [BingeFreePeriod.from_dict(doc) for doc in cursor]
        return [p for p in periods if p is not None]


class QuoteRepository(UserScopedRepository):
    """Generated motivational quotes, stored as a numbered map."""

    def __init__(
        self,
        database: Database[dict[str, Any]],
        identity: IdentityProvider,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(database, identity)
        self._rng = rng or random.Random()

    @retry_on_connection_failure()
    def save_quotes(self, texts: list[str]) -> int:
        """Replace the user's quotes.

        Only the first MAX_QUOTES texts are kept.

        Returns:
            Number of quotes saved.
        """
        user_id = self._require_user()
        kept = texts[:MAX_QUOTES]
        numbered = {str(i): text for i, text in enumerate(kept, start=1)}
        self._merge(
            user_id,
            {
                "motivationalQuotes": numbered,
                "motivationalQuotesGeneratedAt": datetime.now(UTC),
            },
        )
        logger.info(f"Saved {len(kept)} motivational quotes")
        return len(kept)

    @retry_on_connection_failure()
    def get_quotes(self) -> list[Quote]:
        """Get the user's quotes in generated order."""
        user_id = self._require_user()
        doc = self._user_document(user_id)
        numbered = doc.get("motivationalQuotes")
        generated_at = doc.get("motivationalQuotesGeneratedAt")
        if not isinstance(numbered, dict) or not isinstance(generated_at, datetime):
            return []

        generated_at = ensure_aware(generated_at)
        quotes = []
        for order in range(1, MAX_QUOTES + 1):
            text = numbered.get(str(order))
            if isinstance(text, str):
                quotes.append(
                    Quote(id=str(order), text=text, order=order, created_at=generated_at)
                )
        return quotes

    def fetch_quotes(self) -> list[Quote]:
        """Get the user's quotes shuffled for a new session."""
        quotes = self.get_quotes()
        self._rng.shuffle(quotes)
        return quotes


class AccountRepository(UserScopedRepository):
    """Account counters and flags on the user document."""

    @retry_on_connection_failure()
    def get_overcome_count(self) -> int:
        user_id = self._require_user()
        count = self._user_document(user_id).get("overcomeCount", 0)
        return count if isinstance(count, int) else 0

    @retry_on_connection_failure()
    def increment_overcome_count(self) -> int:
        """Atomically add one overcome craving.

        Returns:
            The new count.
        """
        user_id = self._require_user()
        doc = self._collection.find_one_and_update(
            {"_id": user_id},
            {"$inc": {"overcomeCount": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        count = int(doc["overcomeCount"]) if doc else 1
        logger.info(f"Overcome count is now {count}")
        return count

    @retry_on_connection_failure()
    def is_first_binge_survey_completed(self) -> bool:
        user_id = self._require_user()
        return bool(self._user_document(user_id).get("firstBingeSurveyCompleted", False))

    @retry_on_connection_failure()
    def mark_first_binge_survey_completed(self) -> None:
        user_id = self._require_user()
        self._merge(
            user_id,
            {
                "firstBingeSurveyCompleted": True,
                "firstBingeSurveyCompletedAt": datetime.now(UTC),
            },
        )


@dataclass
class UserRepositories:
    """All repositories for the signed-in user."""

    timer: TimerRepository
    periods: PeriodRepository
    quotes: QuoteRepository
    account: AccountRepository

    @classmethod
    def from_database(
        cls, database: Database[dict[str, Any]], identity: IdentityProvider
    ) -> "UserRepositories":
        return cls(
            timer=TimerRepository(database, identity),
            periods=PeriodRepository(database, identity),
            quotes=QuoteRepository(database, identity),
            account=AccountRepository(database, identity),
        )


__all__ = [
    "PERIODS_COLLECTION",
    "USERS_COLLECTION",
    "AccountRepository",
    "PeriodRepository",
    "QuoteRepository",
    "TimerRepository",
    "UserRepositories",
    "UserScopedRepository",
]
