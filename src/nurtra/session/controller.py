"""Craving session controller.

Entry locks the user's distracting apps and starts looping motivational
quotes. Exit stops the audio, unlocks the apps and records the outcome:
a relapse stops and logs the binge-free timer, overcoming a craving bumps
the overcome count.
"""

import logging
import threading
from concurrent.futures import Future
from enum import Enum
from functools import partial

from ..account.status import AccountStatus
from ..audio.playback import AudioPlayback
from ..quotes.loop import Dispatch, QuotePlaybackLoop, spawn_thread
from ..quotes.models import QuoteSource
from ..restriction.gate import AppRestrictionGate
from ..timer.controller import SessionTimerController
from ..timer.models import BingeFreePeriod

logger = logging.getLogger(__name__)


class ExitReason(Enum):
    """How a craving session ended."""

    RELAPSED = "relapsed"
    OVERCAME = "overcame"


class CravingSessionController:
    """Entry and exit lifecycle of a craving-intervention session.

    The active flag is checked and set under one lock, so an exit followed
    quickly by a new entry cannot leave two quote loops running.
    """

    def __init__(
        self,
        loop: QuotePlaybackLoop,
        playback: AudioPlayback,
        timer: SessionTimerController,
        gate: AppRestrictionGate,
        quotes: QuoteSource,
        account: AccountStatus,
        dispatch: Dispatch = spawn_thread,
    ) -> None:
        """Initialize the controller.

        Args:
            loop: Quote playback loop started on entry.
            playback: Sink force-stopped on exit.
            timer: Binge-free timer stopped and logged on relapse.
            gate: Restriction gate locked on entry, unlocked on exit.
            quotes: Source of the user's quotes.
            account: Account status updated when a craving is overcome.
            dispatch: Runs quote fetching and store updates off the caller.
        """
        self._loop = loop
        self._playback = playback
        self._timer = timer
        self._gate = gate
        self._quotes = quotes
        self._account = account
        self._dispatch = dispatch

        self._lock = threading.RLock()
        self._active = False
        self._generation = 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def current_quote(self) -> str:
        """Quote being spoken, or the loading placeholder."""
        return self._loop.current_quote

    def enter(self) -> bool:
        """Start a craving session.

        Returns:
            False if a session is already active.
        """
        with self._lock:
            if self._active:
                logger.warning("Craving session already active, entry ignored")
                return False
            self._active = True
            self._generation += 1
            generation = self._generation

        logger.info("Craving session started")
        self._gate.auto_lock()
        self._dispatch(partial(self._load_and_play, generation))
        return True

    def exit(self, reason: ExitReason) -> "Future[BingeFreePeriod | int | None] | None":
        """End the craving session and record its outcome.

        Audio is halted and apps are unlocked even when no session is
        active, so a repeated exit is harmless. Recording runs off the
        caller; wait on the returned future before reading the updated
        count or shutting storage down.

        Returns:
            Future resolving to the logged period on relapse or the new
            overcome count, or None if no session was active.
        """
        if not self._end():
            logger.debug("No active craving session, outcome not recorded")
            return None

        logger.info(f"Craving session ended: {reason.value}")
        if reason is ExitReason.RELAPSED:
            if self._timer.is_running:
                return self._timer.stop_timer_and_log_period()
            logger.info("Timer not running, no binge-free period to log")
            outcome: Future[BingeFreePeriod | int | None] = Future()
            outcome.set_result(None)
            return outcome

        outcome = Future()
        self._dispatch(partial(self._record_overcome, outcome))
        return outcome

    def abort(self) -> bool:
        """End the session without recording an outcome.

        Returns:
            True if an active session was ended.
        """
        was_active = self._end()
        if was_active:
            logger.info("Craving session aborted, nothing recorded")
        return was_active

    def _end(self) -> bool:
        with self._lock:
            was_active = self._active
            self._active = False
            self._generation += 1
            self._loop.stop()

        self._playback.stop()
        self._gate.auto_unlock()
        return was_active

    def _load_and_play(self, generation: int) -> None:
        try:
            quotes = self._quotes.fetch_quotes()
        except Exception as e:
            logger.error(f"Error fetching quotes: {e}")
            return

        if not quotes:
            logger.info("No quotes available for this session")
            return

        with self._lock:
            if not self._active or generation != self._generation:
                logger.debug("Craving session ended before quotes loaded")
                return
            self._loop.start(quotes)

    def _record_overcome(self, outcome: "Future[BingeFreePeriod | int | None]") -> None:
        try:
            count = self._account.increment_overcome_count()
        except Exception as e:
            logger.error(f"Error recording overcome craving: {e}")
            outcome.set_exception(e)
            return
        if count is not None:
            logger.info(f"Cravings overcome: {count}")
        outcome.set_result(count)


__all__ = ["CravingSessionController", "ExitReason"]
