"""Wiring of all session components from configuration."""

import logging
import os
from dataclasses import dataclass

from ..account.status import AccountStatus, AccountStore, InMemoryAccountStore
from ..audio import create_audio_playback
from ..audio.playback import AudioPlayback
from ..config import NurtraConfig
from ..quotes.loop import QuotePlaybackLoop
from ..quotes.models import QuoteSource, StaticQuoteSource
from ..restriction import create_restriction_gate
from ..restriction.gate import AppRestrictionGate
from ..storage import UserRepositories, create_storage_client
from ..storage.client import MongoStorageClient
from ..storage.identity import StaticIdentityProvider
from ..timer import create_timer_controller
from ..timer.controller import SessionTimerController
from ..timer.store import InMemoryTimerStore, PeriodLog, TimerStore
from ..tts import create_synthesizer, voice_params_from_config
from ..tts.cache import SpeechCache
from ..tts.synthesizer import Synthesizer
from .controller import CravingSessionController

logger = logging.getLogger(__name__)

USER_ID_ENV_VAR = "NURTRA_USER_ID"

OFFLINE_QUOTES = [
    "This urge is a wave. Let it rise, let it pass.",
    "You have made it through every craving so far.",
    "Breathe in slowly. You are in control of your next choice.",
    "Feelings are not commands. You can notice this one and let it go.",
    "The person you are becoming is worth this moment of discomfort.",
]


@dataclass
class NurtraApp:
    """All components of a running app, built once at start-up."""

    identity: StaticIdentityProvider
    synthesizer: Synthesizer
    cache: SpeechCache
    playback: AudioPlayback
    loop: QuotePlaybackLoop
    timer: SessionTimerController
    gate: AppRestrictionGate
    quotes: QuoteSource
    account: AccountStatus
    session: CravingSessionController
    storage: MongoStorageClient | None = None

    @classmethod
    def from_config(
        cls,
        config: NurtraConfig,
        use_mocks: bool = False,
        user_id: str | None = None,
    ) -> "NurtraApp":
        """Build the app from configuration.

        Args:
            config: Loaded configuration.
            use_mocks: Use in-memory stores, mock synthesis, mock audio and
                the mock restriction platform.
            user_id: Signed-in user. Falls back to NURTRA_USER_ID, then to
                the testing user from configuration.

        Returns:
            Wired NurtraApp. Storage is connected unless mocks are used.

        Raises:
            StorageError: If MongoDB cannot be reached.
        """
        identity = StaticIdentityProvider(
            user_id or os.environ.get(USER_ID_ENV_VAR) or config.testing.user_id
        )
        if identity.current_user_id is None:
            logger.warning("No user configured, stored data is unavailable")

        storage: MongoStorageClient | None = None
        timer_store: TimerStore
        periods: PeriodLog
        quotes: QuoteSource
        account_store: AccountStore

        if use_mocks:
            in_memory = InMemoryTimerStore()
            timer_store = periods = in_memory
            quotes = StaticQuoteSource(OFFLINE_QUOTES)
            account_store = InMemoryAccountStore()
        else:
            storage = create_storage_client(config.storage)
            storage.connect()
            repositories = UserRepositories.from_database(storage.database, identity)
            timer_store = repositories.timer
            periods = repositories.periods
            quotes = repositories.quotes
            account_store = repositories.account

        synthesizer = create_synthesizer(config.tts, use_mock=use_mocks)
        playback = create_audio_playback(config.audio, use_mock=use_mocks)
        cache = SpeechCache(config.cache.directory, suffix=config.cache.suffix)
        loop = QuotePlaybackLoop(
            synthesizer,
            cache,
            playback,
            voice=voice_params_from_config(config.tts),
            skip_delay=config.quotes.skip_delay_seconds,
            retry_delay=config.quotes.retry_delay_seconds,
        )
        timer = create_timer_controller(timer_store, periods, config.timer)
        gate = create_restriction_gate(config.restriction, use_mock=use_mocks)
        account = AccountStatus(account_store, identity)
        session = CravingSessionController(
            loop=loop,
            playback=playback,
            timer=timer,
            gate=gate,
            quotes=quotes,
            account=account,
        )

        return cls(
            identity=identity,
            synthesizer=synthesizer,
            cache=cache,
            playback=playback,
            loop=loop,
            timer=timer,
            gate=gate,
            quotes=quotes,
            account=account,
            session=session,
            storage=storage,
        )

    def start(self) -> None:
        """Restore persisted state after a restart."""
        self.gate.reconcile()
        self.timer.fetch_and_resume()
        self.account.fetch_overcome_count()

    def shutdown(self) -> None:
        """Stop audio, flush pending writes and disconnect."""
        self.loop.stop()
        self.timer.shutdown()
        if self.storage is not None:
            self.storage.disconnect()


__all__ = ["OFFLINE_QUOTES", "USER_ID_ENV_VAR", "NurtraApp"]
