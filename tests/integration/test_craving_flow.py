"""Integration tests for a full craving session with mocked components.

Runs the app as wired from the test profile: in-memory stores, mock
speech, mock audio that finishes each clip after a second and the mock
restriction platform.
"""

import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from nurtra.config import NurtraConfig
from nurtra.config.loader import load_config
from nurtra.restriction import RestrictionSelection
from nurtra.session import ExitReason, NurtraApp
from nurtra.session.app import OFFLINE_QUOTES, USER_ID_ENV_VAR
from nurtra.timer import TimerState

SELECTION = RestrictionSelection(applications=frozenset({"app.delivery"}))


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll predicate until it holds or timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


@pytest.fixture
def config(tmp_path: Path) -> NurtraConfig:
    config = load_config(profile="test")
    config.cache.directory = str(tmp_path / "speech")
    config.restriction.state_path = str(tmp_path / "state.json")
    return config


@pytest.fixture
def app(config: NurtraConfig, monkeypatch: pytest.MonkeyPatch) -> Iterator[NurtraApp]:
    monkeypatch.delenv(USER_ID_ENV_VAR, raising=False)
    app = NurtraApp.from_config(config, use_mocks=True)
    yield app
    app.shutdown()


class TestAppWiring:
    """Tests for building the app from configuration."""

    def test_mock_wiring(self, app: NurtraApp) -> None:
        assert app.storage is None
        assert app.identity.current_user_id == "test-user"
        assert app.timer.state is TimerState.IDLE
        assert not app.session.is_active

    def test_explicit_user_wins(self, config: NurtraConfig) -> None:
        app = NurtraApp.from_config(config, use_mocks=True, user_id="someone")
        assert app.identity.current_user_id == "someone"
        app.shutdown()

    def test_start_without_stored_state(self, app: NurtraApp) -> None:
        app.start()

        assert app.timer.state is TimerState.IDLE
        assert app.account.overcome_count == 0
        assert not app.gate.is_locked


class TestCravingFlow:
    """End-to-end craving sessions."""

    def test_overcome_flow(self, app: NurtraApp) -> None:
        app.gate.save_selection(SELECTION)
        app.start()
        app.timer.start_timer().result(timeout=2)

        assert app.session.enter()
        assert app.gate.is_locked
        assert wait_for(lambda: app.playback.play_count >= 1)
        assert app.session.current_quote in OFFLINE_QUOTES
        assert app.cache.has(app.session.current_quote)

        outcome = app.session.exit(ExitReason.OVERCAME)

        assert outcome is not None
        assert outcome.result(timeout=2) == 1
        assert app.account.overcome_count == 1
        assert not app.gate.is_locked
        assert app.timer.is_running

    def test_relapse_flow(self, app: NurtraApp) -> None:
        app.start()
        app.timer.start_timer().result(timeout=2)
        app.session.enter()
        assert wait_for(lambda: app.playback.play_count >= 1)

        outcome = app.session.exit(ExitReason.RELAPSED)

        assert outcome is not None
        period = outcome.result(timeout=2)
        assert app.timer.state is TimerState.STOPPED
        assert period == app.timer.last_period
        assert period is not None
        assert period.id is not None
        assert period.duration >= 0
        assert app.account.overcome_count == 0

    def test_quotes_keep_playing_until_exit(self, app: NurtraApp) -> None:
        app.session.enter()

        assert wait_for(lambda: app.playback.play_count >= 2)
        app.session.exit(ExitReason.OVERCAME)
        played = app.playback.play_count
        time.sleep(1.3)

        assert app.playback.play_count == played
        assert not app.loop.is_active

    def test_reentry_after_exit(self, app: NurtraApp) -> None:
        app.session.enter()
        app.session.exit(ExitReason.OVERCAME)

        assert app.session.enter()
        assert wait_for(lambda: app.loop.is_active)
        app.session.exit(ExitReason.OVERCAME)

        assert wait_for(lambda: app.account.overcome_count == 2)


class TestRestartRecovery:
    """Tests for restoring state after the app restarts."""

    def test_lock_reapplied_on_start(self, config: NurtraConfig) -> None:
        first = NurtraApp.from_config(config, use_mocks=True)
        first.gate.save_selection(SELECTION)
        first.session.enter()
        assert first.gate.is_locked
        # Process dies without exiting the session
        first.loop.stop()

        second = NurtraApp.from_config(config, use_mocks=True)
        second.start()

        assert second.gate.is_locked
        second.session.enter()
        second.session.exit(ExitReason.RELAPSED)
        assert not second.gate.is_locked

        first.shutdown()
        second.shutdown()
