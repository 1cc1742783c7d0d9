"""Unit tests for the session timer controller."""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from nurtra.config import TimerConfig
from nurtra.timer import (
    ElapsedTimer,
    InMemoryTimerStore,
    SessionTimerController,
    TimerRecord,
    TimerState,
    create_timer_controller,
)

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryTimerStore:
    return InMemoryTimerStore()


@pytest.fixture
def presence() -> MagicMock:
    return MagicMock()


@pytest.fixture
def controller(
    store: InMemoryTimerStore, clock: FakeClock, presence: MagicMock
) -> Iterator[SessionTimerController]:
    controller = SessionTimerController(
        store,
        store,
        timer=ElapsedTimer(interval=60, clock=clock),
        presence=presence,
        clock=clock,
    )
    yield controller
    controller.shutdown()


class TestStartTimer:
    """Tests for starting a period."""

    def test_start_from_idle(
        self,
        controller: SessionTimerController,
        store: InMemoryTimerStore,
        presence: MagicMock,
    ) -> None:
        assert controller.state is TimerState.IDLE

        controller.start_timer().result(timeout=2)

        assert controller.is_running
        assert controller.started_at == T0
        assert controller.elapsed == 0.0
        assert store.fetch() == TimerRecord(start_time=T0, is_running=True)
        presence.start.assert_called_once_with(T0)

    def test_start_while_running_is_ignored(
        self, controller: SessionTimerController, clock: FakeClock, store: InMemoryTimerStore
    ) -> None:
        controller.start_timer().result(timeout=2)
        clock.advance(30)

        future = controller.start_timer()

        assert future.done()
        assert controller.started_at == T0
        assert store.fetch().start_time == T0

    def test_start_after_stop_begins_new_period(
        self, controller: SessionTimerController, clock: FakeClock
    ) -> None:
        controller.start_timer()
        clock.advance(10)
        controller.stop_timer_and_log_period().result(timeout=2)
        clock.advance(5)

        controller.start_timer().result(timeout=2)

        assert controller.is_running
        assert controller.started_at == T0 + timedelta(seconds=15)
        assert not controller.logged

    def test_start_persist_failure_keeps_local_state(
        self, controller: SessionTimerController, store: InMemoryTimerStore
    ) -> None:
        store.fail_writes = ConnectionError("offline")

        controller.start_timer().result(timeout=2)

        assert controller.is_running
        assert store.fetch() is None


class TestStopAndLog:
    """Tests for stopping and logging a period."""

    def test_duration_is_end_minus_start(
        self,
        controller: SessionTimerController,
        clock: FakeClock,
        store: InMemoryTimerStore,
        presence: MagicMock,
    ) -> None:
        controller.start_timer()
        clock.advance(3725.5)

        period = controller.stop_timer_and_log_period().result(timeout=2)

        assert period is not None
        assert period.start_time == T0
        assert period.end_time == T0 + timedelta(seconds=3725.5)
        assert period.duration == 3725.5
        assert period.id == "1"
        assert controller.state is TimerState.STOPPED
        assert controller.logged
        assert controller.elapsed == 3725.5
        assert controller.last_period == period
        assert store.periods == [period]
        assert store.fetch() == TimerRecord(
            start_time=T0, is_running=False, stop_time=T0 + timedelta(seconds=3725.5)
        )
        presence.end.assert_called_once_with(3725.5)

    def test_display_frozen_after_stop(
        self, controller: SessionTimerController, clock: FakeClock
    ) -> None:
        controller.start_timer()
        clock.advance(60)
        controller.stop_timer_and_log_period().result(timeout=2)

        clock.advance(600)

        assert controller.elapsed == 60.0

    def test_not_running_returns_none(
        self, controller: SessionTimerController, store: InMemoryTimerStore
    ) -> None:
        assert controller.stop_timer_and_log_period().result(timeout=2) is None
        assert store.periods == []

    def test_persist_failures_do_not_roll_back(
        self, controller: SessionTimerController, clock: FakeClock, store: InMemoryTimerStore
    ) -> None:
        controller.start_timer().result(timeout=2)
        store.fail_writes = ConnectionError("offline")
        store.fail_appends = ConnectionError("offline")
        clock.advance(20)

        period = controller.stop_timer_and_log_period().result(timeout=2)

        assert period is not None
        assert period.id is None
        assert period.duration == 20.0
        assert controller.state is TimerState.STOPPED
        assert controller.last_period == period
        assert store.fetch().is_running

    def test_append_attempted_when_save_stop_fails(
        self, controller: SessionTimerController, clock: FakeClock, store: InMemoryTimerStore
    ) -> None:
        controller.start_timer().result(timeout=2)
        store.fail_writes = ConnectionError("offline")
        clock.advance(20)

        period = controller.stop_timer_and_log_period().result(timeout=2)

        assert period.id == "1"
        assert len(store.periods) == 1


class TestStopAndReset:
    """Tests for unlogged stop and reset."""

    def test_stop_timer_does_not_log(
        self, controller: SessionTimerController, clock: FakeClock, store: InMemoryTimerStore
    ) -> None:
        controller.start_timer()
        clock.advance(45)

        controller.stop_timer().result(timeout=2)

        assert controller.state is TimerState.STOPPED
        assert not controller.logged
        assert controller.elapsed == 45.0
        assert store.periods == []
        assert not store.fetch().is_running

    def test_reset(
        self,
        controller: SessionTimerController,
        clock: FakeClock,
        store: InMemoryTimerStore,
        presence: MagicMock,
    ) -> None:
        controller.start_timer()
        clock.advance(45)

        controller.reset_timer().result(timeout=2)

        assert controller.state is TimerState.IDLE
        assert controller.elapsed == 0.0
        assert controller.started_at is None
        assert store.fetch() is None
        presence.end.assert_called_once()


class TestFetchAndResume:
    """Tests for restoring state from the store."""

    def test_running_record_resumes_ticking(
        self,
        controller: SessionTimerController,
        clock: FakeClock,
        store: InMemoryTimerStore,
        presence: MagicMock,
    ) -> None:
        store.save_start(T0)
        clock.advance(3600)

        record = controller.fetch_and_resume()

        assert record == TimerRecord(start_time=T0, is_running=True)
        assert controller.state is TimerState.RUNNING
        assert controller.elapsed == 3600.0
        assert controller.started_at == T0
        presence.start.assert_called_once_with(T0)

    def test_stopped_record_shows_final_value(
        self,
        controller: SessionTimerController,
        clock: FakeClock,
        store: InMemoryTimerStore,
        presence: MagicMock,
    ) -> None:
        store.save_start(T0)
        store.save_stop(T0 + timedelta(minutes=10))
        clock.advance(5000)

        controller.fetch_and_resume()

        assert controller.state is TimerState.STOPPED
        assert controller.elapsed == 600.0
        presence.start.assert_not_called()

    def test_stopped_without_stop_time_uses_now(self, clock: FakeClock) -> None:
        store = MagicMock()
        store.fetch.return_value = TimerRecord(start_time=T0, is_running=False)
        clock.advance(90)
        controller = SessionTimerController(
            store, MagicMock(), timer=ElapsedTimer(interval=60, clock=clock), clock=clock
        )

        controller.fetch_and_resume()

        assert controller.elapsed == 90.0
        controller.shutdown()

    def test_no_record_stays_idle(self, controller: SessionTimerController) -> None:
        assert controller.fetch_and_resume() is None
        assert controller.state is TimerState.IDLE

    def test_fetch_failure_keeps_state(self, clock: FakeClock) -> None:
        store = MagicMock()
        store.fetch.side_effect = ConnectionError("offline")
        controller = SessionTimerController(store, MagicMock(), clock=clock)

        assert controller.fetch_and_resume() is None
        assert controller.state is TimerState.IDLE
        controller.shutdown()

    def test_resume_replaces_local_tick(
        self, controller: SessionTimerController, clock: FakeClock, store: InMemoryTimerStore
    ) -> None:
        controller.start_timer().result(timeout=2)
        store.save_stop(T0 + timedelta(seconds=5))
        clock.advance(50)

        controller.fetch_and_resume()

        assert controller.state is TimerState.STOPPED
        assert controller.elapsed == 5.0


class TestCreateTimerController:
    """Tests for the factory."""

    def test_from_config(self, store: InMemoryTimerStore, clock: FakeClock) -> None:
        controller = create_timer_controller(
            store, store, TimerConfig(tick_interval_ms=50, presence_enabled=True), clock=clock
        )

        controller.start_timer().result(timeout=2)

        assert controller.is_running
        assert store.fetch().start_time == T0
        controller.shutdown()

    def test_default_config(self, store: InMemoryTimerStore) -> None:
        controller = create_timer_controller(store, store)
        assert controller.state is TimerState.IDLE
        controller.shutdown()
