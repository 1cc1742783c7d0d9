"""Unit tests for the local ticking clock."""

import threading
import time
from datetime import UTC, datetime, timedelta

from nurtra.timer import ElapsedTimer

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class TestElapsedTimerStart:
    """Tests for starting the timer."""

    def test_initial_state(self) -> None:
        timer = ElapsedTimer()

        assert timer.elapsed == 0.0
        assert timer.started_at is None
        assert not timer.is_ticking

    def test_start_publishes_immediately(self) -> None:
        clock = FakeClock(T0 + timedelta(seconds=42))
        timer = ElapsedTimer(interval=60, clock=clock)

        timer.start(T0)

        assert timer.is_ticking
        assert timer.started_at == T0
        assert timer.elapsed == 42.0
        timer.stop()

    def test_elapsed_recomputed_from_start(self) -> None:
        clock = FakeClock()
        ticks: list[float] = []
        ticked = threading.Event()

        def on_tick(value: float) -> None:
            ticks.append(value)
            if value >= 5.0:
                ticked.set()

        timer = ElapsedTimer(interval=0.01, clock=clock, on_tick=on_tick)
        timer.start(T0)
        clock.advance(5.0)

        assert ticked.wait(timeout=2)
        timer.stop()
        assert timer.elapsed == 5.0
        assert ticks[0] == 0.0

    def test_future_start_clamps_to_zero(self) -> None:
        clock = FakeClock()
        timer = ElapsedTimer(interval=60, clock=clock)

        timer.start(T0 + timedelta(minutes=5))

        assert timer.elapsed == 0.0
        timer.stop()

    def test_failing_listener_does_not_stop_ticks(self) -> None:
        calls: list[float] = []

        def on_tick(value: float) -> None:
            calls.append(value)
            raise RuntimeError("listener broke")

        timer = ElapsedTimer(interval=0.01, clock=FakeClock(), on_tick=on_tick)
        timer.start(T0)
        time.sleep(0.1)
        timer.stop()

        assert len(calls) > 1


class TestElapsedTimerStop:
    """Tests for stopping, freezing and resetting."""

    def test_no_ticks_after_stop(self) -> None:
        clock = FakeClock()
        ticks: list[float] = []
        timer = ElapsedTimer(interval=0.005, clock=clock, on_tick=ticks.append)
        timer.start(T0)
        time.sleep(0.05)

        timer.stop()
        count = len(ticks)
        clock.advance(10)
        time.sleep(0.05)

        assert not timer.is_ticking
        assert len(ticks) == count
        assert timer.elapsed == 0.0

    def test_freeze_holds_difference(self) -> None:
        timer = ElapsedTimer(interval=60, clock=FakeClock())
        timer.start(T0)

        timer.freeze(T0, T0 + timedelta(seconds=90.5))

        assert not timer.is_ticking
        assert timer.elapsed == 90.5
        assert timer.started_at == T0

    def test_freeze_clamps_negative(self) -> None:
        timer = ElapsedTimer()
        timer.freeze(T0, T0 - timedelta(seconds=3))
        assert timer.elapsed == 0.0

    def test_reset(self) -> None:
        timer = ElapsedTimer(interval=60, clock=FakeClock(T0 + timedelta(seconds=7)))
        timer.start(T0)

        timer.reset()

        assert timer.elapsed == 0.0
        assert timer.started_at is None
        assert not timer.is_ticking

    def test_restart_replaces_previous_loop(self) -> None:
        clock = FakeClock(T0 + timedelta(seconds=100))
        timer = ElapsedTimer(interval=0.005, clock=clock)
        timer.start(T0)
        timer.start(T0 + timedelta(seconds=90))
        time.sleep(0.05)
        timer.stop()

        assert timer.elapsed == 10.0


class TestElapsedTimerResume:
    """Tests for restoring after a restart."""

    def test_resume_running(self) -> None:
        clock = FakeClock(T0 + timedelta(hours=2))
        timer = ElapsedTimer(interval=60, clock=clock)

        timer.resume(T0)

        assert timer.is_ticking
        assert timer.elapsed == 7200.0
        timer.stop()

    def test_resume_frozen(self) -> None:
        timer = ElapsedTimer(interval=60, clock=FakeClock(T0 + timedelta(days=3)))

        timer.resume(T0, frozen_at=T0 + timedelta(minutes=30))

        assert not timer.is_ticking
        assert timer.elapsed == 1800.0
