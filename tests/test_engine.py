from __future__ import annotations

import threading
import time
from datetime import datetime

import pytest

from timeclock.engine import (
    DEFAULT_NOTIFY_INTERVAL_MINUTES,
    DEFAULT_POLL_PERIOD_SECONDS,
    InvalidArgumentError,
    TimekeepingEngine,
)


def drive(engine: TimekeepingEngine, ticks: int) -> None:
    for _ in range(ticks):
        assert engine.tick()


def record_reminders(engine: TimekeepingEngine) -> list:
    fired: list = []
    engine.add_reminder_listener(fired.append)
    return fired


class TestConstruction:
    def test_defaults(self):
        engine = TimekeepingEngine(autostart=False)
        snapshot = engine.snapshot()
        assert engine.poll_period_seconds == DEFAULT_POLL_PERIOD_SECONDS
        assert snapshot.elapsed_ticks == 0
        assert snapshot.notify_interval_minutes == DEFAULT_NOTIFY_INTERVAL_MINUTES
        assert snapshot.running is True
        assert snapshot.workstation_locked is False
        assert not engine.is_alive

    def test_interval_ticks_follow_poll_period(self, make_engine):
        engine = make_engine(poll_period_seconds=10, interval_minutes=60)
        assert engine.ticks_per_minute == 6
        assert engine.snapshot().notify_interval_ticks == 360

    def test_start_time_comes_from_clock(self, make_engine):
        moment = datetime(2024, 3, 1, 8, 30, 0)
        engine = make_engine(clock=lambda: moment)
        assert engine.snapshot().start_time == moment

    @pytest.mark.parametrize("poll", [0, -1, 7, 45, 1.5, True])
    def test_rejects_unusable_poll_period(self, poll):
        with pytest.raises(InvalidArgumentError):
            TimekeepingEngine(poll, 5, autostart=False)

    @pytest.mark.parametrize("minutes", [0, -5])
    def test_rejects_non_positive_initial_interval(self, minutes):
        with pytest.raises(InvalidArgumentError):
            TimekeepingEngine(1, minutes, autostart=False)


class TestTicking:
    def test_unlocked_ticks_advance_by_one(self, make_engine):
        engine = make_engine()
        seen: list = []
        engine.add_elapsed_listener(seen.append)
        drive(engine, 10)
        assert engine.snapshot().elapsed_ticks == 10
        assert seen == list(range(1, 11))

    def test_locked_ticks_leave_counter_unchanged(self, make_engine):
        engine = make_engine()
        seen: list = []
        engine.add_elapsed_listener(seen.append)
        drive(engine, 3)
        engine.on_session_lock_changed(True)
        drive(engine, 50)
        assert engine.snapshot().elapsed_ticks == 3
        assert seen == [1, 2, 3]

    def test_lock_change_is_idempotent(self, make_engine):
        engine = make_engine()
        engine.on_session_lock_changed(True)
        engine.on_session_lock_changed(True)
        assert engine.snapshot().workstation_locked is True
        engine.on_session_lock_changed(False)
        engine.on_session_lock_changed(False)
        assert engine.snapshot().workstation_locked is False

    def test_tick_after_shutdown_is_refused(self, make_engine):
        engine = make_engine()
        drive(engine, 2)
        engine.shutdown()
        assert engine.tick() is False
        assert engine.snapshot().elapsed_ticks == 2
        assert engine.snapshot().running is False


class TestReminders:
    def test_lock_and_unlock_scenario(self, make_engine):
        engine = make_engine(poll_period_seconds=1, interval_minutes=5)
        fired = record_reminders(engine)

        drive(engine, 300)
        assert fired == [300]
        assert engine.snapshot().elapsed_ticks == 300

        engine.on_session_lock_changed(True)
        drive(engine, 300)
        assert engine.snapshot().elapsed_ticks == 300
        assert fired == [300]

        engine.on_session_lock_changed(False)
        drive(engine, 299)
        assert fired == [300]
        drive(engine, 1)
        assert fired == [300, 600]
        assert engine.snapshot().elapsed_ticks == 600

    def test_no_reminder_at_zero_while_locked(self, make_engine):
        engine = make_engine()
        fired = record_reminders(engine)
        engine.on_session_lock_changed(True)
        drive(engine, 10)
        assert fired == []

    def test_shorter_interval_applies_to_next_boundary(self, make_engine):
        engine = make_engine(poll_period_seconds=1, interval_minutes=5)
        fired = record_reminders(engine)
        drive(engine, 150)
        engine.set_interval(1)
        drive(engine, 29)
        assert fired == []
        drive(engine, 1)
        assert fired == [180]
        drive(engine, 60)
        assert fired == [180, 240]

    def test_interval_change_while_locked_is_not_retroactive(self, make_engine):
        engine = make_engine(poll_period_seconds=1, interval_minutes=5)
        fired = record_reminders(engine)
        drive(engine, 120)
        engine.on_session_lock_changed(True)
        engine.set_interval(1)
        drive(engine, 5)
        assert fired == []
        engine.on_session_lock_changed(False)
        drive(engine, 60)
        assert fired == [180]

    def test_reminder_on_the_tick_that_reaches_boundary_before_lock(self, make_engine):
        engine = make_engine(poll_period_seconds=1, interval_minutes=1)
        fired = record_reminders(engine)
        drive(engine, 60)
        engine.on_session_lock_changed(True)
        drive(engine, 5)
        assert fired == [60]

    def test_coarse_poll_period(self, make_engine):
        engine = make_engine(poll_period_seconds=10, interval_minutes=1)
        fired = record_reminders(engine)
        drive(engine, 12)
        assert fired == [6, 12]
        assert engine.snapshot().elapsed_seconds == 120


class TestSetInterval:
    @pytest.mark.parametrize("minutes", [0, -5, 2.5, "30", None, True])
    def test_invalid_values_leave_state_unchanged(self, make_engine, minutes):
        engine = make_engine(interval_minutes=5)
        with pytest.raises(InvalidArgumentError):
            engine.set_interval(minutes)
        assert engine.snapshot().notify_interval_ticks == 300

    def test_invalid_argument_is_a_value_error(self):
        assert issubclass(InvalidArgumentError, ValueError)

    def test_valid_value_updates_interval(self, make_engine):
        engine = make_engine(interval_minutes=5)
        engine.set_interval(30)
        snapshot = engine.snapshot()
        assert snapshot.notify_interval_ticks == 1800
        assert snapshot.notify_interval_minutes == 30


class TestListeners:
    def test_failing_listener_does_not_stop_publishing(self, make_engine):
        engine = make_engine()
        seen: list = []

        def broken(_ticks):
            raise RuntimeError("boom")

        engine.add_elapsed_listener(broken)
        engine.add_elapsed_listener(seen.append)
        drive(engine, 3)
        assert seen == [1, 2, 3]

    def test_removed_listener_is_not_called(self, make_engine):
        engine = make_engine(interval_minutes=1)
        seen: list = []
        engine.add_elapsed_listener(seen.append)
        engine.add_reminder_listener(seen.append)
        drive(engine, 2)
        engine.remove_listener(seen.append)
        drive(engine, 60)
        assert seen == [1, 2]


class TestWorker:
    def test_worker_publishes_ticks(self, make_engine):
        engine = make_engine(autostart=True)
        ticked = threading.Event()
        engine.add_elapsed_listener(lambda _ticks: ticked.set())
        assert ticked.wait(3.0)
        assert engine.snapshot().elapsed_ticks >= 1

    def test_shutdown_interrupts_wait(self, make_engine):
        engine = make_engine(poll_period_seconds=60, autostart=True)
        time.sleep(0.1)
        assert engine.is_alive
        started = time.monotonic()
        engine.shutdown()
        assert engine.join(2.0)
        assert time.monotonic() - started < 2.0
        assert engine.snapshot().elapsed_ticks == 0

    def test_shutdown_from_other_thread_and_repeated(self, make_engine):
        engine = make_engine(poll_period_seconds=30, autostart=True)
        closer = threading.Thread(target=engine.shutdown)
        closer.start()
        closer.join(2.0)
        engine.shutdown()
        assert engine.join(2.0)
        assert engine.running is False

    def test_no_restart_after_shutdown(self, make_engine):
        engine = make_engine()
        engine.shutdown()
        engine.start()
        assert not engine.is_alive

    def test_worker_survives_failing_listener(self, make_engine):
        engine = make_engine(autostart=True)
        seen: list = []
        done = threading.Event()

        def broken(_ticks):
            raise RuntimeError("boom")

        def record(ticks):
            seen.append(ticks)
            if len(seen) >= 2:
                done.set()

        engine.add_elapsed_listener(broken)
        engine.add_elapsed_listener(record)
        assert done.wait(5.0)
        assert seen[:2] == [1, 2]
