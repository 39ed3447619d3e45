"""
Background timekeeping engine: counts unlocked poll periods and raises reminders.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from timeclock import logger as app_logger

_LOGGER = app_logger.get_logger()

DEFAULT_POLL_PERIOD_SECONDS = 1
DEFAULT_NOTIFY_INTERVAL_MINUTES = 60
_SECONDS_PER_MINUTE = 60

TickListener = Callable[[int], None]


class InvalidArgumentError(ValueError):
    """Raised when the engine is given a non-positive interval or an unusable poll period."""


@dataclass(frozen=True, slots=True)
class EngineSnapshot:
    """Consistent copy of the engine state taken under the state lock."""

    elapsed_ticks: int
    notify_interval_ticks: int
    start_time: datetime
    poll_period_seconds: int
    workstation_locked: bool
    running: bool

    @property
    def elapsed_seconds(self) -> int:
        return self.elapsed_ticks * self.poll_period_seconds

    @property
    def notify_interval_minutes(self) -> int:
        return self.notify_interval_ticks * self.poll_period_seconds // _SECONDS_PER_MINUTE


def _validate_minutes(minutes: object) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise InvalidArgumentError(
            f"Notification interval must be a positive whole number of minutes, got {minutes!r}."
        )
    return minutes


class TimekeepingEngine:
    """
    Owns the elapsed-tick counter and runs the poll loop on a dedicated worker.

    The worker wakes once per poll period. Each wake advances the counter
    unless the workstation is locked, then checks whether the counter sits
    on a reminder boundary. Observers are plain callables invoked on the
    worker thread; they must hand work over to their own thread themselves.
    """

    def __init__(
        self,
        poll_period_seconds: int = DEFAULT_POLL_PERIOD_SECONDS,
        interval_minutes: int = DEFAULT_NOTIFY_INTERVAL_MINUTES,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        autostart: bool = True,
    ) -> None:
        if (
            isinstance(poll_period_seconds, bool)
            or not isinstance(poll_period_seconds, int)
            or poll_period_seconds <= 0
            or _SECONDS_PER_MINUTE % poll_period_seconds
        ):
            raise InvalidArgumentError(
                f"Poll period must be a whole number of seconds dividing 60, got {poll_period_seconds!r}."
            )
        self.poll_period_seconds = poll_period_seconds
        self.ticks_per_minute = _SECONDS_PER_MINUTE // poll_period_seconds

        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._start_time = (clock or datetime.now)()
        self._elapsed_ticks = 0
        self._last_evaluated_tick = 0
        self._workstation_locked = False
        self._notify_interval_ticks = _validate_minutes(interval_minutes) * self.ticks_per_minute
        self._running = True

        self._elapsed_listeners: List[TickListener] = []
        self._reminder_listeners: List[TickListener] = []
        self._worker: Optional[threading.Thread] = None

        _LOGGER.info(
            "Engine created at {} (poll period {}s, reminder every {} ticks).",
            self._start_time.isoformat(timespec="seconds"),
            poll_period_seconds,
            self._notify_interval_ticks,
        )
        if autostart:
            self.start()

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Launch the worker thread. Later calls are ignored."""
        with self._lock:
            if not self._running:
                _LOGGER.warning("Engine was shut down and cannot be restarted.")
                return
            if self._worker is not None:
                return
            self._worker = threading.Thread(target=self._run, name="timeclock-engine", daemon=True)
        self._worker.start()

    def shutdown(self) -> None:
        """Stop the worker, interrupting any wait in progress. Safe from any thread."""
        with self._wakeup:
            if not self._running:
                return
            self._running = False
            self._wakeup.notify_all()
        _LOGGER.info("Engine shutdown requested.")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to exit. Returns True when no worker is left running."""
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    @property
    def is_alive(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    # -- observers -----------------------------------------------------------

    def add_elapsed_listener(self, listener: TickListener) -> TickListener:
        with self._lock:
            self._elapsed_listeners.append(listener)
        return listener

    def add_reminder_listener(self, listener: TickListener) -> TickListener:
        with self._lock:
            self._reminder_listeners.append(listener)
        return listener

    def remove_listener(self, listener: TickListener) -> None:
        with self._lock:
            for listeners in (self._elapsed_listeners, self._reminder_listeners):
                while listener in listeners:
                    listeners.remove(listener)

    # -- inbound operations --------------------------------------------------

    def set_interval(self, minutes: int) -> None:
        """Change the reminder interval; applies from the next counter value onwards."""
        ticks = _validate_minutes(minutes) * self.ticks_per_minute
        with self._lock:
            previous = self._notify_interval_ticks
            self._notify_interval_ticks = ticks
        if previous != ticks:
            _LOGGER.info("Reminder interval changed to {} minute(s) ({} ticks).", minutes, ticks)

    def on_session_lock_changed(self, locked: bool) -> None:
        locked = bool(locked)
        with self._lock:
            if self._workstation_locked == locked:
                return
            self._workstation_locked = locked
            elapsed = self._elapsed_ticks
        _LOGGER.info("Workstation {} at tick {}.", "locked" if locked else "unlocked", elapsed)

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return EngineSnapshot(
                elapsed_ticks=self._elapsed_ticks,
                notify_interval_ticks=self._notify_interval_ticks,
                start_time=self._start_time,
                poll_period_seconds=self.poll_period_seconds,
                workstation_locked=self._workstation_locked,
                running=self._running,
            )

    # -- worker --------------------------------------------------------------

    def tick(self) -> bool:
        """
        Run one wake decision: advance when unlocked, then check the reminder boundary.

        Called by the worker after each wait. Returns False once the engine
        has been shut down, in which case nothing changes.
        """
        with self._lock:
            if not self._running:
                return False
            advanced = not self._workstation_locked
            if advanced:
                self._elapsed_ticks += 1
            elapsed = self._elapsed_ticks
            reminder_due = False
            # Each counter value is checked once, so locked ticks never repeat a reminder.
            if elapsed != self._last_evaluated_tick:
                self._last_evaluated_tick = elapsed
                reminder_due = elapsed > 0 and elapsed % self._notify_interval_ticks == 0
            elapsed_listeners = list(self._elapsed_listeners) if advanced else []
            reminder_listeners = list(self._reminder_listeners) if reminder_due else []

        if advanced:
            self._publish("elapsed-changed", elapsed_listeners, elapsed)
        if reminder_due:
            _LOGGER.info("Reminder due at tick {}.", elapsed)
            self._publish("reminder-due", reminder_listeners, elapsed)
        return True

    def _wait_for_next_tick(self, deadline: float) -> bool:
        """Block until the deadline or shutdown. Returns True if the engine stopped."""
        with self._wakeup:
            return self._wakeup.wait_for(
                lambda: not self._running,
                timeout=max(0.0, deadline - time.monotonic()),
            )

    def _run(self) -> None:
        _LOGGER.debug("Engine worker started.")
        deadline = time.monotonic()
        while True:
            deadline += self.poll_period_seconds
            if self._wait_for_next_tick(deadline):
                break
            if not self.tick():
                break
            now = time.monotonic()
            if now - deadline > self.poll_period_seconds:
                # Suspended or starved; skip the backlog instead of replaying it.
                _LOGGER.debug("Worker fell {:.1f}s behind; resynchronising.", now - deadline)
                deadline = now
        _LOGGER.info("Engine worker stopped at tick {}.", self.snapshot().elapsed_ticks)

    def _publish(self, event: str, listeners: List[TickListener], elapsed: int) -> None:
        for listener in listeners:
            try:
                listener(elapsed)
            except Exception:
                _LOGGER.exception("Listener for {} failed at tick {}.", event, elapsed)
