"""
Bridges engine events onto the Qt GUI thread and turns ticks into display text.
"""

from __future__ import annotations

from typing import Optional, Tuple

from PySide6.QtCore import QObject, Qt, Signal

from timeclock import durations
from timeclock import logger as app_logger
from timeclock.engine import EngineSnapshot, TimekeepingEngine

APP_NAME = "TIMEClock"


class PresentationAdapter(QObject):
    """
    Subscribes to a TimekeepingEngine and re-emits its events as display text.

    Engine callbacks arrive on the worker thread; they are forwarded through
    queued signals so every public signal below is emitted on the thread
    that owns the adapter. Repeated deliveries of a tick already rendered
    are ignored.
    """

    elapsedTextChanged = Signal(str)
    detailTextChanged = Signal(str)
    reminderReady = Signal(str, str)

    _elapsedReceived = Signal(int)
    _reminderReceived = Signal(int)

    def __init__(self, engine: TimekeepingEngine, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._engine = engine
        self._poll_period_seconds = engine.poll_period_seconds
        self._last_elapsed_tick = -1
        self._last_reminder_tick = 0
        self._attached = False

        self._elapsedReceived.connect(self._render_elapsed, Qt.ConnectionType.QueuedConnection)
        self._reminderReceived.connect(self._render_reminder, Qt.ConnectionType.QueuedConnection)

    def attach(self) -> None:
        if self._attached:
            return
        self._engine.add_elapsed_listener(self._on_elapsed_changed)
        self._engine.add_reminder_listener(self._on_reminder_due)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self._engine.remove_listener(self._on_elapsed_changed)
        self._engine.remove_listener(self._on_reminder_due)
        self._attached = False

    # Called on the engine worker thread.
    def _on_elapsed_changed(self, ticks: int) -> None:
        self._elapsedReceived.emit(ticks)

    def _on_reminder_due(self, ticks: int) -> None:
        self._reminderReceived.emit(ticks)

    def _render_elapsed(self, ticks: int) -> None:
        if ticks <= self._last_elapsed_tick:
            return
        self._last_elapsed_tick = ticks
        self.elapsedTextChanged.emit(self.simple_text(ticks))
        self.detailTextChanged.emit(self.detail_text(self._engine.snapshot(), ticks))

    def _render_reminder(self, ticks: int) -> None:
        if ticks <= self._last_reminder_tick:
            self._logger.debug("Ignoring repeated reminder for tick {}.", ticks)
            return
        self._last_reminder_tick = ticks
        self.reminderReady.emit(APP_NAME, self.reminder_text(ticks))

    def seconds_for(self, ticks: int) -> int:
        return ticks * self._poll_period_seconds

    def simple_text(self, ticks: int) -> str:
        return durations.format_clock(self.seconds_for(ticks))

    def reminder_text(self, ticks: int) -> str:
        return "You have been working for " + durations.format_duration(
            self.seconds_for(ticks), include_seconds=False
        ) + "."

    def detail_text(self, snapshot: Optional[EngineSnapshot] = None, ticks: Optional[int] = None) -> str:
        snapshot = snapshot or self._engine.snapshot()
        ticks = snapshot.elapsed_ticks if ticks is None else ticks
        return (
            f"You clocked in at {durations.format_time_of_day(snapshot.start_time)}\n"
            f"Working for: {durations.format_duration(self.seconds_for(ticks))}"
        )

    def current_simple_text(self) -> str:
        return self.simple_text(self._engine.snapshot().elapsed_ticks)

    def current_interval_minutes(self) -> int:
        return self._engine.snapshot().notify_interval_minutes

    def startup_message(self) -> Tuple[str, str]:
        snapshot = self._engine.snapshot()
        return (
            f"{APP_NAME} is now running",
            f"Started at {durations.format_time_of_day(snapshot.start_time)}\n"
            f"You will be notified {durations.format_interval(snapshot.notify_interval_minutes)}.",
        )
