"""
Entry point for the TIMEClock tray application.
"""

from __future__ import annotations

import ctypes
import sys
from typing import Iterable

from PySide6.QtWidgets import QApplication

from timeclock import logger as app_logger
from timeclock.app import ClockCoordinator
from timeclock.engine import TimekeepingEngine
from timeclock.settings import ClockSettingsManager

_LOGGER = app_logger.get_logger()
_MUTEX_NAME = "Local\\TIMEClockInstanceMutex"
_ERROR_ALREADY_EXISTS = 183


class _InstanceGuard:
    """Named mutex guard so only one clock runs per login session."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._handle = None
        self._kernel32 = ctypes.WinDLL("kernel32", use_last_error=True) if sys.platform == "win32" else None

    def acquire(self) -> bool:
        if self._kernel32 is None:
            return True
        ctypes.set_last_error(0)
        handle = self._kernel32.CreateMutexW(None, False, self._name)
        if not handle:
            _LOGGER.warning("Could not create instance mutex; continuing without it.")
            return True
        if ctypes.get_last_error() == _ERROR_ALREADY_EXISTS:
            self._kernel32.CloseHandle(handle)
            return False
        self._handle = handle
        return True

    def release(self) -> None:
        if self._kernel32 is None or not self._handle:
            return
        self._kernel32.CloseHandle(self._handle)
        self._handle = None


def run(argv: Iterable[str]) -> int:
    """Build the engine and the tray UI, then run the Qt event loop until Exit."""
    settings = ClockSettingsManager().read_settings()
    app = QApplication(list(argv))
    app.setQuitOnLastWindowClosed(False)

    engine = TimekeepingEngine(
        settings.poll_period_seconds,
        settings.notify_interval_minutes,
        autostart=False,
    )
    coordinator = ClockCoordinator(engine, settings)
    app.aboutToQuit.connect(engine.shutdown)
    try:
        coordinator.start()
        return app.exec()
    finally:
        engine.shutdown()


def main() -> int:
    guard = _InstanceGuard(_MUTEX_NAME)
    if not guard.acquire():
        _LOGGER.debug("TIMEClock is already running; exiting.")
        return 0
    try:
        return run(sys.argv)
    except Exception:
        _LOGGER.exception("Uncaught exception in entry point, exiting.")
        return 1
    finally:
        guard.release()


if __name__ == "__main__":
    raise SystemExit(main())
