"""
Workstation lock detection by polling the Win32 input desktop.
"""

from __future__ import annotations

import ctypes
import sys
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from timeclock import logger as app_logger

_LOGGER = app_logger.get_logger()

_DESKTOP_SWITCHDESKTOP = 0x0100


class SessionMonitor(QObject):
    """
    Periodically checks whether the interactive session is locked and emits
    ``lockChanged`` on every transition. Monitoring stops if the lock state
    cannot be queried.
    """

    lockChanged = Signal(bool)

    def __init__(self, poll_interval_ms: int = 1000, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setInterval(poll_interval_ms)
        self._timer.timeout.connect(self._check_session)  # type: ignore[arg-type]
        self._active = False
        self._locked = False
        self._lock_state_provider: Optional[Callable[[], bool]] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def locked(self) -> bool:
        return self._locked

    def start(self) -> None:
        """Begin watching the session; checks once immediately."""
        if self._active:
            return
        self._active = True
        self._timer.start()
        self._check_session()

    def stop(self) -> None:
        if not self._active:
            return
        self._timer.stop()
        self._active = False

    def set_lock_state_provider(self, provider: Callable[[], bool]) -> None:
        """
        Override lock state acquisition. Primarily used for testing.
        """
        self._lock_state_provider = provider

    def _check_session(self) -> None:
        if not self._active:
            return

        try:
            locked = self._is_locked()
        except OSError as exc:
            _LOGGER.warning("Session lock detection unavailable ({}); time is counted as unlocked.", exc)
            self.stop()
            return

        if locked != self._locked:
            self._locked = locked
            self.lockChanged.emit(locked)

    def _is_locked(self) -> bool:
        if self._lock_state_provider is not None:
            return bool(self._lock_state_provider())
        return _input_desktop_locked()


def _input_desktop_locked() -> bool:
    # The secure desktop shown while locked refuses OpenInputDesktop.
    if sys.platform != "win32":
        raise OSError(f"lock detection is not supported on {sys.platform}")
    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    handle = user32.OpenInputDesktop(0, False, _DESKTOP_SWITCHDESKTOP)
    if not handle:
        return True
    user32.CloseDesktop(handle)
    return False
