"""
Startup configuration for the time clock, read from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from timeclock import logger as app_logger
from timeclock.engine import DEFAULT_NOTIFY_INTERVAL_MINUTES, DEFAULT_POLL_PERIOD_SECONDS

_LOGGER = app_logger.get_logger()

_ENV_PREFIX = "TIMECLOCK_"
_MIN_NOTIFY_MINUTES = 1
_MAX_NOTIFY_MINUTES = 24 * 60
_MIN_DISPLAY_MS = 1000
_MAX_DISPLAY_MS = 60000
_MIN_SESSION_CHECK_MS = 250
_MAX_SESSION_CHECK_MS = 60000
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(eq=True)
class ClockSettings:
    poll_period_seconds: int = DEFAULT_POLL_PERIOD_SECONDS
    notify_interval_minutes: int = DEFAULT_NOTIFY_INTERVAL_MINUTES
    show_startup_message: bool = True
    popup_reminders: bool = False
    reminder_display_ms: int = 3000
    session_check_interval_ms: int = 1000


class ClockSettingsManager:
    """Reads settings once at startup and clamps invalid data. Nothing is written back."""

    def __init__(self, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def read_settings(self) -> ClockSettings:
        defaults = ClockSettings()
        return ClockSettings(
            poll_period_seconds=self._read_poll_period(defaults.poll_period_seconds),
            notify_interval_minutes=self._read_clamped(
                "NOTIFY_MINUTES", defaults.notify_interval_minutes, _MIN_NOTIFY_MINUTES, _MAX_NOTIFY_MINUTES
            ),
            show_startup_message=self._read_bool("STARTUP_MESSAGE", defaults.show_startup_message),
            popup_reminders=self._read_bool("POPUP_REMINDERS", defaults.popup_reminders),
            reminder_display_ms=self._read_clamped(
                "REMINDER_DISPLAY_MS", defaults.reminder_display_ms, _MIN_DISPLAY_MS, _MAX_DISPLAY_MS
            ),
            session_check_interval_ms=self._read_clamped(
                "SESSION_CHECK_MS",
                defaults.session_check_interval_ms,
                _MIN_SESSION_CHECK_MS,
                _MAX_SESSION_CHECK_MS,
            ),
        )

    def _read_poll_period(self, default: int) -> int:
        raw = self._read_int("POLL_SECONDS")
        if raw is None:
            return default
        if raw <= 0 or 60 % raw:
            _LOGGER.warning(
                "Poll period {}s does not divide a minute evenly. Using {}s instead.",
                raw,
                default,
            )
            return default
        return raw

    def _read_clamped(self, name: str, default: int, minimum: int, maximum: int) -> int:
        raw = self._read_int(name)
        if raw is None:
            return default
        if raw < minimum or raw > maximum:
            _LOGGER.warning(
                "Value {} for {}{} is out of range. Clamping to {}..{}.",
                raw,
                _ENV_PREFIX,
                name,
                minimum,
                maximum,
            )
        return max(minimum, min(maximum, raw))

    def _read_bool(self, name: str, default: bool) -> bool:
        raw = self._read_raw(name)
        if raw is None:
            return default
        value = raw.lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        _LOGGER.warning("Value {!r} for {}{} is not a boolean.", raw, _ENV_PREFIX, name)
        return default

    def _read_int(self, name: str) -> Optional[int]:
        raw = self._read_raw(name)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            _LOGGER.warning("Value {!r} for {}{} is not an integer.", raw, _ENV_PREFIX, name)
            return None

    def _read_raw(self, name: str) -> Optional[str]:
        raw = self._environ.get(_ENV_PREFIX + name)
        if raw is None or not raw.strip():
            return None
        return raw.strip()
