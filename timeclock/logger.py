"""
Logging setup for the time clock.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
LOG_DIR = Path(os.environ.get("TIMECLOCK_LOG_DIR", str(Path.home() / "AppData" / "Local" / "TIMEClock")))
DEFAULT_LOG_PATH = LOG_DIR / "timeclock.log"


def configure(log_path: Optional[Path] = None) -> None:
    """
    Configure loguru for the application.

    Only the first call has an effect; later calls keep the existing sinks.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)

    # pythonw has no stderr, so the file sink may be the only one.
    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level="INFO", enqueue=True)
    _logger.add(
        target,
        level="DEBUG",
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
