from __future__ import annotations

import os
import tempfile

# Must be set before PySide6 or timeclock.logger are imported.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("TIMECLOCK_LOG_DIR", tempfile.mkdtemp(prefix="timeclock-logs-"))

import pytest

from timeclock.engine import TimekeepingEngine


@pytest.fixture
def make_engine():
    """Build engines that are driven by hand; any worker started is shut down afterwards."""
    created = []

    def factory(poll_period_seconds: int = 1, interval_minutes: int = 5, **kwargs) -> TimekeepingEngine:
        kwargs.setdefault("autostart", False)
        engine = TimekeepingEngine(poll_period_seconds, interval_minutes, **kwargs)
        created.append(engine)
        return engine

    yield factory

    for engine in created:
        engine.shutdown()
        engine.join(2.0)
