"""
TIMEClock: counts unlocked working time and reminds you at a set interval.
"""

from .engine import EngineSnapshot, InvalidArgumentError, TimekeepingEngine  # noqa: F401
