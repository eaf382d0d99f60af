"""
Ledger Clocks
=============

Wall-clock and manually driven time sources.

Version: 0.1.0
"""

import time

from shared.ledger.client import Clock


class SystemClock(Clock):
    """Wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Used by the mock ledger and tests to drive expiry deterministically.
    """

    def __init__(self, timestamp: int = 0) -> None:
        if timestamp < 0:
            raise ValueError("timestamp must be non-negative")
        self._timestamp = timestamp

    def now(self) -> int:
        return self._timestamp

    def set(self, timestamp: int) -> None:
        """Jump to an absolute timestamp."""
        if timestamp < 0:
            raise ValueError("timestamp must be non-negative")
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Move forward by `seconds` and return the new time."""
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._timestamp += seconds
        return self._timestamp
