"""
Mock Ledger Host
================

In-memory implementations of the ledger collaborators for development
and testing.

Version: 0.1.0
"""

import copy
from typing import Any

from shared.config import LedgerMode
from shared.ledger.client import (
    AuthenticationFailed,
    Authenticator,
    EventSink,
    LedgerEvent,
    LedgerStorage,
    TTLExtension,
)
from shared.logging import get_logger

logger = get_logger(__name__)


class MockLedgerStorage(LedgerStorage):
    """
    In-memory ledger storage.

    Simulates a ledger's instance storage without requiring actual
    infrastructure. Lifetime is counted in ledger sequence numbers: the
    whole record set lives until `live_until`, and `extend_ttl` pushes that
    bound forward when fewer than `threshold` ledgers remain.

    Data is stored in memory and lost on restart.
    """

    def __init__(self, sequence: int = 1000) -> None:
        """Initialize mock storage at a given ledger sequence."""
        self._entries: dict[str, Any] = {}
        self._sequence = sequence
        self._live_until = sequence
        self._commits = 0

        logger.debug("mock_ledger_initialized", sequence=sequence)

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.MOCK

    async def health_check(self) -> dict[str, Any]:
        """Check mock storage health."""
        return {
            "status": "healthy",
            "mode": self.mode.value,
            "sequence": self._sequence,
            "live_until": self._live_until,
            "entries": len(self._entries),
        }

    async def get(self, key: str) -> Any | None:
        if key not in self._entries:
            return None
        return copy.deepcopy(self._entries[key])

    async def _apply(
        self,
        writes: dict[str, Any],
        ttl: TTLExtension | None,
    ) -> None:
        self._entries.update(copy.deepcopy(writes))
        self._sequence += 1
        self._commits += 1

        if ttl is not None and self.ttl() < ttl.threshold:
            self._live_until = self._sequence + ttl.extend_to
            logger.debug(
                "mock_ledger_ttl_extended",
                sequence=self._sequence,
                live_until=self._live_until,
            )

    # =========================================================================
    # Test Utilities
    # =========================================================================

    @property
    def sequence(self) -> int:
        """Current ledger sequence number."""
        return self._sequence

    @property
    def live_until(self) -> int:
        """Last ledger sequence the record set is guaranteed to live to."""
        return self._live_until

    def ttl(self) -> int:
        """Ledgers remaining before the record set lapses."""
        return max(self._live_until - self._sequence, 0)

    def advance(self, ledgers: int = 1) -> int:
        """Close `ledgers` ledgers without writing anything."""
        if ledgers < 0:
            raise ValueError("ledgers must be non-negative")
        self._sequence += ledgers
        return self._sequence

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of every committed entry."""
        return copy.deepcopy(self._entries)

    def clear_all(self) -> None:
        """Clear all mock data (for testing)."""
        self._entries.clear()
        self._commits = 0
        self._live_until = self._sequence
        logger.debug("mock_ledger_cleared")

    def get_stats(self) -> dict[str, int]:
        """Get storage statistics."""
        return {
            "entries": len(self._entries),
            "commits": self._commits,
            "sequence": self._sequence,
            "live_until": self._live_until,
        }


class MockAuthenticator(Authenticator):
    """
    Authenticator that accepts every identity, or only an allow-list.

    With no arguments it mirrors a host running with all auths mocked.
    Every checked identity is recorded in `checked`.
    """

    def __init__(self, allowed: set[str] | None = None) -> None:
        self._allowed = allowed
        self.checked: list[str] = []

    def require_auth(self, identity: str) -> None:
        self.checked.append(identity)
        if self._allowed is not None and identity not in self._allowed:
            logger.warning("mock_auth_rejected", identity=identity)
            raise AuthenticationFailed(identity)


class MockEventSink(EventSink):
    """Records published events for inspection."""

    def __init__(self) -> None:
        self.events: list[LedgerEvent] = []

    def publish(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def topics(self) -> list[str]:
        """Topics of every recorded event, in publish order."""
        return [e.topic for e in self.events]

    def clear(self) -> None:
        self.events.clear()
