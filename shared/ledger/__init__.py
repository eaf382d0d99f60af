"""
Ledger Module
=============

Abstraction layer over the environment a ledger service runs in.

Supports:
- Mock (development/testing, in-memory)
- Redis (persistent, shared between processes)

Collaborators:
- LedgerStorage: transactional key-value storage with lifetime extension
- Clock: current ledger time
- Authenticator: proof that the caller controls an identity
- EventSink: fire-and-forget notifications

Usage:
    from shared.ledger import get_ledger_storage

    storage = get_ledger_storage()

    async with storage.transaction() as tx:
        count = await tx.get("W_COUNT") or 0
        tx.set("W_COUNT", count + 1)
        tx.extend_ttl(5000, 5000)
"""

from shared.ledger.client import (
    AuthenticationFailed,
    Authenticator,
    Clock,
    EventSink,
    LedgerError,
    LedgerEvent,
    LedgerStorage,
    LedgerTransaction,
    TTLExtension,
    get_ledger_storage,
    reset_ledger_storage,
    set_ledger_storage,
)
from shared.ledger.clock import ManualClock, SystemClock
from shared.ledger.events import LoggingEventSink
from shared.ledger.mock import MockAuthenticator, MockEventSink, MockLedgerStorage

__all__ = [
    # Interfaces
    "Authenticator",
    "Clock",
    "EventSink",
    "LedgerStorage",
    "LedgerTransaction",
    "get_ledger_storage",
    "set_ledger_storage",
    "reset_ledger_storage",
    # Models
    "LedgerEvent",
    "TTLExtension",
    # Errors
    "AuthenticationFailed",
    "LedgerError",
    # Implementations
    "SystemClock",
    "ManualClock",
    "LoggingEventSink",
    "MockLedgerStorage",
    "MockAuthenticator",
    "MockEventSink",
]
