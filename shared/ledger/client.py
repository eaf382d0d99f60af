"""
Ledger Host Interface
=====================

Abstract base classes and models for the environment a ledger service
runs in: transactional key-value storage with lifetime extension, a
clock, caller authentication and an event sink.

Version: 0.1.0
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager, nullcontext
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from shared.config import settings, LedgerMode
from shared.logging import get_logger

logger = get_logger(__name__)


class LedgerError(Exception):
    """Storage substrate failure; the invocation is aborted."""


class AuthenticationFailed(Exception):
    """The invoking principal has not proven control of an identity."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"Caller is not authorized to act as {identity}")
        self.identity = identity


class LedgerEvent(BaseModel):
    """Informational event published after a committed invocation."""

    topic: str = Field(..., description="Event topic, e.g. warranty_issued")
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class TTLExtension:
    """Request to keep the stored record set alive."""

    threshold: int
    extend_to: int


# =========================================================================
# Collaborators
# =========================================================================


class Clock(ABC):
    """Source of the current ledger time."""

    @abstractmethod
    def now(self) -> int:
        """Current time in whole seconds since the epoch."""
        ...


class Authenticator(ABC):
    """Proves the invoking principal controls an identity."""

    @abstractmethod
    def require_auth(self, identity: str) -> None:
        """
        Abort unless the caller has proven control of `identity`.

        Raises:
            AuthenticationFailed: If the proof is missing
        """
        ...


class EventSink(ABC):
    """Fire-and-forget receiver of ledger events."""

    @abstractmethod
    def publish(self, event: LedgerEvent) -> None:
        """Publish one event."""
        ...


# =========================================================================
# Storage
# =========================================================================


class LedgerTransaction:
    """
    Write buffer for one invocation.

    Reads see the transaction's own pending writes. Nothing reaches the
    storage substrate until the owning `LedgerStorage.transaction()`
    block exits cleanly.
    """

    def __init__(self, storage: "LedgerStorage") -> None:
        self._storage = storage
        self._writes: dict[str, Any] = {}
        self._ttl: TTLExtension | None = None

    async def get(self, key: str) -> Any | None:
        """Read a value, preferring this transaction's pending write."""
        if key in self._writes:
            return copy.deepcopy(self._writes[key])
        return await self._storage.get(key)

    def set(self, key: str, value: Any) -> None:
        """Stage a write."""
        self._writes[key] = copy.deepcopy(value)

    def extend_ttl(self, threshold: int, extend_to: int) -> None:
        """Stage a lifetime extension applied together with the writes."""
        if threshold < 0 or extend_to < threshold:
            raise ValueError("extend_to must be >= threshold >= 0")
        self._ttl = TTLExtension(threshold=threshold, extend_to=extend_to)

    @property
    def pending_writes(self) -> dict[str, Any]:
        return dict(self._writes)

    @property
    def ttl_extension(self) -> TTLExtension | None:
        return self._ttl


class LedgerStorage(ABC):
    """
    Abstract base class for ledger storage substrates.

    Implements the Strategy pattern for different storage modes.
    """

    @property
    @abstractmethod
    def mode(self) -> LedgerMode:
        """Get the storage mode."""
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check storage health."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Read a committed value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if absent
        """
        ...

    @abstractmethod
    async def _apply(
        self,
        writes: dict[str, Any],
        ttl: TTLExtension | None,
    ) -> None:
        """
        Atomically apply a committed transaction.

        Args:
            writes: Key/value pairs to persist
            ttl: Lifetime extension to apply with the writes
        """
        ...

    def _lock(self) -> AbstractAsyncContextManager[Any]:
        """Serialization scope held for the whole transaction."""
        return nullcontext()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[LedgerTransaction]:
        """
        Open an all-or-nothing transaction.

        Usage:
            async with storage.transaction() as tx:
                count = await tx.get("W_COUNT") or 0
                tx.set("W_COUNT", count + 1)

        Any exception raised inside the block discards every staged write.
        """
        async with self._lock():
            tx = LedgerTransaction(self)
            try:
                yield tx
            except Exception as e:
                logger.debug(
                    "ledger_transaction_discarded",
                    pending_writes=len(tx.pending_writes),
                    error_type=type(e).__name__,
                )
                raise

            if tx.pending_writes or tx.ttl_extension:
                await self._apply(tx.pending_writes, tx.ttl_extension)
                logger.debug(
                    "ledger_transaction_committed",
                    keys=sorted(tx.pending_writes),
                )


# Global storage instance
_storage: LedgerStorage | None = None


def get_ledger_storage() -> LedgerStorage:
    """
    Get the configured ledger storage instance.

    Returns:
        LedgerStorage instance based on settings
    """
    global _storage

    if _storage is None:
        mode = settings.ledger.mode

        if mode == LedgerMode.MOCK:
            from shared.ledger.mock import MockLedgerStorage

            _storage = MockLedgerStorage()
        elif mode == LedgerMode.REDIS:
            from shared.ledger.redis import RedisLedgerStorage

            _storage = RedisLedgerStorage(namespace=settings.ledger.namespace)
        else:
            raise ValueError(f"Unknown ledger mode: {mode}")

        logger.info(
            "ledger_storage_initialized",
            mode=mode.value,
        )

    return _storage


def set_ledger_storage(storage: LedgerStorage) -> None:
    """
    Set a custom ledger storage.

    Args:
        storage: LedgerStorage instance
    """
    global _storage
    _storage = storage
    logger.info(
        "ledger_storage_set",
        mode=storage.mode.value,
    )


def reset_ledger_storage() -> None:
    """Reset the storage to be re-initialized."""
    global _storage
    _storage = None
