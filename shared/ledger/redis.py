"""
Redis Ledger Storage
====================

Persistent ledger substrate on Redis. The whole record set of one ledger
namespace lives in a single hash, so one EXPIRE keeps every entry alive
together and one MULTI/EXEC commits a transaction atomically.

Version: 0.1.0
"""

import json
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from redis.exceptions import RedisError

from shared.config import settings, LedgerMode
from shared.database.redis import RedisClient, redis_lock
from shared.ledger.client import LedgerError, LedgerStorage, TTLExtension
from shared.logging import get_logger

logger = get_logger(__name__)


class RedisLedgerStorage(LedgerStorage):
    """
    Ledger storage backed by a Redis hash.

    A Redis lock is held for the length of each transaction so that
    several service processes sharing one Redis stay serialized.
    """

    def __init__(
        self,
        namespace: str = "warranty-ledger",
        ttl_unit_seconds: int | None = None,
        lock_timeout_seconds: int | None = None,
    ) -> None:
        self._namespace = namespace
        self._instance_key = f"{namespace}:instance"
        self._unit_seconds = ttl_unit_seconds or settings.ledger.ttl_unit_seconds
        self._lock_timeout = lock_timeout_seconds or settings.ledger.lock_timeout_seconds

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.REDIS

    async def health_check(self) -> dict[str, Any]:
        health = await RedisClient.health_check()
        health["mode"] = self.mode.value
        health["namespace"] = self._namespace
        return health

    async def get(self, key: str) -> Any | None:
        try:
            raw = await RedisClient.get_client().hget(self._instance_key, key)
        except RedisError as e:
            logger.error("redis_ledger_read_failed", key=key, error=str(e))
            raise LedgerError(f"Ledger read failed for {key}") from e

        if raw is None:
            return None
        return json.loads(raw)

    async def _apply(
        self,
        writes: dict[str, Any],
        ttl: TTLExtension | None,
    ) -> None:
        client = RedisClient.get_client()

        try:
            extend_seconds = None
            if ttl is not None:
                # -2: key missing, -1: no expiry set
                remaining = max(await client.ttl(self._instance_key), 0)
                if remaining < ttl.threshold * self._unit_seconds:
                    extend_seconds = ttl.extend_to * self._unit_seconds

            async with client.pipeline(transaction=True) as pipe:
                if writes:
                    pipe.hset(
                        self._instance_key,
                        mapping={k: json.dumps(v) for k, v in writes.items()},
                    )
                if extend_seconds:
                    pipe.expire(self._instance_key, extend_seconds)
                await pipe.execute()

        except RedisError as e:
            logger.error(
                "redis_ledger_commit_failed",
                keys=sorted(writes),
                error=str(e),
            )
            raise LedgerError("Ledger commit failed") from e

        if extend_seconds:
            logger.debug(
                "redis_ledger_ttl_extended",
                namespace=self._namespace,
                seconds=extend_seconds,
            )

    @asynccontextmanager
    async def _held_lock(self) -> AsyncIterator[None]:
        try:
            async with redis_lock(
                self._namespace,
                timeout_seconds=self._lock_timeout,
            ) as acquired:
                if not acquired:
                    logger.warning("redis_ledger_lock_timeout", namespace=self._namespace)
                    raise LedgerError(f"Ledger {self._namespace} is busy")
                yield
        except RedisError as e:
            logger.error("redis_ledger_lock_failed", namespace=self._namespace, error=str(e))
            raise LedgerError(f"Ledger {self._namespace} lock unavailable") from e

    def _lock(self) -> AbstractAsyncContextManager[Any]:
        return self._held_lock()
