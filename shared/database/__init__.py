"""
Database Module
===============

Async client for the Redis store behind the persistent ledger.

Usage:
    from shared.database import RedisClient, redis_lock

    client = RedisClient.get_client()
    async with redis_lock("warranty-ledger") as acquired:
        ...
"""

from shared.database.redis import (
    RedisClient,
    redis_lock,
)


__all__ = [
    "RedisClient",
    "redis_lock",
]
