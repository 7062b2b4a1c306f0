"""
Key-value store contract used for pool state and cached responses.

The store offers single-key get/put with an optional expiry and nothing
else: no multi-key transactions and no atomic read-modify-write. Callers
that update an aggregate (the credential pool) read the whole value,
modify it in memory and write it back, accepting that a concurrent writer
may overwrite their update.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

import structlog
from redis.asyncio import Redis as AsyncRedis

logger = structlog.get_logger(__name__)


class KeyValueStore(ABC):
    """Minimal async key-value store."""
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None if absent or expired."""
    
    @abstractmethod
    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store value under key, optionally expiring after ttl seconds."""
    
    async def ping(self) -> bool:
        """Lightweight reachability check. Must not raise."""
        return True
    
    async def close(self) -> None:
        """Release resources held by the store."""


class RedisKeyValueStore(KeyValueStore):
    """Store backed by a redis-py asyncio client (decode_responses=True)."""
    
    def __init__(self, redis_client: AsyncRedis):
        self.redis = redis_client
    
    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)
    
    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        if ttl:
            await self.redis.set(key, value, ex=ttl)
        else:
            await self.redis.set(key, value)
    
    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.warning("Redis ping failed", error=str(e), error_type=type(e).__name__)
            return False
    
    async def close(self) -> None:
        await self.redis.aclose()


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process store with the same contract as Redis.
    
    Used for local development (STORE_BACKEND=memory) and tests. State is
    not shared between worker processes.
    """
    
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: dict[str, tuple[str, Optional[float]]] = {}
    
    async def get(self, key: str) -> Optional[str]:
        record = self._data.get(key)
        if record is None:
            return None
        value, expires_at = record
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value
    
    async def put(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (value, expires_at)
    
    def ttl_of(self, key: str) -> Optional[float]:
        """Remaining TTL in seconds (None when the key has no expiry or is absent)."""
        record = self._data.get(key)
        if record is None or record[1] is None:
            return None
        return record[1] - self._clock()
