"""
TTL cache for validated color lookups.

Two independent timers apply to every record:
- Logical expiry: an absolute timestamp embedded in the record and checked
  on every read. This alone decides freshness.
- Store retention: the backing store's own TTL, set longer than the logical
  expiry so a record is never dropped before the app would consider it stale.
  It only reclaims space.
"""

import time
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gemini_gateway.monitoring.metrics import cache_lookups_total
from gemini_gateway.persistence.store import KeyValueStore

logger = structlog.get_logger(__name__)


class CacheEntry(BaseModel):
    """Stored cache record."""
    model_config = ConfigDict(frozen=True)
    
    value: str = Field(..., min_length=1, description="Validated color code")
    expiry: float = Field(..., description="Logical expiry, epoch seconds")


class ResponseCache:
    """Cache of canonical label -> color code."""
    
    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: int = 30 * 24 * 60 * 60,
        retention_seconds: int = 31 * 24 * 60 * 60,
        key_prefix: str = "hex:",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize response cache.
        
        Args:
            store: Backing key-value store
            ttl_seconds: Logical time-to-live of an entry
            retention_seconds: Store TTL; must exceed ttl_seconds
            key_prefix: Prefix prepended to canonical keys in the store
            clock: Time source returning epoch seconds
        
        Raises:
            ValueError: retention_seconds does not exceed ttl_seconds
        """
        if retention_seconds <= ttl_seconds:
            raise ValueError(
                f"Cache retention ({retention_seconds}s) must exceed logical TTL ({ttl_seconds}s)"
            )
        self.backend = store
        self.ttl_seconds = ttl_seconds
        self.retention_seconds = retention_seconds
        self.key_prefix = key_prefix
        self._clock = clock
    
    def _store_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"
    
    async def lookup(self, key: str, bypass: bool = False) -> Optional[str]:
        """
        Return the cached value for a canonical key.
        
        Args:
            key: Canonical label
            bypass: Report a miss without reading the store
        
        Returns:
            Cached value, or None on miss/expiry/bypass
        """
        if bypass:
            cache_lookups_total.labels(result="bypass").inc()
            return None
        
        raw = await self.backend.get(self._store_key(key))
        if raw is None:
            cache_lookups_total.labels(result="miss").inc()
            return None
        
        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable cache entry", key=key, error=str(e))
            cache_lookups_total.labels(result="miss").inc()
            return None
        
        if self._clock() >= entry.expiry:
            logger.debug("Cache entry expired", key=key, expiry=entry.expiry)
            cache_lookups_total.labels(result="expired").inc()
            return None
        
        cache_lookups_total.labels(result="hit").inc()
        logger.debug("Cache hit", key=key)
        return entry.value
    
    async def store(self, key: str, value: str) -> CacheEntry:
        """
        Write value under a canonical key, replacing any previous entry.
        
        Args:
            key: Canonical label
            value: Validated color code
        
        Returns:
            The entry that was written
        """
        entry = CacheEntry(value=value, expiry=self._clock() + self.ttl_seconds)
        await self.backend.put(
            self._store_key(key),
            entry.model_dump_json(),
            ttl=self.retention_seconds,
        )
        logger.info("Cached color code", key=key, value=value, expiry=entry.expiry)
        return entry
