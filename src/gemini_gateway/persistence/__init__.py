"""
Backing store layer.

- redis_client.py: Redis async connection pooling
- store.py: Key-value store contract (get/put with optional TTL) and backends

Storage Strategy:
- Pool state stored as one JSON aggregate under a single key, no TTL
- Cache records stored as JSON under "hex:{canonical label}" with a TTL
- No transactions, no compare-and-swap: last writer wins
"""

from gemini_gateway.persistence.redis_client import RedisClient
from gemini_gateway.persistence.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
)

__all__ = [
    "RedisClient",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
]
