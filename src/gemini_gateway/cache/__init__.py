"""
Response cache for color lookups.

- canonical.py: Label canonicalization (order, case and punctuation insensitive)
- response_cache.py: TTL cache on top of the key-value store
"""

from gemini_gateway.cache.canonical import canonicalize
from gemini_gateway.cache.response_cache import CacheEntry, ResponseCache

__all__ = [
    "canonicalize",
    "CacheEntry",
    "ResponseCache",
]
