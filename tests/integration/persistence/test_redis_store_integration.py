"""
Integration tests for RedisKeyValueStore against a live Redis (db 15).
"""

import pytest
from redis.asyncio import Redis as AsyncRedis

from gemini_gateway.cache.response_cache import ResponseCache
from gemini_gateway.persistence.store import RedisKeyValueStore
from gemini_gateway.pool.manager import CredentialPool

pytestmark = pytest.mark.usefixtures("check_redis")


@pytest.mark.asyncio
async def test_put_get_with_ttl():
    redis = AsyncRedis.from_url("redis://localhost:6379/15", decode_responses=True)
    await redis.flushdb()
    store = RedisKeyValueStore(redis)
    try:
        await store.put("hex:blue sky", '{"value": "#87CEEB", "expiry": 1}', ttl=120)
        
        assert await store.get("hex:blue sky") == '{"value": "#87CEEB", "expiry": 1}'
        assert 0 < await redis.ttl("hex:blue sky") <= 120
        assert await store.ping() is True
    finally:
        await redis.flushdb()
        await store.close()


@pytest.mark.asyncio
async def test_pool_and_cache_over_redis():
    redis = AsyncRedis.from_url("redis://localhost:6379/15", decode_responses=True)
    await redis.flushdb()
    store = RedisKeyValueStore(redis)
    try:
        pool = CredentialPool(store=store, credentials=["key-one-000001", "key-two-000002"])
        cache = ResponseCache(store=store)
        
        await pool.report_failure("key-one-000001", 403)
        assert await pool.select_credential() == "key-two-000002"
        assert await redis.ttl("state") == -1
        
        await cache.store("blue sky", "#87CEEB")
        assert await cache.lookup("blue sky") == "#87CEEB"
        assert await redis.ttl("hex:blue sky") > 30 * 24 * 60 * 60
    finally:
        await redis.flushdb()
        await store.close()
