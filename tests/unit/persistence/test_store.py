"""Unit tests for key-value store backends."""

import pytest

from gemini_gateway.persistence.store import MemoryKeyValueStore, RedisKeyValueStore


class TestRedisKeyValueStore:
    
    @pytest.mark.asyncio
    async def test_get(self, mock_async_redis):
        mock_async_redis.get.return_value = '{"value": "#FFF"}'
        store = RedisKeyValueStore(mock_async_redis)
        
        assert await store.get("hex:white") == '{"value": "#FFF"}'
        mock_async_redis.get.assert_awaited_once_with("hex:white")
    
    @pytest.mark.asyncio
    async def test_put_with_ttl(self, mock_async_redis):
        store = RedisKeyValueStore(mock_async_redis)
        
        await store.put("hex:white", "{}", ttl=60)
        
        mock_async_redis.set.assert_awaited_once_with("hex:white", "{}", ex=60)
    
    @pytest.mark.asyncio
    async def test_put_without_ttl(self, mock_async_redis):
        store = RedisKeyValueStore(mock_async_redis)
        
        await store.put("state", "{}")
        
        mock_async_redis.set.assert_awaited_once_with("state", "{}")
    
    @pytest.mark.asyncio
    async def test_ping(self, mock_async_redis):
        mock_async_redis.ping.return_value = True
        assert await RedisKeyValueStore(mock_async_redis).ping() is True
        
        mock_async_redis.ping.side_effect = ConnectionError("refused")
        assert await RedisKeyValueStore(mock_async_redis).ping() is False
    
    @pytest.mark.asyncio
    async def test_close(self, mock_async_redis):
        await RedisKeyValueStore(mock_async_redis).close()
        mock_async_redis.aclose.assert_awaited_once()


class TestMemoryKeyValueStore:
    
    @pytest.mark.asyncio
    async def test_get_put(self, memory_store):
        assert await memory_store.get("missing") is None
        
        await memory_store.put("state", "{}")
        
        assert await memory_store.get("state") == "{}"
        assert memory_store.ttl_of("state") is None
    
    @pytest.mark.asyncio
    async def test_ttl_expiry(self, memory_store, fake_clock):
        await memory_store.put("hex:red", "v", ttl=10)
        
        fake_clock.advance(9)
        assert await memory_store.get("hex:red") == "v"
        
        fake_clock.advance(1)
        assert await memory_store.get("hex:red") is None
        assert memory_store.ttl_of("hex:red") is None
    
    @pytest.mark.asyncio
    async def test_overwrite_resets_ttl(self, memory_store, fake_clock):
        await memory_store.put("k", "old", ttl=10)
        await memory_store.put("k", "new")
        
        fake_clock.advance(100)
        
        assert await memory_store.get("k") == "new"
    
    @pytest.mark.asyncio
    async def test_ping(self):
        assert await MemoryKeyValueStore().ping() is True
