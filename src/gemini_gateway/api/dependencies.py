"""
FastAPI dependency injection for Gemini Gateway.

Provides singleton instances of expensive resources (settings, store,
Gemini client) and cheap per-request factories for the components built
on top of them.
"""

from functools import lru_cache

from fastapi import Depends

from gemini_gateway.cache.response_cache import ResponseCache
from gemini_gateway.config import Settings, settings
from gemini_gateway.llm.base_client import BaseLLMClient
from gemini_gateway.llm.gemini_client import GeminiClient
from gemini_gateway.persistence.redis_client import RedisClient
from gemini_gateway.persistence.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
)
from gemini_gateway.pool.manager import CredentialPool
from gemini_gateway.services.dispatcher import Dispatcher
from gemini_gateway.services.upstream import UpstreamClient


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.
    
    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_store() -> KeyValueStore:
    """
    Get the backing store singleton selected by STORE_BACKEND.
    
    Returns:
        RedisKeyValueStore (default) or MemoryKeyValueStore
    """
    app_settings = get_settings()
    if app_settings.STORE_BACKEND.lower() == "memory":
        return MemoryKeyValueStore()
    return RedisKeyValueStore(RedisClient.get_async_client(app_settings))


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton Gemini client with connection pooling.
    
    Returns:
        GeminiClient instance
    """
    app_settings = get_settings()
    return GeminiClient(
        base_url=app_settings.GEMINI_BASE_URL,
        model=app_settings.GEMINI_MODEL,
        timeout=app_settings.UPSTREAM_TIMEOUT,
    )


def get_credential_pool(
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> CredentialPool:
    """
    Create credential pool over the shared store.
    
    Not cached: the pool holds no state of its own, everything lives in
    the store.
    """
    return CredentialPool(
        store=store,
        credentials=settings.GEMINI_KEYS,
        state_key=settings.POOL_STATE_KEY,
        cooldown_seconds=settings.KEY_COOLDOWN_SECONDS,
        rate_limit_statuses=settings.RATE_LIMIT_STATUS_CODES,
        invalid_statuses=settings.INVALID_KEY_STATUS_CODES,
    )


def get_response_cache(
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ResponseCache:
    """Create response cache over the shared store."""
    return ResponseCache(
        store=store,
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        retention_seconds=settings.CACHE_RETENTION_SECONDS,
        key_prefix=settings.CACHE_KEY_PREFIX,
    )


def get_upstream_client(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    pool: CredentialPool = Depends(get_credential_pool),
    settings: Settings = Depends(get_settings),
) -> UpstreamClient:
    """Create upstream client bound to the credential pool."""
    return UpstreamClient(
        llm_client=llm_client,
        pool=pool,
        penalize_timeouts=settings.PENALIZE_TIMEOUTS,
        timeout_failure_status=settings.TIMEOUT_FAILURE_STATUS,
    )


def get_dispatcher(
    upstream: UpstreamClient = Depends(get_upstream_client),
    cache: ResponseCache = Depends(get_response_cache),
) -> Dispatcher:
    """Create dispatcher with injected dependencies."""
    return Dispatcher(upstream=upstream, cache=cache)
