"""
Shared Redis connection pool for the backing store.

Every RedisKeyValueStore in the process draws from one pool. Socket
timeouts bound how long a request can wait on the store; with Redis down,
store calls fail after REDIS_SOCKET_TIMEOUT instead of hanging.
"""

import logging
from typing import Any, Optional

from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from gemini_gateway.config import Settings

logger = logging.getLogger(__name__)


def pool_options(settings: Settings) -> dict[str, Any]:
    """Connection pool keyword arguments derived from settings."""
    return {
        "max_connections": settings.REDIS_MAX_CONNECTIONS,
        # Pool state and cache records are JSON text
        "decode_responses": True,
        "socket_timeout": settings.REDIS_SOCKET_TIMEOUT,
        "socket_connect_timeout": settings.REDIS_SOCKET_TIMEOUT,
        "retry_on_timeout": True,
        "client_name": "gemini-gateway",
    }


class RedisClient:
    """
    Process-wide holder of the async connection pool.
    
    The pool is created lazily on the first store access and released on
    application shutdown.
    """
    
    _async_pool: Optional[AsyncConnectionPool] = None
    
    @classmethod
    def get_async_client(cls, settings: Settings) -> AsyncRedis:
        """
        Get an async Redis client bound to the shared pool.
        
        Args:
            settings: Application settings (REDIS_* fields)
        
        Returns:
            AsyncRedis client instance
        """
        if cls._async_pool is None:
            cls._async_pool = AsyncConnectionPool.from_url(
                settings.REDIS_URL, **pool_options(settings)
            )
            logger.info(
                "Initialized Redis connection pool (max_connections=%d, socket_timeout=%.1fs)",
                settings.REDIS_MAX_CONNECTIONS,
                settings.REDIS_SOCKET_TIMEOUT,
            )
        
        return AsyncRedis(connection_pool=cls._async_pool)
    
    @classmethod
    async def close_async_pool(cls):
        """Disconnect and forget the pool (application shutdown)."""
        if cls._async_pool is None:
            return
        await cls._async_pool.disconnect()
        cls._async_pool = None
        logger.info("Closed Redis connection pool")
