"""Redis key-value backend."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import PersistenceError
from .base import KeyValueBackend


class RedisBackend(KeyValueBackend):
    """Redis-backed key-value storage."""
    
    name = "redis"
    
    def __init__(
        self,
        redis_url: str,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis backend.
        
        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = None
    
    async def connect(self) -> None:
        """Connect to Redis."""
        if self.client is not None:
            return
        
        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except RedisError as e:
            self.client = None
            raise PersistenceError(f"Failed to connect to Redis: {e}") from e
    
    async def get(self, key: str) -> Optional[str]:
        await self.connect()
        try:
            return await self.client.get(key)
        except RedisError as e:
            raise PersistenceError(f"Redis get error: {e}") from e
    
    async def set(self, key: str, value: str) -> None:
        await self.connect()
        try:
            await self.client.set(key, value)
        except RedisError as e:
            raise PersistenceError(f"Redis set error: {e}") from e
    
    async def delete(self, key: str) -> bool:
        await self.connect()
        try:
            result = await self.client.delete(key)
            return result > 0
        except RedisError as e:
            raise PersistenceError(f"Redis delete error: {e}") from e
    
    async def ping(self) -> bool:
        try:
            await self.connect()
            return bool(await self.client.ping())
        except (PersistenceError, RedisError) as e:
            self.logger.error(f"Redis unhealthy: {e}")
            return False
    
    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
