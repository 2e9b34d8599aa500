"""
Redis Cache Implementation.
Publishes monitor snapshots and caches window statistics for the Air Quality Service.
"""

import redis.asyncio as redis
from typing import Optional
import logging

from ...core.ports.cache_service import CacheService


class RedisCache(CacheService):
    """Redis implementation of the CacheService interface."""

    def __init__(
        self,
        host: str,
        port: int,
        password: Optional[str] = None,
        db: int = 0,
        default_ttl: int = 300
    ):
        """
        Initialize Redis cache settings. Call connect() before use.

        Args:
            host: Redis server host
            port: Redis server port
            password: Redis password (optional)
            db: Redis database number
            default_ttl: Default TTL in seconds
        """
        self.host = host
        self.port = port
        self.password = password
        self.db = db
        self.default_ttl = default_ttl
        self.logger = logging.getLogger(__name__)
        self._redis: Optional[redis.Redis] = None

    @property
    def is_connected(self) -> bool:
        """Check if Redis connection is active."""
        return self._redis is not None

    async def connect(self) -> bool:
        """
        Establish connection to Redis server.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            self._redis = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )
            await self._redis.ping()
            self.logger.info(f"Connected to Redis at {self.host}:{self.port}")
            return True

        except Exception as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self._redis = None
            return False

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("Disconnected from Redis")

    async def get(self, key: str) -> Optional[str]:
        if not self.is_connected:
            return None
        try:
            value = await self._redis.get(key)
            self.logger.debug(f"Cache {'HIT' if value is not None else 'MISS'} for key: {key}")
            return value
        except Exception as e:
            self.logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        if not self.is_connected:
            return False
        try:
            ttl_to_use = ttl if ttl is not None else self.default_ttl
            result = await self._redis.setex(key, ttl_to_use, value)
            self.logger.debug(f"Cache SET for key: {key} (TTL: {ttl_to_use}s)")
            return bool(result)
        except Exception as e:
            self.logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        if not self.is_connected:
            return False
        try:
            return bool(await self._redis.delete(key))
        except Exception as e:
            self.logger.error(f"Redis DELETE error for key {key}: {e}")
            return False

    async def clear_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Pattern to match keys (e.g., "airquality:*")

        Returns:
            Number of keys deleted
        """
        if not self.is_connected:
            return 0
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if not keys:
                return 0

            deleted = await self._redis.delete(*keys)
            self.logger.debug(f"Cache CLEAR pattern: {pattern} (deleted: {deleted} keys)")
            return deleted

        except Exception as e:
            self.logger.error(f"Redis CLEAR PATTERN error for pattern {pattern}: {e}")
            return 0
