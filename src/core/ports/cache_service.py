"""
Cache Service Port.
Key/value store used to publish monitor snapshots and memoize window statistics.
"""

from abc import ABC, abstractmethod
from typing import Optional, Any
import hashlib
import json


MAX_PLAIN_KEY_PARAMS = 100


class CacheService(ABC):
    """Abstract base class for cache service implementations."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the cached string, or None when missing or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """
        Store a string value.

        Args:
            key: Cache key
            value: Serialized value
            ttl: Time to live in seconds, None for the implementation default

        Returns:
            True if stored, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def clear_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern and return how many went."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    async def get_json(self, key: str) -> Optional[Any]:
        """Read a JSON document; unreadable payloads count as a miss."""
        value = await self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError:
            return None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON document. Datetimes and other objects are stringified."""
        try:
            payload = json.dumps(value, default=str, separators=(',', ':'))
        except (TypeError, ValueError):
            return False
        return await self.set(key, payload, ttl)

    def generate_cache_key(self, prefix: str, **params) -> str:
        """
        Build a key such as 'airquality:statistics:window=[]'.
        Parameters are sorted so equal inputs always give the same key; long
        parameter strings are replaced by a digest.
        """
        parts = [f"{name}={value}" for name, value in sorted(params.items()) if value is not None]
        if not parts:
            return prefix

        param_str = "&".join(parts)
        if len(param_str) > MAX_PLAIN_KEY_PARAMS:
            return f"{prefix}:{hashlib.sha256(param_str.encode()).hexdigest()[:32]}"
        return f"{prefix}:" + param_str.replace(" ", "_")


class CacheKeyPatterns:
    """Cache keys used by the air quality service."""

    MONITOR_SNAPSHOT = "airquality:snapshot"
    WINDOW_STATISTICS = "airquality:statistics"
    ALL = "airquality:*"


class CacheTTL:
    """TTL values in seconds."""

    REAL_TIME = 30   # latest reading and prediction
    SHORT = 300      # window statistics
