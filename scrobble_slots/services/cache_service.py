"""
Redis Cache Service for Scrobble Slots.

Caches playcounts and track lookups for a few minutes. Redis is optional:
without a REDIS_URL every lookup is a miss and every write is skipped.
"""
import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

from scrobble_slots.config import Settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Redis cache bound to the Settings it was built from.

    Connections are shared per URL across instances, so building one per
    request does not open a new pool.
    """

    _clients: dict[str, redis.Redis] = {}

    def __init__(self, settings: Settings):
        self.redis_url: Optional[str] = settings.redis_url
        self.ttl = settings.cache_ttl_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.redis_url)

    def get_client(self) -> redis.Redis | None:
        """Get or create the Redis client for this URL, or None when caching is off."""
        if not self.redis_url:
            return None
        client = self._clients.get(self.redis_url)
        if client is None:
            client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            self._clients[self.redis_url] = client
        return client

    async def get(self, key: str) -> str | None:
        """Get a value from cache."""
        try:
            client = self.get_client()
            if client is None:
                return None
            return await client.get(key)
        except Exception as e:
            # If Redis fails, return None (cache miss)
            logger.warning(f"[CacheService] get failed for {key}: {type(e).__name__}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """
        Set a value in cache with TTL.

        Args:
            key: Cache key
            value: Value to store (string)
            ttl: Time to live in seconds (defaults to cache_ttl_seconds)

        Returns:
            True if successful, False otherwise
        """
        try:
            client = self.get_client()
            if client is None:
                return False
            await client.set(key, value, ex=ttl or self.ttl)
            return True
        except Exception as e:
            logger.warning(f"[CacheService] set failed for {key}: {type(e).__name__}: {e}")
            return False

    async def get_json(self, key: str) -> Any | None:
        """Get a JSON value from cache."""
        value = await self.get(key)
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a JSON value in cache."""
        try:
            return await self.set(key, json.dumps(value), ttl)
        except (TypeError, ValueError):
            return False

    @classmethod
    async def close(cls) -> None:
        """Close every Redis connection opened by this process."""
        clients = list(cls._clients.values())
        cls._clients.clear()
        for client in clients:
            await client.aclose()


# Cache key prefixes
class CacheKeys:
    """Cache key prefixes for different data types."""

    PLAYCOUNT = "lastfm:playcount:"  # TTL: 5 min
    TRACK_BY_INDEX = "lastfm:track:"  # TTL: 5 min
