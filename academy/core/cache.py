# academy/core/cache.py
"""Redis caching implementation."""
import json
import logging
from typing import Any, Optional, Union
from datetime import timedelta
import redis.asyncio as redis
from .config import settings

logger = logging.getLogger(__name__)

class CacheManager:
    def __init__(self, url: str, enabled: bool = True, namespace: str = "academy"):
        self.url = url
        self.enabled = enabled
        self.namespace = namespace
        self.redis: Optional[redis.Redis] = None

    async def initialize(self):
        """Initialize Redis connection."""
        if self.enabled and not self.redis:
            self.redis = redis.from_url(self.url, encoding="utf-8", decode_responses=True)

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    def make_key(self, *parts: Any) -> str:
        return ":".join([self.namespace, *[str(p) for p in parts]])

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache. Failures count as a miss."""
        if not self.enabled:
            return None
        await self.initialize()
        try:
            value = await self.redis.get(key)
            return json.loads(value) if value else None
        except Exception as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """Set value in cache."""
        if not self.enabled:
            return False
        await self.initialize()
        if expire is None:
            expire = settings.cache_ttl_seconds
        if isinstance(expire, timedelta):
            expire = int(expire.total_seconds())
        try:
            return bool(await self.redis.setex(key, expire, json.dumps(value, default=str)))
        except Exception as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    async def delete_pattern(self, *parts: Any) -> int:
        """Delete every key under the given prefix."""
        if not self.enabled:
            return 0
        await self.initialize()
        pattern = self.make_key(*parts, "*")
        deleted = 0
        try:
            async for key in self.redis.scan_iter(match=pattern):
                deleted += await self.redis.delete(key)
        except Exception as e:
            logger.warning(f"Cache invalidation error for {pattern}: {e}")
        return deleted

# Global cache instance
cache_manager = CacheManager(settings.redis_url, enabled=settings.cache_enabled)
