import logging
from typing import Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class CacheService:
    """Thin wrapper around an async Redis client.

    If *redis_client* is ``None`` (Redis unavailable), every operation
    degrades to a no-op; callers never need to check for ``None``.
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis: Optional[Redis] = redis_client

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (best-effort)."""
        if self._redis is None:
            return
        try:
            await self._redis.delete(key)
        except Exception:
            logger.warning("Redis DELETE failed for key %s", key)

    # ------------------------------------------------------------------
    # Atomic counter used by the rotating round-robin cursor
    # ------------------------------------------------------------------

    async def incr(self, key: str, ttl: int | None = None) -> Optional[int]:
        """Increment an integer counter and return the new value.

        Returns ``None`` if Redis is unavailable so the caller can
        fall back to random selection.
        """
        if self._redis is None:
            return None
        try:
            value = await self._redis.incr(key)
            if ttl:
                await self._redis.expire(key, ttl)
            return value
        except Exception:
            logger.warning("Redis INCR failed for key %s", key)
            return None

    @property
    def is_available(self) -> bool:
        """Return ``True`` if a Redis client is configured."""
        return self._redis is not None
