"""Redis client wrapper for webhook de-duplication."""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client wrapper for async operations.

    When disabled (or after a failed connection) every delivery is admitted
    and the database conditional updates are the only guard.
    """

    def __init__(self, url: str, enabled: bool = False) -> None:
        """Initialize Redis client.

        Args:
            url: Redis connection URL
            enabled: Whether to connect at all
        """
        self.url = url
        self._client: aioredis.Redis | None = None
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled and self._client is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self._enabled:
            logger.info("Redis disabled - skipping connection")
            return
        if self._client is None:
            try:
                self._client = aioredis.from_url(
                    self.url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._client.ping()
                logger.info("Redis connected successfully")
            except (RedisError, OSError) as e:
                logger.warning(f"Redis connection failed: {e}. Continuing without Redis.")
                self._client = None
                self._enabled = False

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def claim(self, key: str, ttl: int) -> bool:
        """Atomically claim a key for ``ttl`` seconds.

        Args:
            key: Redis key
            ttl: Time-to-live in seconds

        Returns:
            True if this caller is the first to claim the key
        """
        if not self.enabled:
            return True
        try:
            return bool(await self._client.set(key, "processing", nx=True, ex=ttl))
        except RedisError as e:
            logger.warning(f"Redis claim failed for {key}: {e}. Admitting delivery.")
            return True

    async def release(self, key: str) -> None:
        """Drop a claim so a failed delivery can be retried."""
        if not self.enabled:
            return
        try:
            await self._client.delete(key)
        except RedisError as e:
            logger.warning(f"Redis release failed for {key}: {e}")
