"""Shared Redis client for publishing and streaming."""

from __future__ import annotations

from redis.asyncio import Redis

from rendersync.core.config import settings

# Module-level client, lazily initialised on first use.
_redis_pool: Redis | None = None


def get_redis() -> Redis:
    """Return the shared Redis client, creating it on first use."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = Redis.from_url(
            settings.redis_url,
            decode_responses=False,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the shared Redis client. Called on application shutdown."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
