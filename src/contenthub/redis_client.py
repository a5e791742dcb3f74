"""Redis connection pool — used by the rate limiter.

Learn: One pool per process, opened in the app lifespan and closed on
shutdown. Redis is optional: when it is down the app keeps serving and
rate limiting is simply skipped.
"""

from typing import Optional

import redis.asyncio as aioredis

# Global Redis connection pool (initialized in lifespan)
_redis: Optional[aioredis.Redis] = None


async def init_redis(url: str) -> aioredis.Redis:
    """Initialize the Redis connection pool."""
    global _redis
    _redis = aioredis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Verify connection; drop the pool if Redis is unreachable
    try:
        await _redis.ping()
    except Exception:
        await close_redis()
        raise
    return _redis


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_redis() -> aioredis.Redis:
    """Get the Redis connection (must be initialized first)."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
