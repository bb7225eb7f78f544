"""
Redis client used for token revocation lists.
"""

import redis.asyncio as redis
from parcel_tracker.app.core.config import settings


redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """FastAPI dependency returning the shared Redis client."""
    return redis_client


async def close_redis() -> None:
    """Close the shared connection pool on application shutdown."""
    await redis_client.aclose()
