"""Shared Redis connection pool (locks and pub/sub notifications)."""

import redis.asyncio as aioredis

from taxi_service.config import settings

_pool = aioredis.ConnectionPool.from_url(settings.redis_url, decode_responses=True)


async def get_redis() -> aioredis.Redis:
    return aioredis.Redis(connection_pool=_pool)


async def close_redis() -> None:
    await _pool.disconnect()
