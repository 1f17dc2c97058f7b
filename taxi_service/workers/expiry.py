"""
Background Expiry Sweeper
=========================

Runs every ``expiry_sweep_interval_seconds`` when ``expiry_sweep_enabled``.

Accept deadlines are enforced lazily on every read and accept, so the
sweeper only tidies up: it moves pending orders whose deadline has passed
to ``cancelled`` and tells their customers.

Concurrency safety
------------------
* **Redis distributed lock** so one process sweeps per interval.
* Each order is expired through the same conditional update as a customer
  cancel, so an accept racing the sweeper wins or loses cleanly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taxi_service.config import settings
from taxi_service.domain.schedule import utcnow
from taxi_service.infrastructure.database import async_session_factory
from taxi_service.infrastructure.locks import DistributedLock
from taxi_service.infrastructure.redis_client import get_redis
from taxi_service.infrastructure.repositories import OrderRepository
from taxi_service.services.notifications import NotificationSink
from taxi_service.services.orders import OrderService

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_expiry_loop(notifier: NotificationSink) -> None:
    global _task, _stop_event
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop(notifier))
    logger.info(
        "Expiry sweeper started (interval=%ds)", settings.expiry_sweep_interval_seconds
    )


async def stop_expiry_loop() -> None:
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    logger.info("Expiry sweeper stopped")


# ── Internals ─────────────────────────────────────────────────────────


async def _loop(notifier: NotificationSink) -> None:
    assert _stop_event is not None
    while not _stop_event.is_set():
        try:
            await run_expiry_cycle(notifier)
        except Exception:
            logger.exception("Unhandled error in expiry cycle")
        try:
            await asyncio.wait_for(
                _stop_event.wait(), timeout=settings.expiry_sweep_interval_seconds
            )
            break
        except asyncio.TimeoutError:
            pass


async def run_expiry_cycle(
    notifier: NotificationSink,
    *,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    redis: Optional[aioredis.Redis] = None,
) -> int:
    """Expire one batch of overdue pending orders.  Returns how many."""
    redis = redis or await get_redis()
    lock = DistributedLock(redis, "expiry_sweeper", ttl_seconds=60)

    if not await lock.acquire():
        logger.debug("Sweeper lock held by another process, skipping cycle")
        return 0

    expired = 0
    try:
        async with session_factory() as session:
            overdue = await OrderRepository(session).find_expired(
                utcnow(), settings.expiry_sweep_batch_size
            )
            ids = [order.id for order in overdue]
            await session.commit()

            service = OrderService(session, notifier)
            for order_id in ids:
                try:
                    if await service.expire(order_id):
                        expired += 1
                except Exception:
                    logger.exception("Failed to expire order %d", order_id)
        if expired:
            logger.info("Expiry cycle: %d orders expired", expired)
    finally:
        await lock.release()

    return expired
