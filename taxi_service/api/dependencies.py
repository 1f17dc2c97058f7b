"""FastAPI dependency injection helpers."""

from collections.abc import Callable
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.config import settings
from taxi_service.domain.entities import Identity
from taxi_service.domain.enums import ADMIN_ROLES, UserRole
from taxi_service.domain.errors import Forbidden, Unauthenticated
from taxi_service.infrastructure.database import async_session_factory
from taxi_service.infrastructure.redis_client import get_redis
from taxi_service.services.ledger import DriverLedger
from taxi_service.services.notifications import (
    DatabaseNotificationSink,
    NotificationSink,
    NullNotificationSink,
    RedisNotificationSink,
)
from taxi_service.services.orders import OrderService
from taxi_service.services.ratings import RatingService


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def build_notification_sink(backend: str = settings.notification_backend) -> NotificationSink:
    if backend == "database":
        return DatabaseNotificationSink(async_session_factory)
    if backend == "redis":
        return RedisNotificationSink(await get_redis(), settings.notification_channel)
    if backend == "none":
        return NullNotificationSink()
    raise ValueError(f"Unknown notification backend: {backend!r}")


async def get_notification_sink() -> NotificationSink:
    return await build_notification_sink()


# ── Identity ──────────────────────────────────────────────────────────


async def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    """Caller identity as forwarded by the authentication gateway."""
    if not x_user_id or not x_user_role:
        raise Unauthenticated()
    try:
        user_id = int(x_user_id)
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        raise Unauthenticated("Malformed identity headers") from None
    if user_id <= 0:
        raise Unauthenticated("Malformed identity headers")
    return Identity(user_id=user_id, role=role)


def require_role(*roles: UserRole) -> Callable:
    allowed = frozenset(roles)

    async def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in allowed:
            raise Forbidden(role=identity.role.value)
        return identity

    return dependency


customer = require_role(UserRole.USER)
driver = require_role(UserRole.DRIVER)
admin = require_role(*ADMIN_ROLES)


# ── Services ──────────────────────────────────────────────────────────


async def get_order_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notification_sink),
) -> OrderService:
    return OrderService(db, notifier)


async def get_ledger(db: AsyncSession = Depends(get_db)) -> DriverLedger:
    return DriverLedger(db)


async def get_rating_service(db: AsyncSession = Depends(get_db)) -> RatingService:
    return RatingService(db)
