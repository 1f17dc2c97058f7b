"""
Notification sinks.

The order core only ever calls ``NotificationSink.notify`` /
``notify_many`` *after* its transaction has committed, through
``notify_safely`` which logs and drops failures so a notification can never
fail or roll back an order transition.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taxi_service.domain.enums import NotificationKind
from taxi_service.infrastructure.models import NotificationModel
from taxi_service.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

TEMPLATES: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.NEW_ORDER: (
        "New Order Available",
        "A new order #{order_id} is available. Check your orders page.",
    ),
    NotificationKind.ORDER_ACCEPTED: (
        "Order Accepted",
        "A driver accepted your order #{order_id}.",
    ),
    NotificationKind.ORDER_COMPLETED: (
        "Order Completed",
        "Your order #{order_id} is completed. Please rate your driver.",
    ),
    NotificationKind.ORDER_CANCELLED: (
        "Order Cancelled",
        "Order #{order_id} was cancelled by the customer.",
    ),
    NotificationKind.ORDER_EXPIRED: (
        "Order Expired",
        "No driver accepted order #{order_id} in time. Please place it again.",
    ),
}


def render(kind: NotificationKind, order_id: Optional[int]) -> tuple[str, str]:
    title, message = TEMPLATES[kind]
    return title, message.format(order_id=order_id)


class NotificationSink(ABC):
    @abstractmethod
    async def notify_many(
        self,
        recipients: Sequence[int],
        kind: NotificationKind,
        order_id: Optional[int] = None,
    ) -> None: ...

    async def notify(
        self,
        recipient_user_id: int,
        kind: NotificationKind,
        order_id: Optional[int] = None,
    ) -> None:
        await self.notify_many([recipient_user_id], kind, order_id)


class NullNotificationSink(NotificationSink):
    async def notify_many(self, recipients, kind, order_id=None) -> None:
        logger.debug("Dropping %s notification for %d recipients", kind.value, len(recipients))


class DatabaseNotificationSink(NotificationSink):
    """Stores notifications in the ``notifications`` table, own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def notify_many(self, recipients, kind, order_id=None) -> None:
        if not recipients:
            return
        title, message = render(kind, order_id)
        async with self.session_factory() as session:
            await NotificationRepository(session).add_many(
                [
                    NotificationModel(
                        user_id=user_id,
                        title=title,
                        message=message,
                        kind=kind,
                        related_id=order_id,
                    )
                    for user_id in recipients
                ]
            )
            await session.commit()


class RedisNotificationSink(NotificationSink):
    """Publishes one JSON message per recipient on a pub/sub channel."""

    def __init__(self, client: aioredis.Redis, channel: str):
        self.redis = client
        self.channel = channel

    async def notify_many(self, recipients, kind, order_id=None) -> None:
        title, message = render(kind, order_id)
        for user_id in recipients:
            payload = {
                "recipient_user_id": user_id,
                "type": kind.value,
                "data": {"order_id": order_id, "title": title, "message": message},
            }
            await self.redis.publish(self.channel, json.dumps(payload))


async def notify_safely(
    sink: NotificationSink,
    recipients: Sequence[int],
    kind: NotificationKind,
    order_id: Optional[int] = None,
) -> None:
    try:
        await sink.notify_many(recipients, kind, order_id)
    except Exception:
        logger.exception(
            "Failed to deliver %s notification for order %s", kind.value, order_id
        )
