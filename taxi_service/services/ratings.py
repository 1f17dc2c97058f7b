"""
Driver ratings.

Each completed order can be rated once by its customer.  The driver's
``rating`` / ``total_ratings`` aggregate is recomputed from the ratings
table in the same transaction as the insert, so it never drifts.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.domain.entities import Identity
from taxi_service.domain.enums import OrderStatus
from taxi_service.domain.errors import AlreadyRated, OrderNotFound, OrderNotRateable
from taxi_service.infrastructure.models import RatingModel
from taxi_service.infrastructure.repositories import (
    DriverRepository,
    OrderRepository,
    RatingRepository,
)

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.orders = OrderRepository(session)
        self.drivers = DriverRepository(session)
        self.ratings = RatingRepository(session)

    async def rate_order(
        self,
        identity: Identity,
        order_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> RatingModel:
        try:
            order = await self.orders.get_by_id(order_id, refresh=True)
            if order is None or order.user_id != identity.user_id:
                raise OrderNotFound(order_id=order_id)
            if order.status != OrderStatus.COMPLETED or order.driver_id is None:
                raise OrderNotRateable(order_id=order_id, status=order.status.value)
            if await self.ratings.get_by_order(order_id) is not None:
                raise AlreadyRated(order_id=order_id)

            try:
                entry = await self.ratings.add(
                    RatingModel(
                        order_id=order_id,
                        user_id=identity.user_id,
                        driver_id=order.driver_id,
                        rating=rating,
                        comment=comment,
                    )
                )
            except IntegrityError:
                # Unique order_id: a concurrent request rated it first
                raise AlreadyRated(order_id=order_id) from None
            average, count = await self.ratings.aggregate_for_driver(order.driver_id)
            average = Decimal(str(average)).quantize(Decimal("0.01"), ROUND_HALF_UP)
            await self.drivers.set_rating(order.driver_id, average, count)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(entry)
        logger.info(
            "Order %d rated %d by user %d; driver %d now %s over %d ratings",
            order_id,
            rating,
            identity.user_id,
            order.driver_id,
            average,
            count,
        )
        return entry

    async def list_for_driver(self, driver_id: int) -> list[RatingModel]:
        return await self.ratings.list_for_driver(driver_id)
