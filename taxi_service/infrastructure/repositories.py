"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  None of them commit: the calling service owns
the transaction boundary.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    DiscountModel,
    DriverModel,
    NotificationModel,
    OrderModel,
    PricingModel,
    RatingModel,
    TransactionModel,
    UserModel,
)
from taxi_service.domain.entities import Identity, OrderFilters
from taxi_service.domain.enums import DriverStatus, OrderStatus, UserRole
from taxi_service.domain.pricing import Tariff
from taxi_service.domain.schedule import start_of_day


def _orders():
    # UPDATEs bypass the identity map; reads must see committed rows
    return select(OrderModel).execution_options(populate_existing=True)


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: OrderModel) -> OrderModel:
        self.session.add(order)
        await self.session.flush()
        return order

    async def get_by_id(
        self, order_id: int, *, refresh: bool = False
    ) -> Optional[OrderModel]:
        return await self.session.get(
            OrderModel, order_id, populate_existing=refresh
        )

    async def get_visible(
        self, order_id: int, identity: Identity
    ) -> Optional[OrderModel]:
        """Customers only see their own orders; drivers and admins see any."""
        query = _orders().where(OrderModel.id == order_id)
        if not identity.can_see_any_order():
            query = query.where(OrderModel.user_id == identity.user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_new(
        self, now: datetime, filters: OrderFilters = OrderFilters()
    ) -> list[OrderModel]:
        query = _orders().where(
            OrderModel.status == OrderStatus.PENDING,
            or_(
                OrderModel.accept_deadline.is_(None),
                OrderModel.accept_deadline > now,
            ),
        )
        query = self._apply_filters(query, filters)
        result = await self.session.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(result.scalars().all())

    async def find_mine(
        self, user_id: int, filters: OrderFilters = OrderFilters()
    ) -> list[OrderModel]:
        query = self._apply_filters(
            _orders().where(OrderModel.user_id == user_id), filters
        )
        result = await self.session.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(result.scalars().all())

    async def find_for_driver(
        self, driver_id: int, status: Optional[OrderStatus] = None
    ) -> list[OrderModel]:
        query = self._apply_filters(
            _orders().where(OrderModel.driver_id == driver_id),
            OrderFilters(status=status),
        )
        result = await self.session.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(result.scalars().all())

    async def find_all(self, filters: OrderFilters = OrderFilters()) -> list[OrderModel]:
        query = self._apply_filters(_orders(), filters)
        result = await self.session.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(result.scalars().all())

    async def driver_totals(
        self, driver_id: int, since: Optional[datetime] = None
    ) -> tuple[int, int, Decimal]:
        """(all orders, completed orders, service fees of completed orders)."""
        completed = OrderModel.status == OrderStatus.COMPLETED
        query = select(
            func.count(OrderModel.id),
            func.count(case((completed, 1))),
            func.coalesce(func.sum(case((completed, OrderModel.service_fee), else_=0)), 0),
        ).where(OrderModel.driver_id == driver_id)
        if since is not None:
            query = query.where(OrderModel.created_at >= since)
        total, done, earnings = (await self.session.execute(query)).one()
        return int(total), int(done), Decimal(str(earnings or 0))

    async def find_expired(self, now: datetime, limit: int = 100) -> list[OrderModel]:
        result = await self.session.execute(
            _orders()
            .where(
                OrderModel.status == OrderStatus.PENDING,
                OrderModel.accept_deadline.is_not(None),
                OrderModel.accept_deadline <= now,
            )
            .order_by(OrderModel.accept_deadline)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def conditional_transition(
        self,
        order_id: int,
        expected: OrderStatus | Iterable[OrderStatus],
        values: dict[str, Any],
        *,
        assigned_driver_id: Optional[int] = None,
    ) -> int:
        """
        ``UPDATE orders SET ... WHERE id = ? AND status IN (expected)``.

        The only mutation path for ``status``.  Returns the affected row
        count: 0 means the guard did not match (lost race, wrong state or
        wrong driver).
        """
        statuses = [expected] if isinstance(expected, OrderStatus) else list(expected)
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status.in_(statuses))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if assigned_driver_id is not None:
            stmt = stmt.where(OrderModel.driver_id == assigned_driver_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    @staticmethod
    def _apply_filters(query, filters: OrderFilters):
        if filters.status is not None:
            query = query.where(OrderModel.status == filters.status)
        if filters.order_type is not None:
            query = query.where(OrderModel.order_type == filters.order_type)
        if filters.from_region_id is not None:
            query = query.where(OrderModel.from_region_id == filters.from_region_id)
        if filters.to_region_id is not None:
            query = query.where(OrderModel.to_region_id == filters.to_region_id)
        if filters.created_from is not None:
            query = query.where(OrderModel.created_at >= start_of_day(filters.created_from))
        if filters.created_to is not None:
            query = query.where(
                OrderModel.created_at < start_of_day(filters.created_to + timedelta(days=1))
            )
        return query


class DriverRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(
        self, driver_id: int, *, refresh: bool = False
    ) -> Optional[DriverModel]:
        return await self.session.get(
            DriverModel, driver_id, populate_existing=refresh
        )

    async def get_by_user_id(self, user_id: int) -> Optional[DriverModel]:
        result = await self.session.execute(
            select(DriverModel)
            .where(DriverModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def dispatchable_user_ids(self) -> list[int]:
        """Users of approved, active drivers whose account is not blocked."""
        result = await self.session.execute(
            select(UserModel.id)
            .join(DriverModel, DriverModel.user_id == UserModel.id)
            .where(
                UserModel.role == UserRole.DRIVER,
                UserModel.is_blocked.is_(False),
                DriverModel.status == DriverStatus.APPROVED,
                DriverModel.is_active.is_(True),
            )
            .order_by(UserModel.id)
        )
        return list(result.scalars().all())

    async def add_to_balance(
        self, driver_id: int, delta: Decimal, *, floor: Optional[Decimal] = None
    ) -> int:
        """
        ``UPDATE drivers SET balance = balance + :delta`` as one statement.

        With *floor*, the row only changes while ``balance >= floor``;
        returns the affected row count.
        """
        stmt = (
            update(DriverModel)
            .where(DriverModel.id == driver_id)
            .values(balance=DriverModel.balance + delta)
            .execution_options(synchronize_session=False)
        )
        if floor is not None:
            stmt = stmt.where(DriverModel.balance >= floor)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def set_rating(self, driver_id: int, average: Decimal, count: int) -> None:
        await self.session.execute(
            update(DriverModel)
            .where(DriverModel.id == driver_id)
            .values(rating=average, total_ratings=count)
            .execution_options(synchronize_session=False)
        )


class PricingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_tariff(self, from_region_id: int, to_region_id: int) -> Optional[Tariff]:
        result = await self.session.execute(
            select(PricingModel).where(
                PricingModel.from_region_id == from_region_id,
                PricingModel.to_region_id == to_region_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return Tariff(
            base_price=Decimal(row.base_price),
            price_per_person=Decimal(row.price_per_person),
            service_fee_pct=Decimal(row.service_fee),
        )

    async def get_discount_pct(self, passenger_count: int) -> Optional[Decimal]:
        result = await self.session.execute(
            select(DiscountModel.discount_percentage).where(
                DiscountModel.passenger_count == passenger_count
            )
        )
        value = result.scalar_one_or_none()
        return Decimal(value) if value is not None else None


class TransactionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, entry: TransactionModel) -> TransactionModel:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_driver(
        self, driver_id: int, limit: int = 100
    ) -> list[TransactionModel]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(TransactionModel.driver_id == driver_id)
            .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def sum_for_driver(self, driver_id: int) -> Decimal:
        result = await self.session.execute(
            select(func.coalesce(func.sum(TransactionModel.amount), 0)).where(
                TransactionModel.driver_id == driver_id
            )
        )
        return Decimal(str(result.scalar() or 0))


class RatingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, rating: RatingModel) -> RatingModel:
        self.session.add(rating)
        await self.session.flush()
        return rating

    async def get_by_order(self, order_id: int) -> Optional[RatingModel]:
        result = await self.session.execute(
            select(RatingModel).where(RatingModel.order_id == order_id)
        )
        return result.scalar_one_or_none()

    async def aggregate_for_driver(self, driver_id: int) -> tuple[float, int]:
        result = await self.session.execute(
            select(func.avg(RatingModel.rating), func.count()).where(
                RatingModel.driver_id == driver_id
            )
        )
        average, count = result.one()
        return float(average or 0), int(count)

    async def list_for_driver(self, driver_id: int) -> list[RatingModel]:
        result = await self.session.execute(
            select(RatingModel)
            .where(RatingModel.driver_id == driver_id)
            .order_by(RatingModel.created_at.desc(), RatingModel.id.desc())
        )
        return list(result.scalars().all())


class NotificationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_many(self, rows: list[NotificationModel]) -> None:
        self.session.add_all(rows)
        await self.session.flush()

    async def list_for_user(self, user_id: int, limit: int = 50) -> list[NotificationModel]:
        result = await self.session.execute(
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def mark_read(self, notification_id: int, user_id: int) -> Optional[NotificationModel]:
        """Flag one of *user_id*'s notifications as read; None if not theirs."""
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            return None
        return await self.session.get(
            NotificationModel, notification_id, populate_existing=True
        )
