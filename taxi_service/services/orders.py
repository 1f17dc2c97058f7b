"""
Order lifecycle service -- the single canonical implementation of
create / accept / complete / cancel / expire.

Patterns used
-------------
- **Unit of Work**: every operation runs in one session transaction that is
  committed on success and rolled back on any exception.
- **Optimistic guard**: status changes go through
  ``OrderRepository.conditional_transition`` (``UPDATE ... WHERE status =
  expected``).  Losing a race shows up as zero affected rows.
- **Post-commit side effects**: notifications are sent only after the commit
  and through ``notify_safely``; they can never undo a transition.

Concurrency
-----------
Two drivers accepting the same order both pass the in-memory precondition
checks, but only one ``UPDATE`` matches ``status = 'pending'``.  The loser
rolls back before touching the ledger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.config import settings
from taxi_service.domain.entities import (
    DriverStatistics,
    Identity,
    Order,
    OrderDraft,
    OrderFilters,
)
from taxi_service.domain.enums import (
    NotificationKind,
    OrderStatus,
    OrderType,
    StatisticsPeriod,
    TransactionKind,
)
from taxi_service.domain.errors import (
    DriverInactive,
    DriverNotFound,
    InsufficientBalance,
    OrderAlreadyProcessed,
    OrderNotFound,
    OrderNotFoundOrNotYours,
    SameRegionRoute,
    ValidationError,
)
from taxi_service.domain.pricing import FareQuote, to_money
from taxi_service.domain.schedule import (
    accept_deadline,
    parse_scheduled_date,
    period_start,
    utcnow,
)
from taxi_service.infrastructure.models import DriverModel, OrderModel
from taxi_service.infrastructure.repositories import DriverRepository, OrderRepository
from .fares import FareService
from .ledger import DriverLedger
from .notifications import NotificationSink, notify_safely

logger = logging.getLogger(__name__)

EXPIRED_REASON = "accept deadline expired"
MAX_PASSENGERS = 4


class OrderService:
    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationSink,
        *,
        clock: Callable[[], datetime] = utcnow,
        accept_window_minutes: int = settings.accept_window_minutes,
    ):
        self.session = session
        self.notifier = notifier
        self.clock = clock
        self.accept_window_minutes = accept_window_minutes
        self.orders = OrderRepository(session)
        self.drivers = DriverRepository(session)
        self.fares = FareService(session)
        self.ledger = DriverLedger(session)

    @asynccontextmanager
    async def _unit_of_work(self):
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def _snapshot(self, order_id: int) -> OrderModel:
        """Committed state of the order, detached from the session."""
        row = await self.orders.get_by_id(order_id, refresh=True)
        self.session.expunge(row)
        return row

    # ── Create ─────────────────────────────────────────────────────────

    async def create_taxi_order(self, identity: Identity, draft: OrderDraft) -> OrderModel:
        count = draft.passenger_count
        if count is None or not 1 <= count <= MAX_PASSENGERS:
            raise ValidationError(
                f"Passenger count must be between 1 and {MAX_PASSENGERS}",
                passenger_count=count,
            )
        self._check_route(draft)
        scheduled = parse_scheduled_date(draft.scheduled_date)
        quote = await self.fares.quote_taxi(
            draft.origin.region_id, draft.destination.region_id, count
        )
        return await self._create(identity, draft, OrderType.TAXI, scheduled, quote)

    async def create_delivery_order(
        self, identity: Identity, draft: OrderDraft
    ) -> OrderModel:
        if draft.delivery_type is None or not draft.recipient_phone:
            raise ValidationError("Delivery type and recipient phone are required")
        self._check_route(draft)
        scheduled = parse_scheduled_date(draft.scheduled_date)
        quote = await self.fares.quote_delivery(
            draft.origin.region_id, draft.destination.region_id
        )
        return await self._create(identity, draft, OrderType.DELIVERY, scheduled, quote)

    @staticmethod
    def _check_route(draft: OrderDraft) -> None:
        if draft.origin.region_id == draft.destination.region_id:
            raise SameRegionRoute(region_id=draft.origin.region_id)

    async def _create(self, identity, draft, order_type, scheduled, quote: FareQuote):
        now = self.clock()
        origin, destination = draft.origin, draft.destination
        async with self._unit_of_work():
            order = await self.orders.create(
                OrderModel(
                    user_id=identity.user_id,
                    order_type=order_type,
                    status=OrderStatus.PENDING,
                    customer_name=draft.customer_name,
                    customer_phone=draft.customer_phone,
                    recipient_phone=draft.recipient_phone,
                    from_region_id=origin.region_id,
                    from_district_id=origin.district_id,
                    from_latitude=origin.latitude,
                    from_longitude=origin.longitude,
                    from_address=origin.address,
                    to_region_id=destination.region_id,
                    to_district_id=destination.district_id,
                    to_latitude=destination.latitude,
                    to_longitude=destination.longitude,
                    to_address=destination.address,
                    passenger_count=draft.passenger_count,
                    delivery_type=draft.delivery_type,
                    scheduled_date=scheduled,
                    time_range_start=draft.time_range_start,
                    time_range_end=draft.time_range_end,
                    price=quote.price,
                    service_fee=quote.service_fee,
                    discount_percentage=quote.discount_pct,
                    final_price=quote.final_price,
                    notes=draft.notes,
                    accept_deadline=accept_deadline(now, self.accept_window_minutes),
                )
            )
            order_id = order.id

        logger.info(
            "Order %d created by user %d (%s, final=%s)",
            order_id,
            identity.user_id,
            order_type.value,
            quote.final_price,
        )
        order = await self._snapshot(order_id)
        await self._broadcast_new_order(order_id)
        return order

    async def _broadcast_new_order(self, order_id: int) -> None:
        try:
            recipients = await self.drivers.dispatchable_user_ids()
        except Exception:
            await self.session.rollback()
            logger.exception("Could not load drivers to notify about order %d", order_id)
            return
        await notify_safely(self.notifier, recipients, NotificationKind.NEW_ORDER, order_id)

    # ── Queries ────────────────────────────────────────────────────────

    async def get_order(self, identity: Identity, order_id: int) -> OrderModel:
        order = await self.orders.get_visible(order_id, identity)
        if order is None:
            raise OrderNotFound(order_id=order_id)
        return order

    async def list_my_orders(
        self, identity: Identity, filters: OrderFilters = OrderFilters()
    ) -> list[OrderModel]:
        return await self.orders.find_mine(identity.user_id, filters)

    async def list_new_orders(
        self, filters: OrderFilters = OrderFilters()
    ) -> list[OrderModel]:
        """Pending orders still inside their accept window."""
        return await self.orders.find_new(self.clock(), filters)

    async def list_driver_orders(
        self, identity: Identity, status: Optional[OrderStatus] = None
    ) -> list[OrderModel]:
        driver = await self._driver_for(identity)
        return await self.orders.find_for_driver(driver.id, status)

    async def list_all_orders(
        self, filters: OrderFilters = OrderFilters()
    ) -> list[OrderModel]:
        return await self.orders.find_all(filters)

    async def driver_statistics(
        self, identity: Identity, period: Optional[StatisticsPeriod] = None
    ) -> DriverStatistics:
        """
        Order counts and earnings for the calling driver.

        With a *period* only orders created since the start of the current
        UTC day, month or year are counted.  Balance and rating are always
        the current values.
        """
        driver = await self._driver_for(identity)
        since = period_start(self.clock(), period) if period is not None else None
        total, completed, earnings = await self.orders.driver_totals(driver.id, since)
        return DriverStatistics(
            driver_id=driver.id,
            period=period,
            total_orders=total,
            completed_orders=completed,
            total_earnings=to_money(earnings),
            current_balance=to_money(Decimal(str(driver.balance))),
            average_rating=to_money(Decimal(str(driver.rating))),
            total_ratings=driver.total_ratings,
        )

    async def _driver_for(self, identity: Identity) -> DriverModel:
        driver = await self.drivers.get_by_user_id(identity.user_id)
        if driver is None:
            raise DriverNotFound(user_id=identity.user_id)
        return driver

    # ── Transitions ────────────────────────────────────────────────────

    async def accept(self, identity: Identity, order_id: int) -> OrderModel:
        """
        Assign the order to the calling driver and charge the service fee.

        Preconditions are checked in order; the first failure wins.  The
        status guard and the ledger debit share one transaction, so either
        both land or neither does.
        """
        now = self.clock()
        async with self._unit_of_work():
            driver = await self._driver_for(identity)
            if not driver.is_active:
                raise DriverInactive(driver_id=driver.id)

            row = await self.orders.get_by_id(order_id, refresh=True)
            if row is None:
                raise OrderNotFound(order_id=order_id)
            order = row.to_entity()
            order.ensure_acceptable(now)

            fee = Decimal(str(order.service_fee))
            if Decimal(str(driver.balance)) < fee:
                raise InsufficientBalance(
                    driver_id=driver.id, required=str(fee), balance=str(driver.balance)
                )

            order.transition_to(OrderStatus.ACCEPTED)
            updated = await self.orders.conditional_transition(
                order_id,
                OrderStatus.PENDING,
                {
                    "driver_id": driver.id,
                    "status": OrderStatus.ACCEPTED,
                    "accepted_at": now,
                    "accept_deadline": None,
                },
            )
            if not updated:
                logger.warning(
                    "Driver %d lost the race for order %d", driver.id, order_id
                )
                raise OrderAlreadyProcessed(order_id=order_id)

            await self.ledger.debit(driver.id, fee, order_id=order_id)

        logger.info("Order %d accepted by driver %d", order_id, driver.id)
        row = await self._snapshot(order_id)
        await notify_safely(
            self.notifier, [row.user_id], NotificationKind.ORDER_ACCEPTED, order_id
        )
        return row

    async def complete(self, identity: Identity, order_id: int) -> OrderModel:
        now = self.clock()
        async with self._unit_of_work():
            driver = await self._driver_for(identity)
            updated = await self.orders.conditional_transition(
                order_id,
                OrderStatus.ACCEPTED,
                {"status": OrderStatus.COMPLETED, "completed_at": now},
                assigned_driver_id=driver.id,
            )
            if not updated:
                raise OrderNotFoundOrNotYours(order_id=order_id)

        logger.info("Order %d completed by driver %d", order_id, driver.id)
        row = await self._snapshot(order_id)
        await notify_safely(
            self.notifier, [row.user_id], NotificationKind.ORDER_COMPLETED, order_id
        )
        return row

    async def cancel(self, identity: Identity, order_id: int, reason: str) -> OrderModel:
        """
        Cancel a pending or accepted order on behalf of its owner.

        An assigned driver gets the service fee back inside a savepoint: if
        the refund fails only the savepoint is rolled back and the
        cancellation still commits.
        """
        now = self.clock()
        async with self._unit_of_work():
            row = await self.orders.get_by_id(order_id, refresh=True)
            if row is None or row.user_id != identity.user_id:
                raise OrderNotFound(order_id=order_id)
            order = row.to_entity()
            order.ensure_cancellable()

            observed = order.status
            order.transition_to(OrderStatus.CANCELLED)
            updated = await self.orders.conditional_transition(
                order_id,
                observed,
                {
                    "status": OrderStatus.CANCELLED,
                    "cancellation_reason": reason,
                    "cancelled_at": now,
                    "accept_deadline": None,
                },
            )
            if not updated:
                logger.warning(
                    "Order %d changed while user %d was cancelling it",
                    order_id,
                    identity.user_id,
                )
                raise OrderAlreadyProcessed(order_id=order_id)

            if order.has_driver:
                await self._refund(order)

        logger.info(
            "Order %d cancelled by user %d (was %s)",
            order_id,
            identity.user_id,
            observed.value,
        )
        row = await self._snapshot(order_id)
        if order.has_driver:
            await self._notify_driver(order.driver_id, NotificationKind.ORDER_CANCELLED, order_id)
        return row

    async def _refund(self, order: Order) -> None:
        fee = Decimal(str(order.service_fee))
        if fee <= 0:
            return
        try:
            async with self.session.begin_nested():
                await self.ledger.credit(
                    order.driver_id,
                    fee,
                    kind=TransactionKind.REFUND,
                    order_id=order.id,
                    description="Refund for cancelled order",
                )
        except Exception:
            logger.exception(
                "Refund of %s to driver %d for cancelled order %d failed",
                fee,
                order.driver_id,
                order.id,
            )

    async def _notify_driver(
        self, driver_id: int, kind: NotificationKind, order_id: int
    ) -> None:
        try:
            driver = await self.drivers.get_by_id(driver_id)
        except Exception:
            await self.session.rollback()
            logger.exception("Could not load driver %d to notify", driver_id)
            return
        if driver is not None:
            await notify_safely(self.notifier, [driver.user_id], kind, order_id)

    async def expire(self, order_id: int) -> bool:
        """Auto-cancel a pending order whose accept deadline has passed."""
        now = self.clock()
        async with self._unit_of_work():
            row = await self.orders.get_by_id(order_id, refresh=True)
            if row is None or not row.to_entity().is_expired(now):
                return False
            updated = await self.orders.conditional_transition(
                order_id,
                OrderStatus.PENDING,
                {
                    "status": OrderStatus.CANCELLED,
                    "cancellation_reason": EXPIRED_REASON,
                    "cancelled_at": now,
                    "accept_deadline": None,
                },
            )
        if not updated:
            return False

        logger.info("Order %d expired without a driver", order_id)
        await notify_safely(
            self.notifier, [row.user_id], NotificationKind.ORDER_EXPIRED, order_id
        )
        return True
