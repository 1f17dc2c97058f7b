"""
Order lifecycle service tests.

Covers creation and pricing, the accept precondition order, the ledger
effect of accept / cancel, deadline enforcement, terminal immutability and
the best-effort nature of refunds and notifications.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from taxi_service.domain.entities import OrderFilters, RoutePoint
from taxi_service.domain.enums import (
    DriverStatus,
    NotificationKind,
    OrderStatus,
    OrderType,
    StatisticsPeriod,
    TransactionKind,
)
from taxi_service.domain.errors import (
    AcceptDeadlineExpired,
    CannotCancel,
    DriverInactive,
    DriverNotFound,
    InsufficientBalance,
    InvalidScheduleDate,
    OrderAlreadyProcessed,
    OrderNotAvailable,
    OrderNotFound,
    OrderNotFoundOrNotYours,
    PricingNotConfigured,
    SameRegionRoute,
    ValidationError,
)
from taxi_service.domain.schedule import as_utc
from taxi_service.infrastructure.models import OrderModel, TransactionModel
from taxi_service.services.ledger import DriverLedger
from taxi_service.services.orders import EXPIRED_REASON, OrderService
from tests.conftest import (
    NOW,
    FailingSink,
    assert_ledger_balanced,
    create_driver,
    delivery_draft,
    taxi_draft,
)


@pytest.fixture
def service(db_session, sink, clock) -> OrderService:
    return OrderService(db_session, sink, clock=clock, accept_window_minutes=5)


async def _order_count(session) -> int:
    return len((await session.execute(select(OrderModel.id))).all())


# ── Create ────────────────────────────────────────────────────────────


class TestCreate:
    @pytest.mark.asyncio
    async def test_taxi_order_is_priced_and_pending(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace, 2))

        assert order.status == OrderStatus.PENDING
        assert order.order_type == OrderType.TAXI
        assert order.user_id == marketplace.customer.user_id
        assert order.driver_id is None
        assert order.price == Decimal("170000")
        assert order.discount_percentage == Decimal("10")
        assert order.service_fee == Decimal("22950")
        assert order.final_price == Decimal("175950")
        assert order.from_address == "Chilonzor 5"
        assert str(order.scheduled_date) == "2026-10-25"
        assert order.created_at is not None

    @pytest.mark.asyncio
    async def test_deadline_is_five_minutes_after_creation(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        assert as_utc(order.accept_deadline) == NOW.replace(minute=5)

    @pytest.mark.asyncio
    async def test_delivery_is_one_person_undiscounted(self, service, marketplace):
        order = await service.create_delivery_order(marketplace.customer, delivery_draft(marketplace))

        assert order.order_type == OrderType.DELIVERY
        assert order.passenger_count is None
        assert order.recipient_phone == "+998933333333"
        assert order.price == Decimal("165000")
        assert order.discount_percentage == Decimal("0")
        assert order.final_price == Decimal("189750")

    @pytest.mark.asyncio
    async def test_same_region_is_rejected_before_persisting(self, service, marketplace, db_session):
        draft = taxi_draft(
            marketplace,
            destination=RoutePoint(marketplace.tashkent, marketplace.tashkent_district),
        )
        with pytest.raises(SameRegionRoute):
            await service.create_taxi_order(marketplace.customer, draft)
        assert await _order_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_bad_date_is_rejected(self, service, marketplace, db_session):
        with pytest.raises(InvalidScheduleDate):
            await service.create_taxi_order(
                marketplace.customer, taxi_draft(marketplace, scheduled_date="2026-10-25")
            )
        assert await _order_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_route_without_tariff(self, service, marketplace):
        draft = taxi_draft(
            marketplace,
            destination=RoutePoint(marketplace.bukhara, marketplace.bukhara_district),
        )
        with pytest.raises(PricingNotConfigured):
            await service.create_taxi_order(marketplace.customer, draft)

    @pytest.mark.asyncio
    async def test_passenger_count_required_for_taxi(self, service, marketplace):
        with pytest.raises(ValidationError):
            await service.create_taxi_order(
                marketplace.customer, taxi_draft(marketplace, passenger_count=None)
            )

    @pytest.mark.asyncio
    async def test_delivery_needs_recipient(self, service, marketplace):
        with pytest.raises(ValidationError):
            await service.create_delivery_order(
                marketplace.customer, delivery_draft(marketplace, recipient_phone=None)
            )

    @pytest.mark.asyncio
    async def test_new_order_goes_to_dispatchable_drivers_only(
        self, service, marketplace, session_factory, sink
    ):
        inactive, _ = await create_driver(session_factory, "+998913000001", "Inactive", is_active=False)
        pending, _ = await create_driver(
            session_factory, "+998913000002", "Unapproved", status=DriverStatus.PENDING
        )
        blocked, _ = await create_driver(session_factory, "+998913000003", "Blocked", blocked=True)

        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))

        notified = sink.recipients_of(NotificationKind.NEW_ORDER)
        assert sorted(notified) == sorted([marketplace.driver.user_id, marketplace.rival.user_id])
        assert {o for _, _, o in sink.sent} == {order.id}
        for excluded in (inactive, pending, blocked):
            assert excluded.user_id not in notified


# ── Queries ───────────────────────────────────────────────────────────


class TestQueries:
    @pytest.mark.asyncio
    async def test_customer_only_sees_own_orders(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))

        assert (await service.get_order(marketplace.customer, order.id)).id == order.id
        assert (await service.get_order(marketplace.driver, order.id)).id == order.id
        assert (await service.get_order(marketplace.admin, order.id)).id == order.id
        with pytest.raises(OrderNotFound):
            await service.get_order(marketplace.other_customer, order.id)

    @pytest.mark.asyncio
    async def test_my_orders_newest_first_with_filters(self, service, marketplace):
        taxi = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        parcel = await service.create_delivery_order(marketplace.customer, delivery_draft(marketplace))
        await service.create_taxi_order(marketplace.other_customer, taxi_draft(marketplace))

        mine = await service.list_my_orders(marketplace.customer)
        assert [o.id for o in mine] == [parcel.id, taxi.id]

        only_taxi = await service.list_my_orders(
            marketplace.customer, OrderFilters(order_type=OrderType.TAXI)
        )
        assert [o.id for o in only_taxi] == [taxi.id]

        await service.cancel(marketplace.customer, taxi.id, "changed plans")
        cancelled = await service.list_my_orders(
            marketplace.customer, OrderFilters(status=OrderStatus.CANCELLED)
        )
        assert [o.id for o in cancelled] == [taxi.id]

    @pytest.mark.asyncio
    async def test_new_orders_exclude_expired(self, service, marketplace, clock):
        stale = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        clock.advance(minutes=3)
        fresh = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        clock.advance(minutes=2)

        # stale deadline == now, fresh has 3 minutes left
        assert [o.id for o in await service.list_new_orders()] == [fresh.id]
        assert stale.status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_new_orders_filter_by_route_and_type(self, service, marketplace):
        taxi = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.create_delivery_order(marketplace.customer, delivery_draft(marketplace))

        found = await service.list_new_orders(
            OrderFilters(order_type=OrderType.TAXI, from_region_id=marketplace.tashkent)
        )
        assert [o.id for o in found] == [taxi.id]
        assert await service.list_new_orders(OrderFilters(to_region_id=marketplace.tashkent)) == []

    @pytest.mark.asyncio
    async def test_driver_orders_require_profile(self, service, marketplace):
        with pytest.raises(DriverNotFound):
            await service.list_driver_orders(marketplace.customer)


# ── Accept ────────────────────────────────────────────────────────────


class TestAccept:
    @pytest.mark.asyncio
    async def test_accept_charges_service_fee(self, service, marketplace, db_session, sink, clock):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        clock.advance(minutes=1)

        accepted = await service.accept(marketplace.driver, order.id)

        assert accepted.status == OrderStatus.ACCEPTED
        assert accepted.driver_id == marketplace.driver_id
        assert accepted.accept_deadline is None
        assert as_utc(accepted.accepted_at) == clock()
        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("7050")

        entries = await DriverLedger(db_session).history(marketplace.driver_id)
        assert entries[0].kind == TransactionKind.DEBIT
        assert entries[0].amount == Decimal("-22950")
        assert entries[0].order_id == order.id
        assert sink.recipients_of(NotificationKind.ORDER_ACCEPTED) == [marketplace.customer.user_id]

        assert [o.id for o in await service.list_driver_orders(marketplace.driver)] == [order.id]
        assert await service.list_new_orders() == []

    @pytest.mark.asyncio
    async def test_insufficient_balance_leaves_everything_untouched(
        self, service, marketplace, db_session, session_factory
    ):
        poor, poor_id = await create_driver(
            session_factory, "+998914000001", "Poor", balance=Decimal("20000")
        )
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))

        with pytest.raises(InsufficientBalance):
            await service.accept(poor, order.id)

        assert (await service.get_order(marketplace.customer, order.id)).status == OrderStatus.PENDING
        assert await assert_ledger_balanced(db_session, poor_id) == Decimal("20000")

    @pytest.mark.asyncio
    async def test_unknown_driver_profile(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        with pytest.raises(DriverNotFound):
            await service.accept(marketplace.customer, order.id)

    @pytest.mark.asyncio
    async def test_inactive_driver_checked_before_order(self, service, marketplace, session_factory):
        inactive, _ = await create_driver(
            session_factory, "+998914000002", "Inactive", balance=Decimal("50000"), is_active=False
        )
        with pytest.raises(DriverInactive):
            await service.accept(inactive, 9999)

    @pytest.mark.asyncio
    async def test_missing_order(self, service, marketplace):
        with pytest.raises(OrderNotFound):
            await service.accept(marketplace.driver, 9999)

    @pytest.mark.asyncio
    async def test_expired_order_is_rejected_while_still_pending(self, service, marketplace, clock, db_session):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        clock.advance(minutes=5, seconds=1)

        with pytest.raises(AcceptDeadlineExpired):
            await service.accept(marketplace.driver, order.id)
        assert (await service.get_order(marketplace.admin, order.id)).status == OrderStatus.PENDING
        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("30000")

    @pytest.mark.asyncio
    async def test_second_accept_is_unavailable(self, service, marketplace, db_session):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)

        with pytest.raises(OrderNotAvailable):
            await service.accept(marketplace.rival, order.id)
        assert await assert_ledger_balanced(db_session, marketplace.rival_id) == Decimal("30000")

    @pytest.mark.asyncio
    async def test_lost_race_reports_already_processed(self, service, marketplace, db_session):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))

        # The status guard matches nothing, as if another driver won in between
        with patch.object(service.orders, "conditional_transition", AsyncMock(return_value=0)):
            with pytest.raises(OrderAlreadyProcessed):
                await service.accept(marketplace.driver, order.id)

        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("30000")
        debits = await db_session.execute(
            select(TransactionModel).where(TransactionModel.kind == TransactionKind.DEBIT)
        )
        assert debits.scalars().all() == []


# ── Complete ──────────────────────────────────────────────────────────


class TestComplete:
    @pytest.mark.asyncio
    async def test_assigned_driver_completes(self, service, marketplace, db_session, sink):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)

        done = await service.complete(marketplace.driver, order.id)

        assert done.status == OrderStatus.COMPLETED
        assert done.completed_at is not None
        assert sink.recipients_of(NotificationKind.ORDER_COMPLETED) == [marketplace.customer.user_id]
        # no ledger effect
        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("7050")

    @pytest.mark.asyncio
    async def test_other_driver_cannot_complete(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)

        with pytest.raises(OrderNotFoundOrNotYours):
            await service.complete(marketplace.rival, order.id)

    @pytest.mark.asyncio
    async def test_pending_order_cannot_be_completed(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        with pytest.raises(OrderNotFoundOrNotYours):
            await service.complete(marketplace.driver, order.id)


# ── Cancel ────────────────────────────────────────────────────────────


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_pending_has_no_ledger_effect(self, service, marketplace, db_session, sink):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))

        cancelled = await service.cancel(marketplace.customer, order.id, "changed plans")

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.cancellation_reason == "changed plans"
        assert cancelled.cancelled_at is not None
        assert cancelled.accept_deadline is None
        assert sink.recipients_of(NotificationKind.ORDER_CANCELLED) == []
        refunds = await db_session.execute(
            select(TransactionModel).where(TransactionModel.kind == TransactionKind.REFUND)
        )
        assert refunds.scalars().all() == []

    @pytest.mark.asyncio
    async def test_cancel_accepted_refunds_driver(self, service, marketplace, db_session, sink):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)

        cancelled = await service.cancel(marketplace.customer, order.id, "changed plans")

        assert cancelled.status == OrderStatus.CANCELLED
        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("30000")
        latest = (await DriverLedger(db_session).history(marketplace.driver_id))[0]
        assert latest.kind == TransactionKind.REFUND
        assert latest.amount == Decimal("22950")
        assert latest.order_id == order.id
        assert sink.recipients_of(NotificationKind.ORDER_CANCELLED) == [marketplace.driver.user_id]

    @pytest.mark.asyncio
    async def test_only_owner_can_cancel(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        with pytest.raises(OrderNotFound):
            await service.cancel(marketplace.other_customer, order.id, "not mine")

    @pytest.mark.asyncio
    async def test_completed_order_cannot_be_cancelled(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)
        await service.complete(marketplace.driver, order.id)

        with pytest.raises(CannotCancel):
            await service.cancel(marketplace.customer, order.id, "too late")

    @pytest.mark.asyncio
    async def test_concurrent_change_reports_already_processed(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        with patch.object(service.orders, "conditional_transition", AsyncMock(return_value=0)):
            with pytest.raises(OrderAlreadyProcessed):
                await service.cancel(marketplace.customer, order.id, "changed plans")

    @pytest.mark.asyncio
    async def test_refund_failure_does_not_block_cancellation(
        self, service, marketplace, db_session, caplog
    ):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)

        # The balance UPDATE runs, then recording the transaction fails:
        # the savepoint must undo the balance change too.
        failing_add = AsyncMock(side_effect=RuntimeError("ledger write failed"))
        with patch.object(service.ledger.transactions, "add", failing_add):
            cancelled = await service.cancel(marketplace.customer, order.id, "changed plans")

        assert cancelled.status == OrderStatus.CANCELLED
        assert "Refund of" in caplog.text
        assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("7050")


# ── Terminal immutability ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_terminal_orders_never_change(service, marketplace):
    completed = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
    await service.accept(marketplace.driver, completed.id)
    await service.complete(marketplace.driver, completed.id)

    cancelled = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
    await service.cancel(marketplace.customer, cancelled.id, "changed plans")

    for order_id, final in ((completed.id, OrderStatus.COMPLETED), (cancelled.id, OrderStatus.CANCELLED)):
        with pytest.raises(OrderNotAvailable):
            await service.accept(marketplace.rival, order_id)
        with pytest.raises(OrderNotFoundOrNotYours):
            await service.complete(marketplace.driver, order_id)
        with pytest.raises(CannotCancel):
            await service.cancel(marketplace.customer, order_id, "again")
        assert (await service.get_order(marketplace.admin, order_id)).status == final


# ── Notifications are best-effort ─────────────────────────────────────


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_operations(db_session, marketplace, clock, caplog):
    service = OrderService(db_session, FailingSink(), clock=clock)

    order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
    accepted = await service.accept(marketplace.driver, order.id)
    cancelled = await service.cancel(marketplace.customer, order.id, "changed plans")

    assert accepted.status == OrderStatus.ACCEPTED
    assert cancelled.status == OrderStatus.CANCELLED
    assert "Failed to deliver" in caplog.text
    assert await assert_ledger_balanced(db_session, marketplace.driver_id) == Decimal("30000")


# ── Expire ────────────────────────────────────────────────────────────


class TestExpire:
    @pytest.mark.asyncio
    async def test_overdue_pending_order_is_cancelled(self, service, marketplace, clock, sink):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        clock.advance(minutes=6)

        assert await service.expire(order.id) is True

        expired = await service.get_order(marketplace.customer, order.id)
        assert expired.status == OrderStatus.CANCELLED
        assert expired.cancellation_reason == EXPIRED_REASON
        assert sink.recipients_of(NotificationKind.ORDER_EXPIRED) == [marketplace.customer.user_id]

    @pytest.mark.asyncio
    async def test_order_inside_window_is_left_alone(self, service, marketplace):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        assert await service.expire(order.id) is False
        assert (await service.get_order(marketplace.customer, order.id)).status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_accepted_order_is_not_expired(self, service, marketplace, clock):
        order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
        await service.accept(marketplace.driver, order.id)
        clock.advance(hours=1)

        assert await service.expire(order.id) is False


# ── Returned orders ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_returned_orders_are_detached_snapshots(service, marketplace, session_factory):
    poor, _ = await create_driver(
        session_factory, "+998914000009", "Poor", balance=Decimal("100")
    )
    order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
    with pytest.raises(InsufficientBalance):
        await service.accept(poor, order.id)
    # The failed accept rolled back; the earlier result stays readable
    assert order.id is not None and order.status == OrderStatus.PENDING

    accepted = await service.accept(marketplace.driver, order.id)
    cancelled = await service.cancel(marketplace.customer, order.id, "changed plans")
    assert accepted.status == OrderStatus.ACCEPTED
    assert cancelled.status == OrderStatus.CANCELLED


# ── Statistics and admin listing ──────────────────────────────────────


async def _backdate(session, order_id: int, when: datetime) -> None:
    await session.execute(
        update(OrderModel).where(OrderModel.id == order_id).values(created_at=when)
    )
    await session.commit()


class TestDriverStatistics:
    @pytest_asyncio.fixture
    async def history(self, service, marketplace, db_session):
        """Completed last year, completed last month, accepted today (one passenger each)."""
        await DriverLedger(db_session).top_up(marketplace.driver_id, Decimal("50000"))
        placed = {}
        for name, when, finish in (
            ("last_year", datetime(2025, 12, 31, 12, 0, tzinfo=timezone.utc), True),
            ("last_month", datetime(2026, 9, 30, 12, 0, tzinfo=timezone.utc), True),
            ("today", datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc), False),
        ):
            order = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace, 1))
            await service.accept(marketplace.driver, order.id)
            if finish:
                await service.complete(marketplace.driver, order.id)
            await _backdate(db_session, order.id, when)
            placed[name] = order.id
        return placed

    @pytest.mark.asyncio
    async def test_all_time(self, service, marketplace, history):
        stats = await service.driver_statistics(marketplace.driver)

        assert stats.driver_id == marketplace.driver_id
        assert stats.period is None
        assert (stats.total_orders, stats.completed_orders) == (3, 2)
        assert stats.total_earnings == Decimal("49500.00")
        # 30000 + 50000 - 3 * 24750
        assert stats.current_balance == Decimal("5750.00")
        assert (stats.average_rating, stats.total_ratings) == (Decimal("0.00"), 0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "period, total, completed, earnings",
        [
            (StatisticsPeriod.YEARLY, 2, 1, "24750.00"),
            (StatisticsPeriod.MONTHLY, 1, 0, "0.00"),
            (StatisticsPeriod.DAILY, 1, 0, "0.00"),
        ],
    )
    async def test_period_window(self, service, marketplace, history, period, total, completed, earnings):
        stats = await service.driver_statistics(marketplace.driver, period)
        assert (stats.total_orders, stats.completed_orders) == (total, completed)
        assert stats.total_earnings == Decimal(earnings)

    @pytest.mark.asyncio
    async def test_requires_driver_profile(self, service, marketplace):
        with pytest.raises(DriverNotFound):
            await service.driver_statistics(marketplace.customer)


@pytest.mark.asyncio
async def test_list_all_orders_filters(service, marketplace, db_session):
    taxi = await service.create_taxi_order(marketplace.customer, taxi_draft(marketplace))
    parcel = await service.create_delivery_order(marketplace.other_customer, delivery_draft(marketplace))
    await service.cancel(marketplace.customer, taxi.id, "changed plans")
    await _backdate(db_session, taxi.id, datetime(2026, 10, 1, 23, 59, tzinfo=timezone.utc))
    await _backdate(db_session, parcel.id, datetime(2026, 10, 2, 0, 0, tzinfo=timezone.utc))

    async def ids(**filters):
        return [o.id for o in await service.list_all_orders(OrderFilters(**filters))]

    assert await ids() == [parcel.id, taxi.id]
    assert await ids(status=OrderStatus.CANCELLED) == [taxi.id]
    assert await ids(order_type=OrderType.DELIVERY) == [parcel.id]
    assert await ids(created_to=date(2026, 10, 1)) == [taxi.id]
    assert await ids(created_from=date(2026, 10, 2)) == [parcel.id]
    assert await ids(created_from=date(2026, 10, 3)) == []
