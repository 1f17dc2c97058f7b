"""
Shared test fixtures.

Uses a file-backed SQLite database (via aiosqlite) under ``tmp_path`` so
tests run without Docker / PostgreSQL / Redis while every session still
gets its own connection, as it would against PostgreSQL.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taxi_service.domain.entities import Identity, OrderDraft, RoutePoint
from taxi_service.domain.enums import DeliveryType, DriverStatus, UserRole
from taxi_service.infrastructure import models  # noqa: F401  registers tables
from taxi_service.infrastructure.database import Base
from taxi_service.infrastructure.models import (
    DiscountModel,
    DistrictModel,
    DriverModel,
    PricingModel,
    RegionModel,
    UserModel,
)
from taxi_service.services.ledger import DriverLedger
from taxi_service.services.notifications import NotificationSink

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


# ── Test doubles ──────────────────────────────────────────────────────


class FrozenClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


class RecordingSink(NotificationSink):
    def __init__(self):
        self.sent: list[tuple] = []

    async def notify_many(self, recipients, kind, order_id=None) -> None:
        for user_id in recipients:
            self.sent.append((user_id, kind, order_id))

    def recipients_of(self, kind) -> list[int]:
        return [user_id for user_id, k, _ in self.sent if k == kind]


class FailingSink(NotificationSink):
    async def notify_many(self, recipients, kind, order_id=None) -> None:
        raise ConnectionError("notification backend down")


# ── Database ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


# ── Reference data ────────────────────────────────────────────────────


@dataclass
class Marketplace:
    tashkent: int
    samarkand: int
    bukhara: int
    tashkent_district: int
    samarkand_district: int
    bukhara_district: int
    admin: Identity
    customer: Identity
    other_customer: Identity
    driver: Identity
    driver_id: int
    rival: Identity
    rival_id: int


async def _add_driver(session, phone, name, *, status=DriverStatus.APPROVED,
                      is_active=True, blocked=False) -> DriverModel:
    user = UserModel(phone_number=phone, name=name, role=UserRole.DRIVER, is_blocked=blocked)
    session.add(user)
    await session.flush()
    driver = DriverModel(
        user_id=user.id,
        full_name=name,
        car_model="Chevrolet Cobalt",
        car_number="01A123BC",
        balance=Decimal("0"),
        status=status,
        is_active=is_active,
    )
    session.add(driver)
    await session.flush()
    return driver


@pytest_asyncio.fixture
async def marketplace(session_factory) -> Marketplace:
    """Three regions, the Tashkent -> Samarkand tariff and two drivers with 30000 each."""
    async with session_factory() as session:
        regions = [
            RegionModel(name_uz_lat=name, name_uz_cyr=name, name_ru=name)
            for name in ("Toshkent", "Samarqand", "Buxoro")
        ]
        session.add_all(regions)
        await session.flush()
        districts = [
            DistrictModel(region_id=r.id, name_uz_lat="Markaz", name_uz_cyr="Markaz", name_ru="Markaz")
            for r in regions
        ]
        session.add_all(districts)

        tashkent, samarkand, bukhara = regions
        session.add(
            PricingModel(
                from_region_id=tashkent.id,
                to_region_id=samarkand.id,
                base_price=Decimal("160000"),
                price_per_person=Decimal("5000"),
                service_fee=Decimal("15"),
            )
        )
        for count, pct in {1: "0", 2: "10", 3: "15", 4: "20"}.items():
            session.add(DiscountModel(passenger_count=count, discount_percentage=Decimal(pct)))

        admin = UserModel(phone_number="+998900000001", name="Admin", role=UserRole.ADMIN)
        customer = UserModel(phone_number="+998901111111", name="Dilnoza", role=UserRole.USER)
        other = UserModel(phone_number="+998902222222", name="Jasur", role=UserRole.USER)
        session.add_all([admin, customer, other])
        await session.flush()

        driver = await _add_driver(session, "+998911111111", "Bekzod")
        rival = await _add_driver(session, "+998912222222", "Sardor")
        await session.commit()

        ledger = DriverLedger(session)
        await ledger.top_up(driver.id, Decimal("30000"), actor_id=admin.id)
        await ledger.top_up(rival.id, Decimal("30000"), actor_id=admin.id)

        return Marketplace(
            tashkent=tashkent.id,
            samarkand=samarkand.id,
            bukhara=bukhara.id,
            tashkent_district=districts[0].id,
            samarkand_district=districts[1].id,
            bukhara_district=districts[2].id,
            admin=Identity(admin.id, UserRole.ADMIN),
            customer=Identity(customer.id, UserRole.USER),
            other_customer=Identity(other.id, UserRole.USER),
            driver=Identity(driver.user_id, UserRole.DRIVER),
            driver_id=driver.id,
            rival=Identity(rival.user_id, UserRole.DRIVER),
            rival_id=rival.id,
        )


def taxi_draft(m: Marketplace, passengers: int = 2, **overrides) -> OrderDraft:
    fields = dict(
        customer_name="Dilnoza",
        customer_phone="+998901111111",
        origin=RoutePoint(m.tashkent, m.tashkent_district, address="Chilonzor 5"),
        destination=RoutePoint(m.samarkand, m.samarkand_district),
        scheduled_date="25.10.2026",
        time_range_start="08:00",
        time_range_end="10:00",
        passenger_count=passengers,
    )
    fields.update(overrides)
    return OrderDraft(**fields)


def delivery_draft(m: Marketplace, **overrides) -> OrderDraft:
    fields = dict(
        customer_name="Dilnoza",
        customer_phone="+998901111111",
        origin=RoutePoint(m.tashkent, m.tashkent_district),
        destination=RoutePoint(m.samarkand, m.samarkand_district),
        scheduled_date="25.10.2026",
        time_range_start="14:00",
        time_range_end="18:00",
        delivery_type=DeliveryType.BOX,
        recipient_phone="+998933333333",
    )
    fields.update(overrides)
    return OrderDraft(**fields)


async def assert_ledger_balanced(session: AsyncSession, driver_id: int) -> Decimal:
    result = await DriverLedger(session).reconcile(driver_id)
    assert result.drift == 0, f"balance {result.balance} != ledger {result.ledger_total}"
    return result.balance


async def create_driver(
    session_factory,
    phone: str,
    name: str,
    *,
    balance: Decimal = Decimal("0"),
    status: DriverStatus = DriverStatus.APPROVED,
    is_active: bool = True,
    blocked: bool = False,
) -> tuple[Identity, int]:
    """Add a driver funded through the ledger; returns (identity, driver id)."""
    async with session_factory() as session:
        driver = await _add_driver(
            session, phone, name, status=status, is_active=is_active, blocked=blocked
        )
        await session.commit()
        if balance > 0:
            await DriverLedger(session).top_up(driver.id, balance, actor_id=None)
        return Identity(driver.user_id, UserRole.DRIVER), driver.id
