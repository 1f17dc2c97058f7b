"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 4 regions with a few districts each
  - tariffs for every directed pair of those regions
  - passenger-count discounts (1 -> 0 %, 2 -> 10 %, 3 -> 15 %, 4 -> 20 %)
  - 1 admin, 3 customers and 3 drivers
  - opening driver balances, credited through the ledger
"""

import asyncio
from decimal import Decimal
from itertools import permutations

from sqlalchemy import text

from taxi_service.domain.enums import DriverStatus, UserRole
from taxi_service.infrastructure.database import async_session_factory, engine
from taxi_service.infrastructure.models import (
    DiscountModel,
    DistrictModel,
    DriverModel,
    PricingModel,
    RegionModel,
    UserModel,
)
from taxi_service.services.ledger import DriverLedger

REGIONS = [
    # (uz latin, uz cyrillic, russian, districts)
    ("Toshkent", "Тошкент", "Ташкент", ["Chilonzor", "Yunusobod", "Mirobod"]),
    ("Samarqand", "Самарқанд", "Самарканд", ["Samarqand shahri", "Urgut"]),
    ("Buxoro", "Бухоро", "Бухара", ["Buxoro shahri", "G'ijduvon"]),
    ("Farg'ona", "Фарғона", "Фергана", ["Farg'ona shahri", "Marg'ilon"]),
]

# Tashkent <-> Samarkand is the reference route; other pairs share a flat tariff
ROUTE_TARIFFS = {
    ("Toshkent", "Samarqand"): (Decimal("160000"), Decimal("5000"), Decimal("15")),
    ("Samarqand", "Toshkent"): (Decimal("160000"), Decimal("5000"), Decimal("15")),
}
DEFAULT_TARIFF = (Decimal("120000"), Decimal("60000"), Decimal("12"))

DISCOUNTS = {1: Decimal("0"), 2: Decimal("10"), 3: Decimal("15"), 4: Decimal("20")}

USERS = [
    {"phone": "+998900000001", "name": "Admin", "role": UserRole.ADMIN},
    {"phone": "+998901111111", "name": "Dilnoza Karimova", "role": UserRole.USER},
    {"phone": "+998902222222", "name": "Jasur Toshmatov", "role": UserRole.USER},
    {"phone": "+998903333333", "name": "Malika Yusupova", "role": UserRole.USER},
]

DRIVERS = [
    {"phone": "+998911111111", "name": "Bekzod Aliyev", "car": "Chevrolet Cobalt", "number": "01A123BC", "balance": Decimal("200000")},
    {"phone": "+998912222222", "name": "Sardor Rahimov", "car": "Chevrolet Lacetti", "number": "30B456CD", "balance": Decimal("50000")},
    {"phone": "+998913333333", "name": "Otabek Nazarov", "car": "Chevrolet Nexia", "number": "80C789DE", "balance": Decimal("0")},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM regions"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Regions & districts ───────────────────────────────────────
        regions: dict[str, RegionModel] = {}
        for lat, cyr, ru, districts in REGIONS:
            region = RegionModel(name_uz_lat=lat, name_uz_cyr=cyr, name_ru=ru)
            session.add(region)
            await session.flush()
            regions[lat] = region
            for name in districts:
                session.add(
                    DistrictModel(
                        region_id=region.id,
                        name_uz_lat=name,
                        name_uz_cyr=name,
                        name_ru=name,
                    )
                )
        await session.flush()
        print(f"  Created {len(regions)} regions")

        # ── Pricing & discounts ───────────────────────────────────────
        for origin, destination in permutations(regions, 2):
            base, per_person, fee = ROUTE_TARIFFS.get((origin, destination), DEFAULT_TARIFF)
            session.add(
                PricingModel(
                    from_region_id=regions[origin].id,
                    to_region_id=regions[destination].id,
                    base_price=base,
                    price_per_person=per_person,
                    service_fee=fee,
                )
            )
        for count, pct in DISCOUNTS.items():
            session.add(DiscountModel(passenger_count=count, discount_percentage=pct))
        await session.flush()
        print("  Created tariffs and discounts")

        # ── Users ─────────────────────────────────────────────────────
        admin = None
        for u in USERS:
            m = UserModel(phone_number=u["phone"], name=u["name"], role=u["role"])
            session.add(m)
            if u["role"] == UserRole.ADMIN:
                admin = m
        await session.flush()
        print(f"  Created {len(USERS)} users")

        # ── Drivers ───────────────────────────────────────────────────
        drivers = []
        for d in DRIVERS:
            user = UserModel(phone_number=d["phone"], name=d["name"], role=UserRole.DRIVER)
            session.add(user)
            await session.flush()
            driver = DriverModel(
                user_id=user.id,
                full_name=d["name"],
                car_model=d["car"],
                car_number=d["number"],
                balance=Decimal("0"),
                status=DriverStatus.APPROVED,
                is_active=True,
            )
            session.add(driver)
            drivers.append((driver, d["balance"]))
        await session.commit()
        print(f"  Created {len(drivers)} drivers")

        # Opening balances go through the ledger so balance == SUM(transactions)
        ledger = DriverLedger(session)
        for driver, opening in drivers:
            if opening > 0:
                await ledger.top_up(driver.id, opening, actor_id=admin.id)
        print("  Credited opening balances")
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
