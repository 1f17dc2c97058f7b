"""Fare quotes backed by the pricing and discount tables."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.domain.errors import PricingNotConfigured
from taxi_service.domain.pricing import (
    FareQuote,
    Tariff,
    compute_delivery_fare,
    compute_taxi_fare,
)
from taxi_service.infrastructure.repositories import PricingRepository


class FareService:
    def __init__(self, session: AsyncSession):
        self.pricing = PricingRepository(session)

    async def _tariff(self, from_region_id: int, to_region_id: int) -> Tariff:
        tariff = await self.pricing.get_tariff(from_region_id, to_region_id)
        if tariff is None:
            raise PricingNotConfigured(
                from_region_id=from_region_id, to_region_id=to_region_id
            )
        return tariff

    async def quote_taxi(
        self, from_region_id: int, to_region_id: int, passenger_count: int
    ) -> FareQuote:
        tariff = await self._tariff(from_region_id, to_region_id)
        # Missing discount row means no discount
        discount = await self.pricing.get_discount_pct(passenger_count)
        return compute_taxi_fare(tariff, passenger_count, discount)

    async def quote_delivery(self, from_region_id: int, to_region_id: int) -> FareQuote:
        return compute_delivery_fare(await self._tariff(from_region_id, to_region_id))
