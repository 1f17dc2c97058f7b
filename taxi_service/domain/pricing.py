"""
Fare Engine  (Strategy Pattern)
===============================

Formula
-------
price              = base_price + price_per_person x passengers
price_after_disc   = price x (1 - discount_pct / 100)
service_fee        = price_after_disc x (service_fee_pct / 100)
final_price        = price_after_disc + service_fee

* **Taxi**: passengers as requested (1-4), discount from the passenger
  discount table (0 when no row exists).
* **Delivery**: priced as a single passenger, never discounted.

All arithmetic is ``Decimal``; money is quantized to 2 places half-up.
Complexity: O(1) per quote.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# ── Value objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tariff:
    """Directed route fare configuration (from region -> to region)."""

    base_price: Decimal
    price_per_person: Decimal
    service_fee_pct: Decimal


@dataclass(frozen=True)
class FareQuote:
    price: Decimal
    service_fee: Decimal
    discount_pct: Decimal
    final_price: Decimal


# ── Strategy hierarchy ────────────────────────────────────────────────


class FareStrategy(ABC):
    @abstractmethod
    def passengers(self) -> int: ...

    @abstractmethod
    def discount_pct(self) -> Decimal: ...

    def quote(self, tariff: Tariff) -> FareQuote:
        discount = Decimal(self.discount_pct())
        price = tariff.base_price + tariff.price_per_person * self.passengers()
        after_discount = price * (1 - discount / HUNDRED)
        service_fee = to_money(after_discount * (tariff.service_fee_pct / HUNDRED))
        # Built from the rounded parts so final_price - service_fee is exact
        return FareQuote(
            price=to_money(price),
            service_fee=service_fee,
            discount_pct=discount.quantize(CENTS),
            final_price=to_money(after_discount) + service_fee,
        )


class TaxiFare(FareStrategy):
    def __init__(self, passenger_count: int, discount_pct: Decimal | None = None):
        if not 1 <= passenger_count <= 4:
            raise ValueError("passenger_count must be between 1 and 4")
        self._passengers = passenger_count
        self._discount = discount_pct if discount_pct is not None else Decimal("0")

    def passengers(self) -> int:
        return self._passengers

    def discount_pct(self) -> Decimal:
        return self._discount


class DeliveryFare(FareStrategy):
    def passengers(self) -> int:
        return 1

    def discount_pct(self) -> Decimal:
        return Decimal("0")


def compute_taxi_fare(
    tariff: Tariff, passenger_count: int, discount_pct: Decimal | None = None
) -> FareQuote:
    return TaxiFare(passenger_count, discount_pct).quote(tariff)


def compute_delivery_fare(tariff: Tariff) -> FareQuote:
    return DeliveryFare().quote(tariff)
