"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Order``: enforces valid lifecycle transitions
  (PENDING -> ACCEPTED -> COMPLETED, PENDING | ACCEPTED -> CANCELLED).
- ``Identity`` is the authenticated caller, produced by the auth gateway
  and passed explicitly into every core operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from .enums import (
    ADMIN_ROLES,
    ORDER_TRANSITIONS,
    DeliveryType,
    OrderStatus,
    OrderType,
    StatisticsPeriod,
    UserRole,
)
from .errors import (
    AcceptDeadlineExpired,
    CannotCancel,
    InvalidStateTransition,
    OrderNotAvailable,
)
from .schedule import as_utc


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_driver(self) -> bool:
        return self.role == UserRole.DRIVER

    def can_see_any_order(self) -> bool:
        return self.is_driver or self.is_admin


@dataclass(frozen=True)
class RoutePoint:
    region_id: int
    district_id: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class OrderDraft:
    """Customer input for a new order, before pricing."""

    customer_name: str
    customer_phone: str
    origin: RoutePoint
    destination: RoutePoint
    scheduled_date: str  # DD.MM.YYYY
    time_range_start: str
    time_range_end: str
    notes: Optional[str] = None
    passenger_count: Optional[int] = None  # taxi only
    delivery_type: Optional[DeliveryType] = None  # delivery only
    recipient_phone: Optional[str] = None  # delivery only


@dataclass(frozen=True)
class OrderFilters:
    status: Optional[OrderStatus] = None
    order_type: Optional[OrderType] = None
    from_region_id: Optional[int] = None
    to_region_id: Optional[int] = None
    created_from: Optional[date] = None  # inclusive, UTC days
    created_to: Optional[date] = None


@dataclass(frozen=True)
class DriverStatistics:
    driver_id: int
    period: Optional[StatisticsPeriod]
    total_orders: int
    completed_orders: int
    total_earnings: Decimal  # service fees of completed orders
    current_balance: Decimal
    average_rating: Decimal
    total_ratings: int


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Order:
    """Snapshot of the fields the lifecycle rules depend on."""

    id: Optional[int] = None
    user_id: int = 0
    driver_id: Optional[int] = None
    order_type: OrderType = OrderType.TAXI
    status: OrderStatus = OrderStatus.PENDING
    service_fee: Decimal = Decimal("0")
    accept_deadline: Optional[datetime] = None

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ORDER_TRANSITIONS.get(self.status, set())

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        if not self.can_transition_to(new_status):
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    def is_expired(self, now: datetime) -> bool:
        if self.accept_deadline is None:
            return False
        return as_utc(self.accept_deadline) <= as_utc(now)

    def ensure_acceptable(self, now: datetime) -> None:
        if self.status != OrderStatus.PENDING:
            raise OrderNotAvailable(order_id=self.id, status=self.status.value)
        if self.is_expired(now):
            raise AcceptDeadlineExpired(order_id=self.id)

    def ensure_cancellable(self) -> None:
        if not self.can_transition_to(OrderStatus.CANCELLED):
            raise CannotCancel(order_id=self.id, status=self.status.value)

    @property
    def has_driver(self) -> bool:
        return self.driver_id is not None
