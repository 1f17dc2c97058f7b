"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from taxi_service.domain.entities import OrderDraft, RoutePoint
from taxi_service.domain.enums import (
    DeliveryType,
    DriverStatus,
    NotificationKind,
    OrderStatus,
    OrderType,
    StatisticsPeriod,
    TransactionKind,
)


# ── Requests ──────────────────────────────────────────────────────────


class _OrderCreateBase(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: str = Field(..., min_length=1, max_length=20)

    from_region_id: int = Field(..., gt=0)
    from_district_id: int = Field(..., gt=0)
    from_latitude: Optional[float] = Field(None, ge=-90, le=90)
    from_longitude: Optional[float] = Field(None, ge=-180, le=180)
    from_address: Optional[str] = Field(None, max_length=255)

    to_region_id: int = Field(..., gt=0)
    to_district_id: int = Field(..., gt=0)
    to_latitude: Optional[float] = Field(None, ge=-90, le=90)
    to_longitude: Optional[float] = Field(None, ge=-180, le=180)
    to_address: Optional[str] = Field(None, max_length=255)

    scheduled_date: str = Field(..., description="Pickup date as DD.MM.YYYY")
    time_range_start: str = Field(..., min_length=1, max_length=10)
    time_range_end: str = Field(..., min_length=1, max_length=10)
    notes: Optional[str] = None

    def _draft(self, **extra) -> OrderDraft:
        return OrderDraft(
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            origin=RoutePoint(
                region_id=self.from_region_id,
                district_id=self.from_district_id,
                latitude=self.from_latitude,
                longitude=self.from_longitude,
                address=self.from_address,
            ),
            destination=RoutePoint(
                region_id=self.to_region_id,
                district_id=self.to_district_id,
                latitude=self.to_latitude,
                longitude=self.to_longitude,
                address=self.to_address,
            ),
            scheduled_date=self.scheduled_date,
            time_range_start=self.time_range_start,
            time_range_end=self.time_range_end,
            notes=self.notes,
            **extra,
        )


class TaxiOrderCreateRequest(_OrderCreateBase):
    passenger_count: int = Field(..., ge=1, le=4)

    def to_draft(self) -> OrderDraft:
        return self._draft(passenger_count=self.passenger_count)


class DeliveryOrderCreateRequest(_OrderCreateBase):
    delivery_type: DeliveryType
    recipient_phone: str = Field(..., min_length=1, max_length=20)

    def to_draft(self) -> OrderDraft:
        return self._draft(
            delivery_type=self.delivery_type, recipient_phone=self.recipient_phone
        )


class CancelOrderRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class RatingCreateRequest(BaseModel):
    order_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class BalanceTopUpRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


# ── Responses ─────────────────────────────────────────────────────────


class OrderResponse(BaseModel):
    id: int
    user_id: int
    driver_id: Optional[int] = None
    order_type: OrderType
    status: OrderStatus

    customer_name: str
    customer_phone: str
    recipient_phone: Optional[str] = None

    from_region_id: int
    from_district_id: int
    from_latitude: Optional[float] = None
    from_longitude: Optional[float] = None
    from_address: Optional[str] = None
    to_region_id: int
    to_district_id: int
    to_latitude: Optional[float] = None
    to_longitude: Optional[float] = None
    to_address: Optional[str] = None

    passenger_count: Optional[int] = None
    delivery_type: Optional[DeliveryType] = None
    scheduled_date: date
    time_range_start: str
    time_range_end: str

    price: float
    service_fee: float
    discount_percentage: float
    final_price: float

    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    accepted_at: Optional[datetime] = None
    accept_deadline: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DriverResponse(BaseModel):
    id: int
    user_id: int
    full_name: str
    car_model: str
    car_number: str
    balance: float
    rating: float
    total_ratings: int
    status: DriverStatus
    is_active: bool

    model_config = {"from_attributes": True}


class DriverStatisticsResponse(BaseModel):
    driver_id: int
    period: Optional[StatisticsPeriod] = None
    total_orders: int
    completed_orders: int
    total_earnings: float
    current_balance: float
    average_rating: float
    total_ratings: int

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    id: int
    driver_id: int
    order_id: Optional[int] = None
    amount: float
    kind: TransactionKind
    description: str
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RatingResponse(BaseModel):
    id: int
    order_id: int
    user_id: int
    driver_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    kind: NotificationKind
    related_id: Optional[int] = None
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReconciliationResponse(BaseModel):
    driver_id: int
    balance: float
    ledger_total: float
    drift: float

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "taxi-service"
