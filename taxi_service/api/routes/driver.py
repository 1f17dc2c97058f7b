"""
Driver endpoints
================

GET  /api/v1/driver/orders/new             -- pending orders still acceptable
GET  /api/v1/driver/orders                 -- orders assigned to me (?status)
POST /api/v1/driver/orders/{id}/accept     -- accept; charges the service fee
POST /api/v1/driver/orders/{id}/complete   -- complete an accepted order
GET  /api/v1/driver/profile                -- my profile and balance
GET  /api/v1/driver/transactions           -- my ledger, newest first
GET  /api/v1/driver/statistics             -- order counts and earnings (?period)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.api.dependencies import driver, get_db, get_ledger, get_order_service
from taxi_service.api.middleware import limiter
from taxi_service.api.schemas import (
    DriverResponse,
    DriverStatisticsResponse,
    OrderResponse,
    TransactionResponse,
)
from taxi_service.config import settings
from taxi_service.domain.entities import Identity, OrderFilters
from taxi_service.domain.enums import OrderStatus, OrderType, StatisticsPeriod
from taxi_service.domain.errors import DriverNotFound
from taxi_service.infrastructure.models import DriverModel
from taxi_service.infrastructure.repositories import DriverRepository
from taxi_service.services.ledger import DriverLedger
from taxi_service.services.orders import OrderService

router = APIRouter(prefix="/driver", tags=["driver"])


async def _profile(identity: Identity, db: AsyncSession) -> DriverModel:
    profile = await DriverRepository(db).get_by_user_id(identity.user_id)
    if profile is None:
        raise DriverNotFound(user_id=identity.user_id)
    return profile


@router.get(
    "/orders/new",
    response_model=list[OrderResponse],
    summary="List new orders open for acceptance",
)
@limiter.limit(settings.rate_limit)
async def list_new_orders(
    request: Request,
    order_type: Optional[OrderType] = Query(None, alias="type"),
    from_region_id: Optional[int] = Query(None, alias="from_region"),
    to_region_id: Optional[int] = Query(None, alias="to_region"),
    identity: Identity = Depends(driver),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_new_orders(
        OrderFilters(
            order_type=order_type,
            from_region_id=from_region_id,
            to_region_id=to_region_id,
        )
    )


@router.get("/orders", response_model=list[OrderResponse], summary="List my orders")
@limiter.limit(settings.rate_limit)
async def list_driver_orders(
    request: Request,
    status: Optional[OrderStatus] = None,
    identity: Identity = Depends(driver),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_driver_orders(identity, status)


@router.post(
    "/orders/{order_id}/accept",
    response_model=OrderResponse,
    summary="Accept an order",
    responses={409: {"description": "Another driver accepted the order first."}},
)
@limiter.limit(settings.rate_limit)
async def accept_order(
    request: Request,
    order_id: int,
    identity: Identity = Depends(driver),
    service: OrderService = Depends(get_order_service),
):
    return await service.accept(identity, order_id)


@router.post(
    "/orders/{order_id}/complete",
    response_model=OrderResponse,
    summary="Complete an accepted order",
)
@limiter.limit(settings.rate_limit)
async def complete_order(
    request: Request,
    order_id: int,
    identity: Identity = Depends(driver),
    service: OrderService = Depends(get_order_service),
):
    return await service.complete(identity, order_id)


@router.get("/profile", response_model=DriverResponse, summary="My driver profile")
@limiter.limit(settings.rate_limit)
async def get_profile(
    request: Request,
    identity: Identity = Depends(driver),
    db: AsyncSession = Depends(get_db),
):
    return await _profile(identity, db)


@router.get(
    "/transactions",
    response_model=list[TransactionResponse],
    summary="My balance transactions",
)
@limiter.limit(settings.rate_limit)
async def list_transactions(
    request: Request,
    limit: int = Query(100, ge=1, le=500),
    identity: Identity = Depends(driver),
    db: AsyncSession = Depends(get_db),
    ledger: DriverLedger = Depends(get_ledger),
):
    profile = await _profile(identity, db)
    return await ledger.history(profile.id, limit)


@router.get(
    "/statistics",
    response_model=DriverStatisticsResponse,
    summary="My order and earnings statistics",
)
@limiter.limit(settings.rate_limit)
async def get_statistics(
    request: Request,
    period: Optional[StatisticsPeriod] = None,
    identity: Identity = Depends(driver),
    service: OrderService = Depends(get_order_service),
):
    return await service.driver_statistics(identity, period)
