"""
Admin / observability endpoints
===============================

GET  /api/v1/admin/orders                  -- all orders (?status, ?type, ?from_date, ?to_date)
POST /api/v1/admin/drivers/{id}/balance    -- credit a driver's balance
GET  /api/v1/admin/drivers/{id}/reconcile  -- balance vs. ledger sum
GET  /api/v1/admin/health                  -- simple health check
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from taxi_service.api.dependencies import admin, get_ledger, get_order_service
from taxi_service.api.middleware import limiter
from taxi_service.api.schemas import (
    BalanceTopUpRequest,
    HealthResponse,
    OrderResponse,
    ReconciliationResponse,
    TransactionResponse,
)
from taxi_service.config import settings
from taxi_service.domain.entities import Identity, OrderFilters
from taxi_service.domain.enums import OrderStatus, OrderType
from taxi_service.services.ledger import DriverLedger
from taxi_service.services.orders import OrderService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/orders", response_model=list[OrderResponse], summary="List all orders")
@limiter.limit(settings.rate_limit)
async def list_orders(
    request: Request,
    status: Optional[OrderStatus] = None,
    order_type: Optional[OrderType] = Query(None, alias="type"),
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    identity: Identity = Depends(admin),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_all_orders(
        OrderFilters(
            status=status,
            order_type=order_type,
            created_from=from_date,
            created_to=to_date,
        )
    )


@router.post(
    "/drivers/{driver_id}/balance",
    response_model=TransactionResponse,
    summary="Top up a driver's balance",
)
@limiter.limit(settings.rate_limit)
async def top_up_balance(
    request: Request,
    driver_id: int,
    body: BalanceTopUpRequest,
    identity: Identity = Depends(admin),
    ledger: DriverLedger = Depends(get_ledger),
):
    return await ledger.top_up(driver_id, body.amount, actor_id=identity.user_id)


@router.get(
    "/drivers/{driver_id}/reconcile",
    response_model=ReconciliationResponse,
    summary="Compare a driver's balance with the ledger",
)
@limiter.limit(settings.rate_limit)
async def reconcile_balance(
    request: Request,
    driver_id: int,
    identity: Identity = Depends(admin),
    ledger: DriverLedger = Depends(get_ledger),
):
    return await ledger.reconcile(driver_id)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
