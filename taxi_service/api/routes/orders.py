"""
Customer order endpoints
========================

POST /api/v1/orders/taxi          -- create a taxi order (201)
POST /api/v1/orders/delivery      -- create a delivery order (201)
GET  /api/v1/orders/my            -- list own orders (?status, ?type)
GET  /api/v1/orders/{id}          -- get one order
POST /api/v1/orders/{id}/cancel   -- cancel a pending or accepted order
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from taxi_service.api.dependencies import customer, get_identity, get_order_service
from taxi_service.api.middleware import limiter
from taxi_service.api.schemas import (
    CancelOrderRequest,
    DeliveryOrderCreateRequest,
    OrderResponse,
    TaxiOrderCreateRequest,
)
from taxi_service.config import settings
from taxi_service.domain.entities import Identity, OrderFilters
from taxi_service.domain.enums import OrderStatus, OrderType
from taxi_service.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "/taxi",
    status_code=201,
    response_model=OrderResponse,
    summary="Create a taxi order",
)
@limiter.limit(settings.rate_limit)
async def create_taxi_order(
    request: Request,
    body: TaxiOrderCreateRequest,
    identity: Identity = Depends(customer),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_taxi_order(identity, body.to_draft())


@router.post(
    "/delivery",
    status_code=201,
    response_model=OrderResponse,
    summary="Create a delivery order",
)
@limiter.limit(settings.rate_limit)
async def create_delivery_order(
    request: Request,
    body: DeliveryOrderCreateRequest,
    identity: Identity = Depends(customer),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_delivery_order(identity, body.to_draft())


# Declared before /{order_id} so "my" is not parsed as an id
@router.get("/my", response_model=list[OrderResponse], summary="List my orders")
@limiter.limit(settings.rate_limit)
async def list_my_orders(
    request: Request,
    status: Optional[OrderStatus] = None,
    order_type: Optional[OrderType] = Query(None, alias="type"),
    identity: Identity = Depends(customer),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_my_orders(
        identity, OrderFilters(status=status, order_type=order_type)
    )


@router.get("/{order_id}", response_model=OrderResponse, summary="Get an order")
@limiter.limit(settings.rate_limit)
async def get_order(
    request: Request,
    order_id: int,
    identity: Identity = Depends(get_identity),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_order(identity, order_id)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    summary="Cancel an order",
    responses={409: {"description": "Order changed concurrently; re-read it."}},
)
@limiter.limit(settings.rate_limit)
async def cancel_order(
    request: Request,
    order_id: int,
    body: CancelOrderRequest,
    identity: Identity = Depends(customer),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel(identity, order_id, body.reason)
