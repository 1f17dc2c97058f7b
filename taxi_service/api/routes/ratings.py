"""
Rating endpoints
================

POST /api/v1/ratings                     -- rate a completed order (201)
GET  /api/v1/ratings/driver/{driver_id}  -- ratings a driver received
"""

from fastapi import APIRouter, Depends, Request

from taxi_service.api.dependencies import customer, get_identity, get_rating_service
from taxi_service.api.middleware import limiter
from taxi_service.api.schemas import RatingCreateRequest, RatingResponse
from taxi_service.config import settings
from taxi_service.domain.entities import Identity
from taxi_service.services.ratings import RatingService

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", status_code=201, response_model=RatingResponse, summary="Rate an order")
@limiter.limit(settings.rate_limit)
async def rate_order(
    request: Request,
    body: RatingCreateRequest,
    identity: Identity = Depends(customer),
    service: RatingService = Depends(get_rating_service),
):
    return await service.rate_order(identity, body.order_id, body.rating, body.comment)


@router.get(
    "/driver/{driver_id}",
    response_model=list[RatingResponse],
    summary="List a driver's ratings",
)
@limiter.limit(settings.rate_limit)
async def list_driver_ratings(
    request: Request,
    driver_id: int,
    identity: Identity = Depends(get_identity),
    service: RatingService = Depends(get_rating_service),
):
    return await service.list_for_driver(driver_id)
