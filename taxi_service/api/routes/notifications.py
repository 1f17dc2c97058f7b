"""
Notification inbox endpoints
============================

GET  /api/v1/notifications            -- my stored notifications, newest first
POST /api/v1/notifications/{id}/read  -- mark one of them as read
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.api.dependencies import get_db, get_identity
from taxi_service.api.middleware import limiter
from taxi_service.api.schemas import NotificationResponse
from taxi_service.config import settings
from taxi_service.domain.entities import Identity
from taxi_service.domain.errors import NotificationNotFound
from taxi_service.infrastructure.repositories import NotificationRepository

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse], summary="My notifications")
@limiter.limit(settings.rate_limit)
async def list_notifications(
    request: Request,
    limit: int = Query(50, ge=1, le=200),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationRepository(db).list_for_user(identity.user_id, limit)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
)
@limiter.limit(settings.rate_limit)
async def mark_notification_read(
    request: Request,
    notification_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    notification = await NotificationRepository(db).mark_read(
        notification_id, identity.user_id
    )
    if notification is None:
        raise NotificationNotFound(notification_id=notification_id)
    return notification
