"""
PhotoShare Backend - Notification Routes
==========================================
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
)
from photoshare.services.notification_service import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse, summary="My notifications, newest first")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationListResponse:
    return await notification_service.list_notifications(db, current_user.id, page, limit)


@router.patch("/read", response_model=MarkReadResponse, summary="Mark notifications as read")
async def mark_read(
    payload: MarkReadRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MarkReadResponse:
    updated = await notification_service.mark_as_read(db, current_user.id, payload.notification_ids)
    return MarkReadResponse(message=translate("NOTIFICATION.MARKED_READ"), updated=updated)
