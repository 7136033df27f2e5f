"""
PhotoShare Backend - Notification Schemas
===========================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from photoshare.models import EventType
from photoshare.schemas.user import UserSummary


class NotificationResponse(BaseModel):
    id: int
    event_type: EventType
    message: str = Field(description="Localized one-line description of the event")
    actor: UserSummary
    photo_id: Optional[int] = None
    series_id: Optional[int] = None
    comment_id: Optional[int] = None
    follow_id: Optional[int] = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    page: int
    limit: int
    total: int


class MarkReadRequest(BaseModel):
    # Emptiness is checked by the service so the 400 carries a localized message
    notification_ids: List[int]


class MarkReadResponse(BaseModel):
    message: str
    updated: int
