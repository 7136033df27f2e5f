"""
PhotoShare Backend - User Schemas
===================================

What:  Public user summaries (embedded in photos, comments, notifications),
       the full "me" representation, the profile with counters and the
       profile update body.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """Compact author/actor representation embedded in other payloads."""

    id: int
    username: str
    profile_image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    notify_likes: bool
    notify_comments: bool
    notify_follows: bool
    notify_series: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileResponse(UserResponse):
    uploaded_photos_count: int = Field(description="Active photos uploaded by the user")
    received_likes_count: int = Field(description="Likes received on the user's active photos")
    followers_count: int = 0
    following_count: int = 0


class ProfileUpdateRequest(BaseModel):
    """
    Partial update: only the fields present in the body are applied.
    `null` clears `bio` and `profile_image_url`.
    """

    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)
    notify_likes: Optional[bool] = None
    notify_comments: Optional[bool] = None
    notify_follows: Optional[bool] = None
    notify_series: Optional[bool] = None


class UserListResponse(BaseModel):
    users: List[UserSummary]
    total: int
