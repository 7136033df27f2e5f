"""
PhotoShare Backend - Series Schemas
=====================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from photoshare.schemas.photo import PhotoResponse
from photoshare.schemas.user import UserSummary


class SeriesCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_public: bool = True
    cover_photo_id: Optional[int] = None


class SeriesUpdateRequest(BaseModel):
    """Partial update; `cover_photo_id: null` clears the cover."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_public: Optional[bool] = None
    cover_photo_id: Optional[int] = None


class SeriesResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    cover_photo_id: Optional[int] = None
    is_public: bool
    created_at: datetime
    updated_at: datetime
    owner: UserSummary
    photo_count: int = 0
    like_count: int = 0


class SeriesPhotoItem(BaseModel):
    position: int
    photo: PhotoResponse


class SeriesDetailResponse(SeriesResponse):
    photos: List[SeriesPhotoItem] = Field(default_factory=list)


class SeriesOrderItem(BaseModel):
    photo_id: int
    position: int = Field(ge=0)


class SeriesReorderRequest(BaseModel):
    orders: List[SeriesOrderItem]
