"""
PhotoShare Backend - Photo Schemas
====================================

What:  Photo payloads. Storage keys never leave the server; clients get
       image URLs served by the images route, which re-checks visibility.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from photoshare.models import Photo
from photoshare.schemas.user import UserSummary


class PhotoResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: str
    thumbnail_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    is_public: bool
    created_at: datetime
    owner: UserSummary
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = Field(default=False, description="Whether the caller liked this photo")

    @classmethod
    def from_photo(
        cls,
        photo: Photo,
        like_count: int = 0,
        comment_count: int = 0,
        is_liked: bool = False,
    ) -> "PhotoResponse":
        return cls(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            image_url=f"/api/images/{photo.id}",
            thumbnail_url=f"/api/images/thumbnails/{photo.id}",
            width=photo.width,
            height=photo.height,
            is_public=photo.is_public,
            created_at=photo.created_at,
            owner=UserSummary.model_validate(photo.owner),
            like_count=like_count,
            comment_count=comment_count,
            is_liked=is_liked,
        )


class PhotoListResponse(BaseModel):
    photos: List[PhotoResponse]
    page: int
    limit: int
    total: int
    has_more: bool


class VisibilityUpdateRequest(BaseModel):
    is_public: bool


class CollectionToggleResponse(BaseModel):
    added: bool
    message: str
