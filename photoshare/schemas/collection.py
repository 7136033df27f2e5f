"""
PhotoShare Backend - Collection Schemas
=========================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from photoshare.schemas.photo import PhotoResponse


class CollectionCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class CollectionUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class CollectionResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    is_default: bool
    photo_count: int = 0
    created_at: datetime
    updated_at: datetime


class CollectionDetailResponse(CollectionResponse):
    photos: List[PhotoResponse] = Field(default_factory=list)
