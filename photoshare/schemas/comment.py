"""
PhotoShare Backend - Comment Schemas
======================================

`CommentResponse` is recursive: roots carry their replies, replies carry
theirs. Blank content is rejected by the comment service with a localized
400, so `content` is only length-checked here.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from photoshare.models import COMMENT_MAX_LENGTH
from photoshare.schemas.user import UserSummary


class CommentCreateRequest(BaseModel):
    content: str = Field(max_length=COMMENT_MAX_LENGTH)
    parent_id: Optional[int] = None


class CommentResponse(BaseModel):
    id: int
    content: str
    author: UserSummary
    photo_id: Optional[int] = None
    series_id: Optional[int] = None
    parent_id: Optional[int] = None
    created_at: datetime
    like_count: int = 0
    replies: List["CommentResponse"] = Field(default_factory=list)


CommentResponse.model_rebuild()


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
    total: int = Field(description="Number of comments in the tree, replies included")
