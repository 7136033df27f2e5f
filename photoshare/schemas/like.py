"""
PhotoShare Backend - Like Schemas
===================================
"""

from typing import Optional

from pydantic import BaseModel

from photoshare.services.targets import LikeTarget


class LikeRequest(BaseModel):
    photo_id: Optional[int] = None
    series_id: Optional[int] = None
    comment_id: Optional[int] = None

    def to_target(self) -> LikeTarget:
        """Raises ValidationError (400) unless exactly one id is set."""
        return LikeTarget.from_ids(self.photo_id, self.series_id, self.comment_id)


class LikeResponse(BaseModel):
    liked: bool
    like_count: int
