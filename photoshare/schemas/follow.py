"""
PhotoShare Backend - Follow Schemas
=====================================
"""

from pydantic import BaseModel


class FollowStatusResponse(BaseModel):
    is_following: bool
