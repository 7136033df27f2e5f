"""
PhotoShare Backend - Like Routes
==================================

POST /api/likes with exactly one of photo_id, series_id, comment_id.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user
from photoshare.database import get_db_session
from photoshare.models import User
from photoshare.schemas.common import ErrorResponse
from photoshare.schemas.like import LikeRequest, LikeResponse
from photoshare.services.like_service import like_service

router = APIRouter(prefix="/api/likes", tags=["Likes"])


@router.post(
    "",
    response_model=LikeResponse,
    responses={
        400: {"description": "Not exactly one target", "model": ErrorResponse},
        403: {"description": "Target is private", "model": ErrorResponse},
        404: {"description": "Target not found", "model": ErrorResponse},
    },
    summary="Like or unlike a photo, series or comment",
)
async def toggle_like(
    payload: LikeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LikeResponse:
    target = payload.to_target()
    result = await like_service.toggle_like(db, current_user.id, target)
    return LikeResponse(liked=result.liked, like_count=await like_service.count_likes(db, target))
