"""
PhotoShare Backend - Comment Routes
=====================================

Comments hang off a photo or a series; both share the same handlers through
CommentTarget. Reading is allowed anonymously for public content.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user, get_current_user_optional
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.comment import CommentCreateRequest, CommentListResponse, CommentResponse
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.services.comment_service import comment_service, count_tree
from photoshare.services.targets import CommentTarget

router = APIRouter(prefix="/api", tags=["Comments"])

_CREATE_RESPONSES = {
    400: {"description": "Empty content or parent on another target", "model": ErrorResponse},
    403: {"description": "Target is private", "model": ErrorResponse},
    404: {"description": "Target or parent not found", "model": ErrorResponse},
}


async def _list(db: AsyncSession, viewer: Optional[User], target: CommentTarget) -> CommentListResponse:
    tree = await comment_service.list_comments(db, viewer.id if viewer else None, target)
    return CommentListResponse(comments=tree, total=count_tree(tree))


@router.post(
    "/photos/{photo_id}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses=_CREATE_RESPONSES,
    summary="Comment on a photo",
)
async def create_photo_comment(
    photo_id: int,
    payload: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(
        db, current_user.id, CommentTarget.photo(photo_id), payload.content, payload.parent_id
    )


@router.get("/photos/{photo_id}/comments", response_model=CommentListResponse, summary="Photo comments")
async def list_photo_comments(
    photo_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    return await _list(db, current_user, CommentTarget.photo(photo_id))


@router.post(
    "/series/{series_id}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses=_CREATE_RESPONSES,
    summary="Comment on a series",
)
async def create_series_comment(
    series_id: int,
    payload: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(
        db, current_user.id, CommentTarget.series(series_id), payload.content, payload.parent_id
    )


@router.get("/series/{series_id}/comments", response_model=CommentListResponse, summary="Series comments")
async def list_series_comments(
    series_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    return await _list(db, current_user, CommentTarget.series(series_id))


@router.delete("/comments/{comment_id}", response_model=MessageResponse, summary="Delete my comment")
async def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await comment_service.delete_comment(db, comment_id, current_user.id)
    return MessageResponse(message=translate("COMMENT.DELETED"))
