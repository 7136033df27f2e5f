"""
PhotoShare Backend - User Routes
==================================

/api/users/me/* act on the caller; /api/users/{user_id}/* on another user.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.schemas.follow import FollowStatusResponse
from photoshare.schemas.photo import PhotoResponse
from photoshare.schemas.user import ProfileResponse, ProfileUpdateRequest, UserListResponse, UserSummary
from photoshare.services.collection_service import collection_service
from photoshare.services.follow_service import follow_service
from photoshare.services.photo_service import photo_service
from photoshare.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


# ── Current user ──────────────────────────────────────────────────────────


@router.get("/me/profile", response_model=ProfileResponse, summary="My profile with counters")
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await user_service.get_profile(db, current_user)


@router.put("/me/profile", response_model=ProfileResponse, summary="Update my profile")
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await user_service.update_profile(db, current_user, payload)


@router.delete("/me", response_model=MessageResponse, summary="Delete my account")
async def delete_my_account(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await user_service.delete_account(db, current_user)
    return MessageResponse(message=translate("USER.ACCOUNT_DELETED"))


@router.get("/me/photos", response_model=List[PhotoResponse], summary="My photos, private included")
async def get_my_photos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[PhotoResponse]:
    return await photo_service.list_user_photos(db, current_user.id, viewer_id=current_user.id)


@router.get("/me/likes", response_model=List[PhotoResponse], summary="Photos I liked")
async def get_my_liked_photos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[PhotoResponse]:
    return await photo_service.list_liked_photos(db, current_user.id)


@router.get(
    "/me/collection",
    response_model=List[PhotoResponse],
    summary="Photos in my default collection",
)
async def get_my_default_collection(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[PhotoResponse]:
    return await collection_service.list_default_photos(db, current_user.id)


# ── Other users ───────────────────────────────────────────────────────────


@router.post(
    "/{user_id}/toggle-follow",
    response_model=FollowStatusResponse,
    responses={
        400: {"description": "Cannot follow yourself", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Follow or unfollow a user",
)
async def toggle_follow(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FollowStatusResponse:
    result = await follow_service.toggle_follow(db, current_user.id, user_id)
    return FollowStatusResponse(is_following=result.is_following)


@router.get("/{user_id}/followers", response_model=UserListResponse, summary="Followers of a user")
async def get_followers(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserListResponse:
    users = await follow_service.list_followers(db, user_id)
    return UserListResponse(users=[UserSummary.model_validate(u) for u in users], total=len(users))


@router.get("/{user_id}/following", response_model=UserListResponse, summary="Users a user follows")
async def get_following(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserListResponse:
    users = await follow_service.list_following(db, user_id)
    return UserListResponse(users=[UserSummary.model_validate(u) for u in users], total=len(users))


@router.get(
    "/{user_id}/follow-status",
    response_model=FollowStatusResponse,
    summary="Whether I follow a user",
)
async def get_follow_status(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FollowStatusResponse:
    return FollowStatusResponse(
        is_following=await follow_service.is_following(db, current_user.id, user_id)
    )
