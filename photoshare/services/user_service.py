"""
PhotoShare Backend - User Service
===================================

What:  Profile reads and updates, account deletion and the per-user
       listings behind /api/users/me/*.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.models import User
from photoshare.schemas.user import ProfileResponse, ProfileUpdateRequest, UserResponse
from photoshare.services.follow_service import follow_service
from photoshare.services.photo_service import photo_service

logger = logging.getLogger(__name__)

# Columns that reject NULL; an explicit null in the body leaves them as-is
_NON_NULLABLE_FIELDS = {
    "username",
    "notify_likes",
    "notify_comments",
    "notify_follows",
    "notify_series",
}


class UserService:

    async def get_profile(self, db: AsyncSession, user: User) -> ProfileResponse:
        base = UserResponse.model_validate(user)
        return ProfileResponse(
            **base.model_dump(),
            uploaded_photos_count=await photo_service.count_user_photos(db, user.id),
            received_likes_count=await photo_service.count_received_likes(db, user.id),
            followers_count=await follow_service.count_followers(db, user.id),
            following_count=await follow_service.count_following(db, user.id),
        )

    async def update_profile(
        self, db: AsyncSession, user: User, payload: ProfileUpdateRequest
    ) -> ProfileResponse:
        updates = payload.model_dump(exclude_unset=True)
        for field, value in updates.items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            if field == "username":
                value = value.strip() or user.username
            setattr(user, field, value)
        await db.flush()
        logger.info("User %s updated profile fields: %s", user.id, sorted(updates))
        return await self.get_profile(db, user)

    async def delete_account(self, db: AsyncSession, user: User) -> None:
        """Soft delete; existing tokens stop working on the next request."""
        user.soft_delete()
        await db.flush()
        logger.info("User %s deleted their account", user.id)


user_service = UserService()
