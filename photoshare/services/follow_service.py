"""
PhotoShare Backend - Follow Service
=====================================

What:  Toggle-follow state machine plus follower/following listings.

    not following ──toggle──▶ following      (insert edge, NEW_FOLLOW)
    following     ──toggle──▶ not following  (delete edge, silent)

Following yourself is always a ValidationError, before any lookup.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import NotFoundError, ValidationError
from photoshare.models import EventType, Follow, User
from photoshare.services.access import get_active_user
from photoshare.services.notification_service import notification_service
from photoshare.services.targets import NotificationTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowResult:
    is_following: bool


class FollowService:

    async def toggle_follow(self, db: AsyncSession, follower_id: int, following_id: int) -> FollowResult:
        if follower_id == following_id:
            raise ValidationError("FOLLOW.CANNOT_FOLLOW_YOURSELF", field="user_id")

        await self._require_active_user(db, following_id)

        existing = await self._find_edge(db, follower_id, following_id)
        if existing is not None:
            await db.delete(existing)
            await db.flush()
            logger.info("User %s unfollowed user %s", follower_id, following_id)
            return FollowResult(is_following=False)

        follow = Follow(follower_id=follower_id, following_id=following_id)
        try:
            async with db.begin_nested():
                db.add(follow)
        except IntegrityError:
            logger.info("Concurrent follow %s -> %s resolved to following", follower_id, following_id)
            return FollowResult(is_following=True)

        logger.info("User %s followed user %s", follower_id, following_id)
        await notification_service.notify(
            db,
            recipient_id=following_id,
            actor_id=follower_id,
            event_type=EventType.NEW_FOLLOW,
            target=NotificationTarget(follow_id=follow.id),
        )
        return FollowResult(is_following=True)

    async def is_following(self, db: AsyncSession, follower_id: int, following_id: int) -> bool:
        return await self._find_edge(db, follower_id, following_id) is not None

    async def list_followers(self, db: AsyncSession, user_id: int) -> List[User]:
        """Active users following `user_id`, most recent edge first."""
        await self._require_active_user(db, user_id)
        result = await db.execute(
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id, User.active())
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return list(result.scalars().all())

    async def list_following(self, db: AsyncSession, user_id: int) -> List[User]:
        """Active users `user_id` follows, most recent edge first."""
        await self._require_active_user(db, user_id)
        result = await db.execute(
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id, User.active())
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return list(result.scalars().all())

    async def count_followers(self, db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(Follow.id))
            .join(User, User.id == Follow.follower_id)
            .where(Follow.following_id == user_id, User.active())
        )
        return count or 0

    async def count_following(self, db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(Follow.id))
            .join(User, User.id == Follow.following_id)
            .where(Follow.follower_id == user_id, User.active())
        )
        return count or 0

    async def _find_edge(self, db: AsyncSession, follower_id: int, following_id: int) -> Optional[Follow]:
        result = await db.execute(
            select(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        return result.scalar_one_or_none()

    async def _require_active_user(self, db: AsyncSession, user_id: int) -> User:
        user = await get_active_user(db, user_id)
        if user is None:
            raise NotFoundError("USER.NOT_FOUND", resource_id=user_id)
        return user


follow_service = FollowService()
