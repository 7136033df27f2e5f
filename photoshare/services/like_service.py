"""
PhotoShare Backend - Like Service
===================================

What:  Toggle-like state machine for photos, series and comments.

State machine (per user, per target):

    not liked ──toggle──▶ liked      (insert, notify target owner)
    liked     ──toggle──▶ not liked  (delete, no notification)

Concurrency:
    Two simultaneous "like" requests may both see "not liked". The insert
    runs inside a SAVEPOINT; the loser hits the (user, target) unique
    constraint, rolls back only its savepoint and reports liked=true
    without notifying a second time.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.models import EventType, Like
from photoshare.services.access import get_visible_comment, get_visible_photo, get_visible_series
from photoshare.services.notification_service import notification_service
from photoshare.services.targets import LikeTarget, NotificationTarget, TargetKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeResult:
    liked: bool


class LikeService:

    async def toggle_like(self, db: AsyncSession, user_id: int, target: LikeTarget) -> LikeResult:
        """
        Flip the caller's like on `target`.

        Raises:
            NotFoundError:  target absent or soft-deleted
            ForbiddenError: target (or the comment's photo/series) is private
                            and the caller is not its owner
        """
        owner_id = await self._visible_target_owner(db, user_id, target)

        existing = await self._find_like(db, user_id, target)
        if existing is not None:
            await db.delete(existing)
            await db.flush()
            logger.info("User %s unliked %s %s", user_id, target.kind.value, target.id)
            return LikeResult(liked=False)

        try:
            async with db.begin_nested():
                db.add(Like(user_id=user_id, **target.column_values()))
        except IntegrityError:
            logger.info(
                "Concurrent like on %s %s by user %s resolved to liked",
                target.kind.value,
                target.id,
                user_id,
            )
            return LikeResult(liked=True)

        logger.info("User %s liked %s %s", user_id, target.kind.value, target.id)
        await notification_service.notify(
            db,
            recipient_id=owner_id,
            actor_id=user_id,
            event_type=EventType.NEW_LIKE,
            target=NotificationTarget.for_like(target),
        )
        return LikeResult(liked=True)

    async def count_likes(self, db: AsyncSession, target: LikeTarget) -> int:
        column = getattr(Like, target.column)
        count = await db.scalar(select(func.count(Like.id)).where(column == target.id))
        return count or 0

    async def _find_like(self, db: AsyncSession, user_id: int, target: LikeTarget) -> Optional[Like]:
        column = getattr(Like, target.column)
        result = await db.execute(
            select(Like).where(Like.user_id == user_id, column == target.id)
        )
        return result.scalar_one_or_none()

    async def _visible_target_owner(self, db: AsyncSession, user_id: int, target: LikeTarget) -> int:
        if target.kind is TargetKind.PHOTO:
            return (await get_visible_photo(db, target.id, user_id)).user_id
        if target.kind is TargetKind.SERIES:
            return (await get_visible_series(db, target.id, user_id)).user_id
        return (await get_visible_comment(db, target.id, user_id)).user_id


like_service = LikeService()
