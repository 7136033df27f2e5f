"""
PhotoShare Backend - Notification Service
===========================================

What:  Writes notifications for likes, comments, replies, follows and new
       series, and serves the recipient's inbox.
Who:   Called by the like, comment, follow and series services after their
       own row is written; never directly by routes except for reads.

Fan-out rules (applied in order, each one a silent no-op when it fails):
    1. Self-suppression:   recipient == actor → nothing
    2. Recipient alive:    missing or soft-deleted recipient → nothing
    3. Preference gating:  the recipient's notify_* flag for the event
    4. Deduplication:      an identical (recipient, actor, event, target)
                           row already exists → nothing

    Dedup compares every target column, NULL matching NULL, so liking,
    unliking and liking again the same photo notifies the owner once.

Preference map:
    NEW_LIKE                → notify_likes
    NEW_COMMENT, NEW_REPLY  → notify_comments
    NEW_FOLLOW              → notify_follows
    NEW_SERIES              → notify_series
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import ValidationError
from photoshare.i18n import translate
from photoshare.models import EventType, Follow, Notification, User
from photoshare.schemas.notification import NotificationListResponse, NotificationResponse
from photoshare.schemas.user import UserSummary
from photoshare.services.access import get_active_user
from photoshare.services.targets import NotificationTarget

logger = logging.getLogger(__name__)

PREFERENCE_BY_EVENT = {
    EventType.NEW_LIKE: "notify_likes",
    EventType.NEW_COMMENT: "notify_comments",
    EventType.NEW_REPLY: "notify_comments",
    EventType.NEW_FOLLOW: "notify_follows",
    EventType.NEW_SERIES: "notify_series",
}


class NotificationService:
    """Stateless; every method takes the request session."""

    async def notify(
        self,
        db: AsyncSession,
        recipient_id: int,
        actor_id: int,
        event_type: EventType,
        target: NotificationTarget,
    ) -> Optional[Notification]:
        """
        Create one notification unless a fan-out rule suppresses it.

        Returns:
            The new Notification, or None when suppressed.
        """
        if recipient_id == actor_id:
            return None

        recipient = await get_active_user(db, recipient_id)
        if recipient is None:
            logger.debug("Skipping %s: recipient %s is gone", event_type.value, recipient_id)
            return None

        if not getattr(recipient, PREFERENCE_BY_EVENT[event_type]):
            logger.debug("Skipping %s: user %s opted out", event_type.value, recipient_id)
            return None

        if await self._exists(db, recipient_id, actor_id, event_type, target):
            logger.debug("Skipping %s: duplicate for user %s", event_type.value, recipient_id)
            return None

        notification = Notification(
            user_id=recipient_id,
            actor_id=actor_id,
            event_type=event_type,
            **target.column_values(),
        )
        db.add(notification)
        await db.flush()
        logger.info(
            "Notification %s created: %s from user %s to user %s",
            notification.id,
            event_type.value,
            actor_id,
            recipient_id,
        )
        return notification

    async def notify_followers(
        self,
        db: AsyncSession,
        actor_id: int,
        event_type: EventType,
        target: NotificationTarget,
    ) -> int:
        """Notify every active follower of `actor_id`; returns how many were created."""
        result = await db.execute(
            select(Follow.follower_id)
            .join(User, User.id == Follow.follower_id)
            .where(Follow.following_id == actor_id, User.active())
        )
        created = 0
        for follower_id in result.scalars().all():
            if await self.notify(db, follower_id, actor_id, event_type, target):
                created += 1
        return created

    async def _exists(
        self,
        db: AsyncSession,
        recipient_id: int,
        actor_id: int,
        event_type: EventType,
        target: NotificationTarget,
    ) -> bool:
        conditions = [
            Notification.user_id == recipient_id,
            Notification.actor_id == actor_id,
            Notification.event_type == event_type,
        ]
        for column_name, value in target.column_values().items():
            column = getattr(Notification, column_name)
            conditions.append(column.is_(None) if value is None else column == value)

        result = await db.execute(select(Notification.id).where(*conditions).limit(1))
        return result.scalar_one_or_none() is not None

    # ── Inbox ─────────────────────────────────────────────────────────────

    async def list_notifications(
        self, db: AsyncSession, user_id: int, page: int = 1, limit: int = 20
    ) -> NotificationListResponse:
        """Newest first, with the actor summary and a localized message."""
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        notifications = result.scalars().all()

        total = await db.scalar(
            select(func.count(Notification.id)).where(Notification.user_id == user_id)
        )

        return NotificationListResponse(
            notifications=[self._to_response(n) for n in notifications],
            unread_count=await self.count_unread(db, user_id),
            page=page,
            limit=limit,
            total=total or 0,
        )

    async def count_unread(self, db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return count or 0

    async def mark_as_read(self, db: AsyncSession, user_id: int, notification_ids: List[int]) -> int:
        """
        Flag the caller's notifications as read. Ids belonging to other users
        are ignored, never an error.

        Returns:
            Number of rows that changed from unread to read.
        """
        if not notification_ids:
            raise ValidationError("NOTIFICATION.IDS_REQUIRED", field="notification_ids")

        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.id.in_(notification_ids),
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        logger.info("User %s marked %d notifications read", user_id, result.rowcount)
        return result.rowcount

    @staticmethod
    def _to_response(notification: Notification) -> NotificationResponse:
        return NotificationResponse(
            id=notification.id,
            event_type=notification.event_type,
            message=translate(
                f"NOTIFICATION.EVENT.{notification.event_type.value}",
                actor=notification.actor.username,
            ),
            actor=UserSummary.model_validate(notification.actor),
            photo_id=notification.photo_id,
            series_id=notification.series_id,
            comment_id=notification.comment_id,
            follow_id=notification.follow_id,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


notification_service = NotificationService()
