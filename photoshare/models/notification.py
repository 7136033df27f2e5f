"""
PhotoShare Backend - Notification Model
=========================================

What:  ORM model for the `notifications` table and the closed set of event
       types that produce a notification.

Target reference:
    `photo_id`, `series_id`, `comment_id` and `follow_id` are all nullable.
    A like notification points at the liked photo/series/comment, a comment
    notification at the new comment and its photo or series, a follow
    notification at the follow edge, a series notification at the series.
    Together with (user_id, actor_id, event_type) these columns form the
    deduplication key used by `notification_service.notify()`.
"""

import enum
from typing import Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.database import Base
from photoshare.models.base import CreatedAtMixin
from photoshare.models.user import User


class EventType(str, enum.Enum):
    NEW_LIKE = "NEW_LIKE"
    NEW_COMMENT = "NEW_COMMENT"
    NEW_REPLY = "NEW_REPLY"
    NEW_FOLLOW = "NEW_FOLLOW"
    NEW_SERIES = "NEW_SERIES"


class Notification(CreatedAtMixin, Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Recipient
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    actor_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    event_type: Mapped[EventType] = mapped_column(
        Enum(EventType, name="notification_event_type", native_enum=False, length=20),
        nullable=False,
    )
    photo_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("photos.id", ondelete="CASCADE"), nullable=True
    )
    series_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    # The edge disappears on unfollow; the notification stays
    follow_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("follows.id", ondelete="SET NULL"), nullable=True
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    actor: Mapped[User] = relationship(foreign_keys=[actor_id], lazy="joined")

    __table_args__ = (
        Index("ix_notifications_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, user_id={self.user_id}, "
            f"event_type='{self.event_type}', is_read={self.is_read})>"
        )
