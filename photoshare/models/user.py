"""
PhotoShare Backend - User Model
=================================

What:  ORM model for the `users` table.
Who:   Read on every authenticated request (the JWT is re-validated against
       this row), by the notification fan-out for preference gating, and by
       every listing that shows an author.

Column notes:
    - email: unique, the login identifier
    - username: display name, not unique
    - notify_*: per-event opt-outs checked before a notification is written;
      NEW_COMMENT and NEW_REPLY share `notify_comments`
    - deleted_at: account deletion is soft; a deleted user cannot log in,
      disappears from follower listings and never receives notifications
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from photoshare.database import Base
from photoshare.models.base import SoftDeleteMixin, TimestampMixin


class User(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # ── Notification preferences ──────────────────────────────────────────
    notify_likes: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    notify_comments: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    notify_follows: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    notify_series: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
