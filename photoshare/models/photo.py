"""
PhotoShare Backend - Photo Model
==================================

What:  ORM model for the `photos` table.
How:   The binary objects live in storage; the row keeps their keys
       (`image_key`, `thumbnail_key`) relative to the storage root.

Visibility:
    A private photo (is_public = false) is visible only to its owner. The
    check lives in `services.access`; list queries filter on is_public.
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.database import Base
from photoshare.models.base import SoftDeleteMixin, TimestampMixin
from photoshare.models.user import User

DEFAULT_PHOTO_TITLE = "Untitled"


class Photo(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_PHOTO_TITLE)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_key: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_key: Mapped[str] = mapped_column(String(500), nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    # Many-to-one, eagerly joined: every photo response carries its owner
    owner: Mapped[User] = relationship(lazy="joined")

    __table_args__ = (
        Index("ix_photos_public_created_at", "is_public", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Photo(id={self.id}, user_id={self.user_id}, is_public={self.is_public})>"
