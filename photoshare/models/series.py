"""
PhotoShare Backend - Series Models
====================================

What:  `series` (an owner's ordered set of photos) and its membership table
       `series_photos`.

Ordering:
    `position` is dense, 0..n-1, and fully user controlled. Adding appends
    at n, removing shifts later photos down, reordering must name every
    member exactly once. The series service enforces this; the table only
    guarantees a photo appears once per series.
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.database import Base
from photoshare.models.base import CreatedAtMixin, SoftDeleteMixin, TimestampMixin
from photoshare.models.photo import Photo
from photoshare.models.user import User


class Series(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "series"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Must reference a photo of the same owner (checked in the service)
    cover_photo_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("photos.id", ondelete="SET NULL"), nullable=True
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    owner: Mapped[User] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<Series(id={self.id}, user_id={self.user_id}, title='{self.title}')>"


class SeriesPhoto(CreatedAtMixin, Base):
    __tablename__ = "series_photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    series_id: Mapped[int] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True
    )
    photo_id: Mapped[int] = mapped_column(
        ForeignKey("photos.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    photo: Mapped[Photo] = relationship(lazy="joined")

    __table_args__ = (UniqueConstraint("series_id", "photo_id"),)
