"""
PhotoShare Backend - Like Model
=================================

What:  One table for likes on photos, series and comments.
How:   Tagged union in storage: exactly one of the three target columns is
       set (check constraint) and a user can like a given target at most
       once (one unique constraint per target column; NULLs never collide).

The toggle in `like_service` relies on these unique constraints to resolve
two concurrent "like" requests into a single row.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from photoshare.database import Base
from photoshare.models.base import CreatedAtMixin


class Like(CreatedAtMixin, Base):
    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    photo_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("photos.id", ondelete="CASCADE"), nullable=True, index=True
    )
    series_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN photo_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN series_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="single_target",
        ),
        UniqueConstraint("user_id", "photo_id"),
        UniqueConstraint("user_id", "series_id"),
        UniqueConstraint("user_id", "comment_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Like(id={self.id}, user_id={self.user_id}, photo_id={self.photo_id}, "
            f"series_id={self.series_id}, comment_id={self.comment_id})>"
        )
