"""
PhotoShare Backend - Comment Model
====================================

What:  ORM model for the `comments` table.

Target:
    A comment belongs to exactly one of a photo or a series (check
    constraint). A reply (`parent_id` set) always carries the same target as
    its parent; the comment service rejects anything else before insert.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.database import Base
from photoshare.models.base import CreatedAtMixin, SoftDeleteMixin
from photoshare.models.user import User

COMMENT_MAX_LENGTH = 1000


class Comment(CreatedAtMixin, SoftDeleteMixin, Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    photo_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("photos.id", ondelete="CASCADE"), nullable=True
    )
    series_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=True
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    content: Mapped[str] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=False)

    author: Mapped[User] = relationship(lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "(photo_id IS NULL) <> (series_id IS NULL)",
            name="single_target",
        ),
        Index("ix_comments_photo_id_created_at", "photo_id", "created_at"),
        Index("ix_comments_series_id_created_at", "series_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, user_id={self.user_id}, parent_id={self.parent_id})>"
