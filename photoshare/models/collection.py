"""
PhotoShare Backend - Collection Models
========================================

What:  `collections` (private, unordered sets of photos a user saved) and the
       membership table `collection_photos`.

Default collection:
    Each user has at most one collection flagged `is_default`, enforced by a
    unique partial index. It is created lazily by
    `collection_service.ensure_default_collection()` the first time it is
    needed, never by matching on a title.
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photoshare.database import Base
from photoshare.models.base import CreatedAtMixin, TimestampMixin
from photoshare.models.photo import Photo


class Collection(TimestampMixin, Base):
    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        Index(
            "ix_collections_one_default_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, user_id={self.user_id}, is_default={self.is_default})>"


class CollectionPhoto(CreatedAtMixin, Base):
    __tablename__ = "collection_photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    photo_id: Mapped[int] = mapped_column(
        ForeignKey("photos.id", ondelete="CASCADE"), nullable=False
    )

    photo: Mapped[Photo] = relationship(lazy="joined")

    __table_args__ = (UniqueConstraint("collection_id", "photo_id"),)
