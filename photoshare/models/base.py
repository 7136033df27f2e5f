"""
PhotoShare Backend - Shared Model Mixins
==========================================

What:  Column mixins reused by every table: creation/update timestamps and
       soft delete.
Why:   "Is this row still alive?" is asked by almost every query. Keeping the
       predicate in one place (`SoftDeleteMixin.active()`) means no service
       spells `deleted_at IS NULL` on its own.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware UTC now; naive datetimes are never stored."""
    return datetime.now(timezone.utc)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )


class TimestampMixin(CreatedAtMixin):
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )


class SoftDeleteMixin:
    """
    Nullable `deleted_at` marker.

    Rows are never physically removed by the API; history that references a
    soft-deleted row (likes, notifications) stays intact.

    Usage:
        select(Photo).where(Photo.id == photo_id, Photo.active())
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    @classmethod
    def active(cls):
        return cls.deleted_at.is_(None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = utcnow()
