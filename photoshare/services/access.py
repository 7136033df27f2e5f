"""
PhotoShare Backend - Visibility & Ownership Lookups
=====================================================

What:  The single place that answers "may this viewer see / change this
       photo, series or comment?".
How:   Each helper loads the row, raises NotFoundError when it is absent or
       soft-deleted, and ForbiddenError when it is private (or not owned)
       and the caller is not the owner. `viewer_id` is None for anonymous
       callers.

Used by the like, comment, series, collection and image code paths so the
rules cannot drift apart.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import ForbiddenError, NotFoundError
from photoshare.models import Comment, Photo, Series, User
from photoshare.services.targets import CommentTarget, TargetKind


async def get_active_photo(db: AsyncSession, photo_id: int) -> Photo:
    result = await db.execute(select(Photo).where(Photo.id == photo_id, Photo.active()))
    photo = result.scalar_one_or_none()
    if photo is None:
        raise NotFoundError("PHOTO.NOT_FOUND", resource_id=photo_id)
    return photo


async def get_active_series(db: AsyncSession, series_id: int) -> Series:
    result = await db.execute(select(Series).where(Series.id == series_id, Series.active()))
    series = result.scalar_one_or_none()
    if series is None:
        raise NotFoundError("SERIES.NOT_FOUND", resource_id=series_id)
    return series


async def get_active_comment(db: AsyncSession, comment_id: int) -> Comment:
    result = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.active())
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("COMMENT.NOT_FOUND", resource_id=comment_id)
    return comment


async def get_active_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id, User.active()))
    return result.scalar_one_or_none()


async def get_visible_photo(db: AsyncSession, photo_id: int, viewer_id: Optional[int]) -> Photo:
    photo = await get_active_photo(db, photo_id)
    if not photo.is_public and photo.user_id != viewer_id:
        raise ForbiddenError("PHOTO.IS_PRIVATE", context={"photo_id": photo_id})
    return photo


async def get_visible_series(db: AsyncSession, series_id: int, viewer_id: Optional[int]) -> Series:
    series = await get_active_series(db, series_id)
    if not series.is_public and series.user_id != viewer_id:
        raise ForbiddenError("SERIES.IS_PRIVATE", context={"series_id": series_id})
    return series


async def get_owned_photo(db: AsyncSession, photo_id: int, user_id: int) -> Photo:
    photo = await get_active_photo(db, photo_id)
    if photo.user_id != user_id:
        raise ForbiddenError("PHOTO.NOT_OWNER", context={"photo_id": photo_id})
    return photo


async def get_owned_series(db: AsyncSession, series_id: int, user_id: int) -> Series:
    series = await get_active_series(db, series_id)
    if series.user_id != user_id:
        raise ForbiddenError("SERIES.NOT_OWNER", context={"series_id": series_id})
    return series


async def get_visible_target_owner(
    db: AsyncSession, target: CommentTarget, viewer_id: Optional[int]
) -> int:
    """Checks a photo/series target is visible and returns its owner's id."""
    if target.kind is TargetKind.PHOTO:
        photo = await get_visible_photo(db, target.id, viewer_id)
        return photo.user_id
    series = await get_visible_series(db, target.id, viewer_id)
    return series.user_id


async def get_visible_comment(
    db: AsyncSession, comment_id: int, viewer_id: Optional[int]
) -> Comment:
    """A comment is visible when the photo or series it hangs off is."""
    comment = await get_active_comment(db, comment_id)
    await get_visible_target_owner(db, comment_target(comment), viewer_id)
    return comment


def comment_target(comment: Comment) -> CommentTarget:
    if comment.photo_id is not None:
        return CommentTarget.photo(comment.photo_id)
    return CommentTarget.series(comment.series_id)
