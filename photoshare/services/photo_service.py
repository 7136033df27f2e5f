"""
PhotoShare Backend - Photo Service
====================================

What:  Public feed, photo detail, upload, visibility changes and deletion.
How:   Upload delegates bytes to FileService, then writes the row. If the
       row cannot be written, the stored objects are removed again.

Feed ordering:
    latest   created_at DESC
    popular  like count DESC, then created_at DESC

Counters (likes, comments, "liked by me") are computed in batch for a page
by `to_responses()`, which the user, series and collection services reuse.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.models import DEFAULT_PHOTO_TITLE, CollectionPhoto, Comment, Like, Photo, User
from photoshare.schemas.photo import PhotoResponse
from photoshare.services.access import get_owned_photo, get_visible_photo
from photoshare.services.file_service import file_service

logger = logging.getLogger(__name__)

SORT_LATEST = "latest"
SORT_POPULAR = "popular"


class PhotoService:

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_photos(
        self,
        db: AsyncSession,
        sort: str = SORT_LATEST,
        page: int = 1,
        limit: int = 20,
        viewer_id: Optional[int] = None,
    ) -> Tuple[List[PhotoResponse], int]:
        """Public, non-deleted photos of active users. Returns (page, total)."""
        filters = (Photo.active(), Photo.is_public.is_(True), User.active())

        query = select(Photo).join(User, User.id == Photo.user_id).where(*filters)
        if sort == SORT_POPULAR:
            like_count = (
                select(func.count(Like.id))
                .where(Like.photo_id == Photo.id)
                .correlate(Photo)
                .scalar_subquery()
            )
            query = query.order_by(like_count.desc(), Photo.created_at.desc(), Photo.id.desc())
        else:
            query = query.order_by(Photo.created_at.desc(), Photo.id.desc())

        result = await db.execute(query.offset((page - 1) * limit).limit(limit))
        photos = result.scalars().all()

        total = await db.scalar(
            select(func.count(Photo.id)).join(User, User.id == Photo.user_id).where(*filters)
        )
        return await self.to_responses(db, photos, viewer_id), total or 0

    async def list_user_photos(
        self, db: AsyncSession, owner_id: int, viewer_id: Optional[int] = None
    ) -> List[PhotoResponse]:
        """All active photos of `owner_id`; private ones only for the owner."""
        query = select(Photo).where(Photo.user_id == owner_id, Photo.active())
        if viewer_id != owner_id:
            query = query.where(Photo.is_public.is_(True))
        result = await db.execute(query.order_by(Photo.created_at.desc(), Photo.id.desc()))
        return await self.to_responses(db, result.scalars().all(), viewer_id)

    async def list_liked_photos(self, db: AsyncSession, user_id: int) -> List[PhotoResponse]:
        """Photos the user liked that are still alive and visible to them."""
        result = await db.execute(
            select(Photo)
            .join(Like, Like.photo_id == Photo.id)
            .where(
                Like.user_id == user_id,
                Photo.active(),
                (Photo.is_public.is_(True)) | (Photo.user_id == user_id),
            )
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        return await self.to_responses(db, result.scalars().all(), user_id)

    async def get_photo(self, db: AsyncSession, photo_id: int, viewer_id: Optional[int]) -> PhotoResponse:
        photo = await get_visible_photo(db, photo_id, viewer_id)
        return (await self.to_responses(db, [photo], viewer_id))[0]

    async def to_responses(
        self, db: AsyncSession, photos: Sequence[Photo], viewer_id: Optional[int]
    ) -> List[PhotoResponse]:
        if not photos:
            return []
        ids = [p.id for p in photos]

        like_rows = await db.execute(
            select(Like.photo_id, func.count(Like.id))
            .where(Like.photo_id.in_(ids))
            .group_by(Like.photo_id)
        )
        like_counts: Dict[int, int] = dict(like_rows.all())

        comment_rows = await db.execute(
            select(Comment.photo_id, func.count(Comment.id))
            .where(Comment.photo_id.in_(ids), Comment.active())
            .group_by(Comment.photo_id)
        )
        comment_counts: Dict[int, int] = dict(comment_rows.all())

        liked: Set[int] = set()
        if viewer_id is not None:
            liked_rows = await db.execute(
                select(Like.photo_id).where(Like.user_id == viewer_id, Like.photo_id.in_(ids))
            )
            liked = set(liked_rows.scalars().all())

        return [
            PhotoResponse.from_photo(
                photo,
                like_count=like_counts.get(photo.id, 0),
                comment_count=comment_counts.get(photo.id, 0),
                is_liked=photo.id in liked,
            )
            for photo in photos
        ]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_photo(
        self,
        db: AsyncSession,
        user_id: int,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        is_public: bool = True,
    ) -> PhotoResponse:
        """
        Store the image pair, then the row.

        Raises:
            ValidationError:  rejected upload
            FileStorageError: storage write failed
        """
        stored = await file_service.validate_and_store(filename, content, content_length)

        try:
            photo = Photo(
                user_id=user_id,
                title=(title or "").strip() or DEFAULT_PHOTO_TITLE,
                description=description,
                image_key=stored.image_key,
                thumbnail_key=stored.thumbnail_key,
                width=stored.width,
                height=stored.height,
                is_public=is_public,
            )
            db.add(photo)
            await db.flush()
            await db.refresh(photo, attribute_names=["owner"])
        except Exception:
            await file_service.cleanup_file(stored.image_key)
            await file_service.cleanup_file(stored.thumbnail_key)
            raise

        logger.info(
            "Photo %s uploaded by user %s (%dx%d, public=%s)",
            photo.id,
            user_id,
            stored.width,
            stored.height,
            is_public,
        )
        return PhotoResponse.from_photo(photo)

    async def update_visibility(
        self, db: AsyncSession, photo_id: int, user_id: int, is_public: bool
    ) -> PhotoResponse:
        photo = await get_owned_photo(db, photo_id, user_id)
        photo.is_public = is_public
        await db.flush()
        logger.info("Photo %s visibility set to public=%s", photo_id, is_public)
        return (await self.to_responses(db, [photo], user_id))[0]

    async def delete_photo(self, db: AsyncSession, photo_id: int, user_id: int) -> None:
        """
        Soft-delete the photo and detach it from series and collections.

        Stored objects are kept; the images route stops serving them because
        the row is no longer active.
        """
        photo = await get_owned_photo(db, photo_id, user_id)
        photo.soft_delete()

        # Imported here: series_service depends on this module for responses
        from photoshare.services.series_service import series_service

        await series_service.detach_photo(db, photo_id)

        memberships = await db.execute(
            select(CollectionPhoto).where(CollectionPhoto.photo_id == photo_id)
        )
        for membership in memberships.scalars().all():
            await db.delete(membership)

        await db.flush()
        logger.info("Photo %s deleted by user %s", photo_id, user_id)

    async def count_user_photos(self, db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(Photo.id)).where(Photo.user_id == user_id, Photo.active())
        )
        return count or 0

    async def count_received_likes(self, db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(Like.id))
            .join(Photo, Photo.id == Like.photo_id)
            .where(Photo.user_id == user_id, Photo.active())
        )
        return count or 0


photo_service = PhotoService()
