"""
PhotoShare Backend - Collection Service
=========================================

What:  Private photo sets. Only the owner can read or change a collection.

Default collection:
    `ensure_default_collection()` returns the user's default collection,
    creating it on first use. Creation runs in a SAVEPOINT; if a concurrent
    request created it first, the unique partial index rejects ours and the
    existing row is returned instead. Calling it repeatedly always yields
    the same collection. The default collection cannot be deleted.
"""

import logging
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from photoshare.i18n import translate
from photoshare.models import Collection, CollectionPhoto, Photo
from photoshare.schemas.collection import (
    CollectionCreateRequest,
    CollectionDetailResponse,
    CollectionResponse,
    CollectionUpdateRequest,
)
from photoshare.schemas.photo import PhotoResponse
from photoshare.services.access import get_visible_photo
from photoshare.services.photo_service import photo_service

logger = logging.getLogger(__name__)


class CollectionService:

    async def ensure_default_collection(self, db: AsyncSession, user_id: int) -> Collection:
        existing = await self._find_default(db, user_id)
        if existing is not None:
            return existing

        collection = Collection(
            user_id=user_id,
            title=translate("COLLECTION.DEFAULT_TITLE"),
            description=translate("COLLECTION.DEFAULT_DESCRIPTION"),
            is_default=True,
        )
        try:
            async with db.begin_nested():
                db.add(collection)
        except IntegrityError:
            logger.info("Default collection for user %s created concurrently", user_id)
            return await self._find_default(db, user_id)

        logger.info("Default collection %s created for user %s", collection.id, user_id)
        return collection

    async def list_collections(self, db: AsyncSession, user_id: int) -> List[CollectionResponse]:
        """Default collection first, then newest first."""
        await self.ensure_default_collection(db, user_id)
        result = await db.execute(
            select(Collection)
            .where(Collection.user_id == user_id)
            .order_by(Collection.is_default.desc(), Collection.created_at.desc(), Collection.id.desc())
        )
        collections = result.scalars().all()

        count_rows = await db.execute(
            select(CollectionPhoto.collection_id, func.count(CollectionPhoto.id))
            .join(Photo, Photo.id == CollectionPhoto.photo_id)
            .where(CollectionPhoto.collection_id.in_([c.id for c in collections]), Photo.active())
            .group_by(CollectionPhoto.collection_id)
        )
        counts: Dict[int, int] = dict(count_rows.all())
        return [self._summary(c, counts.get(c.id, 0)) for c in collections]

    async def get_collection(
        self, db: AsyncSession, collection_id: int, user_id: int
    ) -> CollectionDetailResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        return await self._detail(db, collection, user_id)

    async def create_collection(
        self, db: AsyncSession, user_id: int, payload: CollectionCreateRequest
    ) -> CollectionDetailResponse:
        collection = Collection(
            user_id=user_id,
            title=payload.title.strip(),
            description=payload.description,
            is_default=False,
        )
        db.add(collection)
        await db.flush()
        logger.info("Collection %s created by user %s", collection.id, user_id)
        return await self._detail(db, collection, user_id)

    async def update_collection(
        self, db: AsyncSession, collection_id: int, user_id: int, payload: CollectionUpdateRequest
    ) -> CollectionDetailResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        updates = payload.model_dump(exclude_unset=True)
        if updates.get("title") is not None:
            collection.title = updates["title"].strip()
        if "description" in updates:
            collection.description = updates["description"]
        await db.flush()
        return await self._detail(db, collection, user_id)

    async def delete_collection(self, db: AsyncSession, collection_id: int, user_id: int) -> None:
        collection = await self._get_owned(db, collection_id, user_id)
        if collection.is_default:
            raise ValidationError(
                "COLLECTION.DEFAULT_UNDELETABLE", context={"collection_id": collection_id}
            )
        async with db.begin_nested():
            for member in await self._members(db, collection_id):
                await db.delete(member)
            await db.delete(collection)
        logger.info("Collection %s deleted by user %s", collection_id, user_id)

    async def add_photo(
        self, db: AsyncSession, collection_id: int, photo_id: int, user_id: int
    ) -> CollectionDetailResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        await get_visible_photo(db, photo_id, user_id)
        if await self._find_member(db, collection_id, photo_id) is not None:
            raise ConflictError(
                "COLLECTION.PHOTO_ALREADY_ADDED",
                context={"collection_id": collection_id, "photo_id": photo_id},
            )
        db.add(CollectionPhoto(collection_id=collection_id, photo_id=photo_id))
        await db.flush()
        return await self._detail(db, collection, user_id)

    async def remove_photo(
        self, db: AsyncSession, collection_id: int, photo_id: int, user_id: int
    ) -> CollectionDetailResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        member = await self._find_member(db, collection_id, photo_id)
        if member is None:
            raise NotFoundError(
                "COLLECTION.PHOTO_NOT_IN_COLLECTION",
                context={"collection_id": collection_id, "photo_id": photo_id},
            )
        await db.delete(member)
        await db.flush()
        return await self._detail(db, collection, user_id)

    async def toggle_default(self, db: AsyncSession, user_id: int, photo_id: int) -> bool:
        """Add the photo to the default collection, or remove it. Returns `added`."""
        await get_visible_photo(db, photo_id, user_id)
        collection = await self.ensure_default_collection(db, user_id)

        member = await self._find_member(db, collection.id, photo_id)
        if member is not None:
            await db.delete(member)
            await db.flush()
            return False

        db.add(CollectionPhoto(collection_id=collection.id, photo_id=photo_id))
        await db.flush()
        return True

    async def list_default_photos(self, db: AsyncSession, user_id: int) -> List[PhotoResponse]:
        collection = await self.ensure_default_collection(db, user_id)
        return await self._visible_photos(db, collection.id, user_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find_default(self, db: AsyncSession, user_id: int):
        result = await db.execute(
            select(Collection).where(Collection.user_id == user_id, Collection.is_default.is_(True))
        )
        return result.scalar_one_or_none()

    async def _get_owned(self, db: AsyncSession, collection_id: int, user_id: int) -> Collection:
        collection = await db.get(Collection, collection_id)
        if collection is None:
            raise NotFoundError("COLLECTION.NOT_FOUND", resource_id=collection_id)
        if collection.user_id != user_id:
            raise ForbiddenError("COLLECTION.NOT_OWNER", context={"collection_id": collection_id})
        return collection

    async def _members(self, db: AsyncSession, collection_id: int) -> List[CollectionPhoto]:
        result = await db.execute(
            select(CollectionPhoto)
            .where(CollectionPhoto.collection_id == collection_id)
            .order_by(CollectionPhoto.created_at.desc(), CollectionPhoto.id.desc())
        )
        return list(result.scalars().all())

    async def _find_member(self, db: AsyncSession, collection_id: int, photo_id: int):
        result = await db.execute(
            select(CollectionPhoto).where(
                CollectionPhoto.collection_id == collection_id,
                CollectionPhoto.photo_id == photo_id,
            )
        )
        return result.scalar_one_or_none()

    async def _visible_photos(
        self, db: AsyncSession, collection_id: int, user_id: int
    ) -> List[PhotoResponse]:
        """Newest-added first; deleted photos and photos made private since are skipped."""
        photos = [
            m.photo
            for m in await self._members(db, collection_id)
            if not m.photo.is_deleted and (m.photo.is_public or m.photo.user_id == user_id)
        ]
        return await photo_service.to_responses(db, photos, user_id)

    @staticmethod
    def _summary(collection: Collection, photo_count: int) -> CollectionResponse:
        return CollectionResponse(
            id=collection.id,
            title=collection.title,
            description=collection.description,
            is_default=collection.is_default,
            photo_count=photo_count,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )

    async def _detail(
        self, db: AsyncSession, collection: Collection, user_id: int
    ) -> CollectionDetailResponse:
        photos = await self._visible_photos(db, collection.id, user_id)
        summary = self._summary(collection, len(photos))
        return CollectionDetailResponse(**summary.model_dump(), photos=photos)


collection_service = CollectionService()
