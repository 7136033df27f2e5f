"""
PhotoShare Backend - Series Service
=====================================

What:  Ordered photo sets owned by one user.

Ordering invariant:
    Member positions are always exactly 0..n-1.
    - add:     appends at position n
    - remove:  later members shift down by one
    - reorder: must name every member once, with positions 0..n-1;
               anything else is a ValidationError and nothing changes

Deletion soft-deletes the series and removes its membership rows inside one
SAVEPOINT. Creating a public series notifies the owner's followers
(NEW_SERIES).
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from photoshare.models import EventType, Like, Photo, Series, SeriesPhoto
from photoshare.schemas.series import (
    SeriesCreateRequest,
    SeriesDetailResponse,
    SeriesOrderItem,
    SeriesPhotoItem,
    SeriesResponse,
    SeriesUpdateRequest,
)
from photoshare.schemas.user import UserSummary
from photoshare.services.access import get_active_photo, get_owned_series, get_visible_series
from photoshare.services.notification_service import notification_service
from photoshare.services.photo_service import photo_service
from photoshare.services.targets import NotificationTarget

logger = logging.getLogger(__name__)


class SeriesService:

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_series(
        self, db: AsyncSession, series_id: int, viewer_id: Optional[int]
    ) -> SeriesDetailResponse:
        series = await get_visible_series(db, series_id, viewer_id)
        return await self._detail(db, series, viewer_id)

    async def list_user_series(self, db: AsyncSession, user_id: int) -> List[SeriesResponse]:
        result = await db.execute(
            select(Series)
            .where(Series.user_id == user_id, Series.active())
            .order_by(Series.created_at.desc(), Series.id.desc())
        )
        series_list = result.scalars().all()
        if not series_list:
            return []

        ids = [s.id for s in series_list]
        photo_rows = await db.execute(
            select(SeriesPhoto.series_id, func.count(SeriesPhoto.id))
            .join(Photo, Photo.id == SeriesPhoto.photo_id)
            .where(SeriesPhoto.series_id.in_(ids), Photo.active())
            .group_by(SeriesPhoto.series_id)
        )
        photo_counts: Dict[int, int] = dict(photo_rows.all())
        like_rows = await db.execute(
            select(Like.series_id, func.count(Like.id))
            .where(Like.series_id.in_(ids))
            .group_by(Like.series_id)
        )
        like_counts: Dict[int, int] = dict(like_rows.all())

        return [
            self._summary(s, photo_counts.get(s.id, 0), like_counts.get(s.id, 0))
            for s in series_list
        ]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_series(
        self, db: AsyncSession, user_id: int, payload: SeriesCreateRequest
    ) -> SeriesDetailResponse:
        if payload.cover_photo_id is not None:
            await self._require_own_photo(db, payload.cover_photo_id, user_id)

        series = Series(
            user_id=user_id,
            title=payload.title.strip(),
            description=payload.description,
            is_public=payload.is_public,
            cover_photo_id=payload.cover_photo_id,
        )
        db.add(series)
        await db.flush()
        await db.refresh(series, attribute_names=["owner"])
        logger.info("Series %s created by user %s (public=%s)", series.id, user_id, series.is_public)

        if series.is_public:
            notified = await notification_service.notify_followers(
                db,
                actor_id=user_id,
                event_type=EventType.NEW_SERIES,
                target=NotificationTarget(series_id=series.id),
            )
            logger.info("Series %s announced to %d followers", series.id, notified)

        return await self._detail(db, series, user_id)

    async def update_series(
        self, db: AsyncSession, series_id: int, user_id: int, payload: SeriesUpdateRequest
    ) -> SeriesDetailResponse:
        series = await get_owned_series(db, series_id, user_id)
        updates = payload.model_dump(exclude_unset=True)

        if updates.get("cover_photo_id") is not None:
            await self._require_own_photo(db, updates["cover_photo_id"], user_id)
        if updates.get("title") is not None:
            updates["title"] = updates["title"].strip()
        # title and is_public are non-nullable columns
        for field in ("title", "is_public"):
            if field in updates and updates[field] is None:
                del updates[field]

        for field, value in updates.items():
            setattr(series, field, value)
        await db.flush()
        logger.info("Series %s updated: %s", series_id, sorted(updates))
        return await self._detail(db, series, user_id)

    async def delete_series(self, db: AsyncSession, series_id: int, user_id: int) -> None:
        series = await get_owned_series(db, series_id, user_id)
        async with db.begin_nested():
            for member in await self._members(db, series_id):
                await db.delete(member)
            series.soft_delete()
        logger.info("Series %s deleted by user %s", series_id, user_id)

    async def add_photo(
        self, db: AsyncSession, series_id: int, photo_id: int, user_id: int
    ) -> SeriesDetailResponse:
        series = await get_owned_series(db, series_id, user_id)
        await self._require_own_photo(db, photo_id, user_id)

        members = await self._members(db, series_id)
        if any(m.photo_id == photo_id for m in members):
            raise ConflictError(
                "SERIES.PHOTO_ALREADY_ADDED", context={"series_id": series_id, "photo_id": photo_id}
            )

        db.add(SeriesPhoto(series_id=series_id, photo_id=photo_id, position=len(members)))
        await db.flush()
        logger.info("Photo %s added to series %s at position %d", photo_id, series_id, len(members))
        return await self._detail(db, series, user_id)

    async def remove_photo(
        self, db: AsyncSession, series_id: int, photo_id: int, user_id: int
    ) -> SeriesDetailResponse:
        series = await get_owned_series(db, series_id, user_id)
        members = await self._members(db, series_id)
        member = next((m for m in members if m.photo_id == photo_id), None)
        if member is None:
            raise NotFoundError(
                "SERIES.PHOTO_NOT_IN_SERIES", context={"series_id": series_id, "photo_id": photo_id}
            )

        await db.delete(member)
        self._compact([m for m in members if m is not member])
        await db.flush()
        logger.info("Photo %s removed from series %s", photo_id, series_id)
        return await self._detail(db, series, user_id)

    async def reorder_photos(
        self, db: AsyncSession, series_id: int, user_id: int, orders: List[SeriesOrderItem]
    ) -> SeriesDetailResponse:
        series = await get_owned_series(db, series_id, user_id)
        members = await self._members(db, series_id)

        by_photo = {m.photo_id: m for m in members}
        requested = [o.photo_id for o in orders]
        positions = sorted(o.position for o in orders)
        if (
            len(requested) != len(set(requested))
            or set(requested) != set(by_photo)
            or positions != list(range(len(members)))
        ):
            raise ValidationError(
                "SERIES.INVALID_ORDER",
                field="orders",
                context={"expected_photo_ids": sorted(by_photo), "received": requested},
            )

        async with db.begin_nested():
            for order in orders:
                by_photo[order.photo_id].position = order.position
        logger.info("Series %s reordered (%d photos)", series_id, len(orders))
        return await self._detail(db, series, user_id)

    async def detach_photo(self, db: AsyncSession, photo_id: int) -> None:
        """
        Remove a (deleted) photo from every series, keeping positions dense.

        Photos are soft-deleted, so the cover FK's ON DELETE SET NULL never
        fires; covers pointing at the photo are cleared here.
        """
        await db.execute(
            update(Series).where(Series.cover_photo_id == photo_id).values(cover_photo_id=None)
        )
        result = await db.execute(
            select(SeriesPhoto.series_id).where(SeriesPhoto.photo_id == photo_id)
        )
        for series_id in result.scalars().all():
            members = await self._members(db, series_id)
            remaining = []
            for member in members:
                if member.photo_id == photo_id:
                    await db.delete(member)
                else:
                    remaining.append(member)
            self._compact(remaining)
        await db.flush()

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _members(self, db: AsyncSession, series_id: int) -> List[SeriesPhoto]:
        result = await db.execute(
            select(SeriesPhoto)
            .where(SeriesPhoto.series_id == series_id)
            .order_by(SeriesPhoto.position.asc(), SeriesPhoto.id.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    def _compact(members: List[SeriesPhoto]) -> None:
        for position, member in enumerate(sorted(members, key=lambda m: m.position)):
            member.position = position

    async def _require_own_photo(self, db: AsyncSession, photo_id: int, user_id: int) -> Photo:
        photo = await get_active_photo(db, photo_id)
        if photo.user_id != user_id:
            raise ForbiddenError("SERIES.PHOTO_NOT_OWNED", context={"photo_id": photo_id})
        return photo

    @staticmethod
    def _summary(series: Series, photo_count: int, like_count: int) -> SeriesResponse:
        return SeriesResponse(
            id=series.id,
            title=series.title,
            description=series.description,
            cover_photo_id=series.cover_photo_id,
            is_public=series.is_public,
            created_at=series.created_at,
            updated_at=series.updated_at,
            owner=UserSummary.model_validate(series.owner),
            photo_count=photo_count,
            like_count=like_count,
        )

    async def _detail(
        self, db: AsyncSession, series: Series, viewer_id: Optional[int]
    ) -> SeriesDetailResponse:
        """Members in position order; photos the viewer may not see are left out."""
        members = [
            m
            for m in await self._members(db, series.id)
            if not m.photo.is_deleted and (m.photo.is_public or m.photo.user_id == viewer_id)
        ]
        photos = await photo_service.to_responses(db, [m.photo for m in members], viewer_id)
        like_count = await db.scalar(
            select(func.count(Like.id)).where(Like.series_id == series.id)
        )

        summary = self._summary(series, len(members), like_count or 0)
        return SeriesDetailResponse(
            **summary.model_dump(),
            photos=[
                SeriesPhotoItem(position=m.position, photo=photo)
                for m, photo in zip(members, photos)
            ],
        )


series_service = SeriesService()
