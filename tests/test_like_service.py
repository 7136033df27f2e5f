"""
PhotoShare Backend - Like Service Tests
=========================================

Test Strategy:
    ✅ Toggle is idempotent per pair: like → unlike → like
    ✅ Counts follow the toggles, per target kind
    ✅ Visibility: private targets of other users are refused
    ✅ Owner notified once, never for self-likes
    ✅ Exactly-one-target validation on LikeTarget
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from photoshare.exceptions import ForbiddenError, NotFoundError, ValidationError
from photoshare.models import Comment, EventType, Like, Notification, Series
from photoshare.services.like_service import like_service
from photoshare.services.targets import LikeTarget, TargetKind


async def _notification_count(db, user_id):
    return await db.scalar(
        select(func.count(Notification.id)).where(Notification.user_id == user_id)
    )


class TestLikeTarget:

    def test_from_ids_single_photo(self):
        target = LikeTarget.from_ids(photo_id=3)
        assert target.kind is TargetKind.PHOTO
        assert target.id == 3
        assert target.column_values() == {"photo_id": 3, "series_id": None, "comment_id": None}

    def test_from_ids_none_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            LikeTarget.from_ids()
        assert exc_info.value.message_key == "LIKE.TARGET_REQUIRED"

    def test_from_ids_two_targets_rejected(self):
        with pytest.raises(ValidationError):
            LikeTarget.from_ids(photo_id=1, comment_id=2)


class TestToggleLike:

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        target = LikeTarget.from_ids(photo_id=photo.id)

        first = await like_service.toggle_like(db_session, fan.id, target)
        assert first.liked is True
        assert await like_service.count_likes(db_session, target) == 1

        second = await like_service.toggle_like(db_session, fan.id, target)
        assert second.liked is False
        assert await like_service.count_likes(db_session, target) == 0

    @pytest.mark.asyncio
    async def test_relike_does_not_duplicate_notification(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        target = LikeTarget.from_ids(photo_id=photo.id)

        for _ in range(3):
            await like_service.toggle_like(db_session, fan.id, target)

        assert await like_service.count_likes(db_session, target) == 1
        assert await _notification_count(db_session, owner.id) == 1

        notification = (await db_session.execute(select(Notification))).scalar_one()
        assert notification.event_type == EventType.NEW_LIKE
        assert notification.actor_id == fan.id
        assert notification.photo_id == photo.id

    @pytest.mark.asyncio
    async def test_concurrent_insert_resolves_to_liked(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        target = LikeTarget.from_ids(photo_id=photo.id)
        await like_service.toggle_like(db_session, fan.id, target)

        # The lookup misses the row another request just inserted
        with patch.object(like_service, "_find_like", new=AsyncMock(return_value=None)):
            result = await like_service.toggle_like(db_session, fan.id, target)

        assert result.liked is True
        assert await like_service.count_likes(db_session, target) == 1
        assert await _notification_count(db_session, owner.id) == 1

    @pytest.mark.asyncio
    async def test_self_like_counts_but_does_not_notify(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo = await make_photo(owner)
        target = LikeTarget.from_ids(photo_id=photo.id)

        result = await like_service.toggle_like(db_session, owner.id, target)

        assert result.liked is True
        assert await _notification_count(db_session, owner.id) == 0

    @pytest.mark.asyncio
    async def test_private_photo_of_other_user_forbidden(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        stranger = await make_user("stranger")
        photo = await make_photo(owner, is_public=False)

        with pytest.raises(ForbiddenError):
            await like_service.toggle_like(db_session, stranger.id, LikeTarget.from_ids(photo_id=photo.id))

    @pytest.mark.asyncio
    async def test_owner_can_like_own_private_photo(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo = await make_photo(owner, is_public=False)

        result = await like_service.toggle_like(db_session, owner.id, LikeTarget.from_ids(photo_id=photo.id))
        assert result.liked is True

    @pytest.mark.asyncio
    async def test_deleted_photo_not_found(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        photo.soft_delete()
        await db_session.flush()

        with pytest.raises(NotFoundError):
            await like_service.toggle_like(db_session, fan.id, LikeTarget.from_ids(photo_id=photo.id))

    @pytest.mark.asyncio
    async def test_missing_photo_not_found(self, db_session, make_user):
        fan = await make_user("fan")
        with pytest.raises(NotFoundError):
            await like_service.toggle_like(db_session, fan.id, LikeTarget.from_ids(photo_id=999))

    @pytest.mark.asyncio
    async def test_like_series_and_comment(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        series = Series(user_id=owner.id, title="Trip", is_public=True)
        comment = Comment(user_id=owner.id, photo_id=photo.id, content="First!")
        db_session.add_all([series, comment])
        await db_session.flush()

        series_target = LikeTarget.from_ids(series_id=series.id)
        comment_target = LikeTarget.from_ids(comment_id=comment.id)
        await like_service.toggle_like(db_session, fan.id, series_target)
        await like_service.toggle_like(db_session, fan.id, comment_target)

        assert await like_service.count_likes(db_session, series_target) == 1
        assert await like_service.count_likes(db_session, comment_target) == 1
        rows = (await db_session.execute(select(Like).where(Like.user_id == fan.id))).scalars().all()
        assert {(r.photo_id, r.series_id, r.comment_id) for r in rows} == {
            (None, series.id, None),
            (None, None, comment.id),
        }
        assert await _notification_count(db_session, owner.id) == 2

    @pytest.mark.asyncio
    async def test_comment_on_private_photo_forbidden(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        stranger = await make_user("stranger")
        photo = await make_photo(owner, is_public=False)
        comment = Comment(user_id=owner.id, photo_id=photo.id, content="note to self")
        db_session.add(comment)
        await db_session.flush()

        with pytest.raises(ForbiddenError):
            await like_service.toggle_like(
                db_session, stranger.id, LikeTarget.from_ids(comment_id=comment.id)
            )
