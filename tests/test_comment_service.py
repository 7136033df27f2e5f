"""
PhotoShare Backend - Comment Service Tests
============================================

Test Strategy:
    ✅ Blank content rejected
    ✅ Replies must stay on the parent's target
    ✅ Tree rebuilt in creation order; orphans dropped
    ✅ NEW_COMMENT to the owner, NEW_REPLY to the parent author
    ✅ Only the author deletes
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from photoshare.exceptions import ForbiddenError, NotFoundError, ValidationError
from photoshare.models import EventType, Notification, Series
from photoshare.services.comment_service import build_comment_tree, comment_service, count_tree
from photoshare.services.targets import CommentTarget


def _fake_comment(comment_id, parent_id=None):
    return SimpleNamespace(
        id=comment_id,
        content=f"comment {comment_id}",
        author=SimpleNamespace(id=1, username="alice", profile_image_url=None),
        photo_id=1,
        series_id=None,
        parent_id=parent_id,
        created_at=datetime.now(timezone.utc),
    )


class TestBuildCommentTree:

    def test_nests_replies(self):
        tree = build_comment_tree(
            [_fake_comment(1), _fake_comment(2, parent_id=1), _fake_comment(3, parent_id=2), _fake_comment(4)]
        )
        assert [n.id for n in tree] == [1, 4]
        assert tree[0].replies[0].id == 2
        assert tree[0].replies[0].replies[0].id == 3
        assert count_tree(tree) == 4

    def test_drops_orphans_and_their_subtree(self):
        tree = build_comment_tree(
            [_fake_comment(1), _fake_comment(5, parent_id=99), _fake_comment(6, parent_id=5)]
        )
        assert [n.id for n in tree] == [1]
        assert count_tree(tree) == 1

    def test_applies_like_counts(self):
        tree = build_comment_tree([_fake_comment(1)], like_counts={1: 4})
        assert tree[0].like_count == 4


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_comment_on_photo_notifies_owner(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)

        created = await comment_service.create_comment(
            db_session, fan.id, CommentTarget.photo(photo.id), "  Lovely light  "
        )

        assert created.content == "Lovely light"
        assert created.author.username == "fan"
        assert created.photo_id == photo.id
        notification = (await db_session.execute(select(Notification))).scalar_one()
        assert notification.event_type == EventType.NEW_COMMENT
        assert notification.user_id == owner.id
        assert notification.comment_id == created.id

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo = await make_photo(owner)
        with pytest.raises(ValidationError) as exc_info:
            await comment_service.create_comment(db_session, owner.id, CommentTarget.photo(photo.id), "   ")
        assert exc_info.value.message_key == "COMMENT.CONTENT_REQUIRED"

    @pytest.mark.asyncio
    async def test_private_photo_forbidden(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        stranger = await make_user("stranger")
        photo = await make_photo(owner, is_public=False)
        with pytest.raises(ForbiddenError):
            await comment_service.create_comment(db_session, stranger.id, CommentTarget.photo(photo.id), "hi")

    @pytest.mark.asyncio
    async def test_reply_notifies_owner_and_parent_author(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        first = await make_user("first")
        second = await make_user("second")
        photo = await make_photo(owner)
        target = CommentTarget.photo(photo.id)

        parent = await comment_service.create_comment(db_session, first.id, target, "Where is this?")
        reply = await comment_service.create_comment(db_session, second.id, target, "Iceland", parent_id=parent.id)

        assert reply.parent_id == parent.id
        rows = (
            await db_session.execute(
                select(Notification.user_id, Notification.event_type).where(Notification.actor_id == second.id)
            )
        ).all()
        assert {tuple(r) for r in rows} == {(owner.id, EventType.NEW_COMMENT), (first.id, EventType.NEW_REPLY)}

    @pytest.mark.asyncio
    async def test_owner_replying_to_own_thread_gets_no_reply_notification(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        target = CommentTarget.photo(photo.id)

        parent = await comment_service.create_comment(db_session, owner.id, target, "Shot at dawn")
        await comment_service.create_comment(db_session, fan.id, target, "Wow", parent_id=parent.id)

        events = (
            await db_session.execute(select(Notification.event_type).where(Notification.user_id == owner.id))
        ).scalars().all()
        assert events == [EventType.NEW_COMMENT]

    @pytest.mark.asyncio
    async def test_parent_on_other_target_rejected(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo_a = await make_photo(owner)
        photo_b = await make_photo(owner)

        parent = await comment_service.create_comment(db_session, owner.id, CommentTarget.photo(photo_a.id), "A")
        with pytest.raises(ValidationError) as exc_info:
            await comment_service.create_comment(
                db_session, owner.id, CommentTarget.photo(photo_b.id), "B", parent_id=parent.id
            )
        assert exc_info.value.message_key == "COMMENT.PARENT_MISMATCH"

    @pytest.mark.asyncio
    async def test_missing_parent(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo = await make_photo(owner)
        with pytest.raises(NotFoundError):
            await comment_service.create_comment(
                db_session, owner.id, CommentTarget.photo(photo.id), "?", parent_id=12345
            )

    @pytest.mark.asyncio
    async def test_comment_on_series(self, db_session, make_user):
        owner = await make_user("owner")
        series = Series(user_id=owner.id, title="Road trip", is_public=True)
        db_session.add(series)
        await db_session.flush()

        created = await comment_service.create_comment(
            db_session, owner.id, CommentTarget.series(series.id), "Day one"
        )
        assert created.series_id == series.id
        assert created.photo_id is None


class TestListAndDelete:

    @pytest.mark.asyncio
    async def test_deleted_parent_hides_replies(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        target = CommentTarget.photo(photo.id)

        parent = await comment_service.create_comment(db_session, fan.id, target, "parent")
        await comment_service.create_comment(db_session, owner.id, target, "reply", parent_id=parent.id)
        await comment_service.create_comment(db_session, owner.id, target, "standalone")

        assert count_tree(await comment_service.list_comments(db_session, None, target)) == 3

        await comment_service.delete_comment(db_session, parent.id, fan.id)
        tree = await comment_service.list_comments(db_session, None, target)
        assert [n.content for n in tree] == ["standalone"]

    @pytest.mark.asyncio
    async def test_only_author_deletes(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        fan = await make_user("fan")
        photo = await make_photo(owner)
        created = await comment_service.create_comment(db_session, fan.id, CommentTarget.photo(photo.id), "mine")

        with pytest.raises(ForbiddenError):
            await comment_service.delete_comment(db_session, created.id, owner.id)

    @pytest.mark.asyncio
    async def test_anonymous_cannot_read_private_comments(self, db_session, make_user, make_photo):
        owner = await make_user("owner")
        photo = await make_photo(owner, is_public=False)
        with pytest.raises(ForbiddenError):
            await comment_service.list_comments(db_session, None, CommentTarget.photo(photo.id))
