"""
PhotoShare Backend - Follow Service Tests
===========================================
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from photoshare.exceptions import NotFoundError, ValidationError
from photoshare.models import EventType, Follow, Notification
from photoshare.services.follow_service import follow_service


class TestToggleFollow:

    @pytest.mark.asyncio
    async def test_follow_and_unfollow(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")

        result = await follow_service.toggle_follow(db_session, alice.id, bob.id)
        assert result.is_following is True
        assert await follow_service.is_following(db_session, alice.id, bob.id)
        assert not await follow_service.is_following(db_session, bob.id, alice.id)

        result = await follow_service.toggle_follow(db_session, alice.id, bob.id)
        assert result.is_following is False
        edges = await db_session.scalar(select(func.count(Follow.id)))
        assert edges == 0

    @pytest.mark.asyncio
    async def test_self_follow_rejected(self, db_session, make_user):
        alice = await make_user("alice")
        with pytest.raises(ValidationError) as exc_info:
            await follow_service.toggle_follow(db_session, alice.id, alice.id)
        assert exc_info.value.message_key == "FOLLOW.CANNOT_FOLLOW_YOURSELF"
        assert exc_info.value.context["field"] == "user_id"

    @pytest.mark.asyncio
    async def test_follow_missing_user(self, db_session, make_user):
        alice = await make_user("alice")
        with pytest.raises(NotFoundError):
            await follow_service.toggle_follow(db_session, alice.id, 404)

    @pytest.mark.asyncio
    async def test_follow_deleted_user(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        bob.soft_delete()
        await db_session.flush()

        with pytest.raises(NotFoundError):
            await follow_service.toggle_follow(db_session, alice.id, bob.id)

    @pytest.mark.asyncio
    async def test_follow_notifies_with_edge_reference(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")

        await follow_service.toggle_follow(db_session, alice.id, bob.id)

        notification = (await db_session.execute(select(Notification))).scalar_one()
        edge = (await db_session.execute(select(Follow))).scalar_one()
        assert notification.user_id == bob.id
        assert notification.actor_id == alice.id
        assert notification.event_type == EventType.NEW_FOLLOW
        assert notification.follow_id == edge.id

    @pytest.mark.asyncio
    async def test_concurrent_insert_resolves_to_following(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await follow_service.toggle_follow(db_session, alice.id, bob.id)

        with patch.object(follow_service, "_find_edge", new=AsyncMock(return_value=None)):
            result = await follow_service.toggle_follow(db_session, alice.id, bob.id)

        assert result.is_following is True
        assert await db_session.scalar(select(func.count(Follow.id))) == 1
        assert await db_session.scalar(select(func.count(Notification.id))) == 1

    @pytest.mark.asyncio
    async def test_follow_respects_preference(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob", notify_follows=False)

        await follow_service.toggle_follow(db_session, alice.id, bob.id)

        count = await db_session.scalar(select(func.count(Notification.id)))
        assert count == 0


class TestFollowLists:

    @pytest.mark.asyncio
    async def test_followers_and_following(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        carol = await make_user("carol")

        await follow_service.toggle_follow(db_session, bob.id, alice.id)
        await follow_service.toggle_follow(db_session, carol.id, alice.id)
        await follow_service.toggle_follow(db_session, alice.id, carol.id)

        followers = await follow_service.list_followers(db_session, alice.id)
        following = await follow_service.list_following(db_session, alice.id)

        assert {u.id for u in followers} == {bob.id, carol.id}
        assert [u.id for u in following] == [carol.id]
        assert await follow_service.count_followers(db_session, alice.id) == 2
        assert await follow_service.count_following(db_session, alice.id) == 1

    @pytest.mark.asyncio
    async def test_deleted_users_are_hidden(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await follow_service.toggle_follow(db_session, bob.id, alice.id)

        bob.soft_delete()
        await db_session.flush()

        assert await follow_service.list_followers(db_session, alice.id) == []
        assert await follow_service.count_followers(db_session, alice.id) == 0
