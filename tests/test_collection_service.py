"""
PhotoShare Backend - Collection Service Tests
===============================================
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from photoshare.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from photoshare.models import Collection, CollectionPhoto
from photoshare.schemas.collection import CollectionCreateRequest, CollectionUpdateRequest
from photoshare.services.collection_service import collection_service
from photoshare.services.photo_service import photo_service


class TestDefaultCollection:

    @pytest.mark.asyncio
    async def test_ensure_default_is_idempotent(self, db_session, make_user):
        alice = await make_user("alice")

        first = await collection_service.ensure_default_collection(db_session, alice.id)
        second = await collection_service.ensure_default_collection(db_session, alice.id)

        assert first.id == second.id
        assert first.is_default is True
        count = await db_session.scalar(
            select(func.count(Collection.id)).where(Collection.user_id == alice.id)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_concurrent_default_creation_returns_existing(self, db_session, make_user):
        alice = await make_user("alice")
        existing = await collection_service.ensure_default_collection(db_session, alice.id)

        # First lookup misses, the retry after the unique violation finds it
        with patch.object(
            collection_service, "_find_default", new=AsyncMock(side_effect=[None, existing])
        ):
            resolved = await collection_service.ensure_default_collection(db_session, alice.id)

        assert resolved.id == existing.id
        count = await db_session.scalar(
            select(func.count(Collection.id)).where(Collection.user_id == alice.id)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_toggle_default(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        bob = await make_user("bob")
        photo = await make_photo(bob)

        assert await collection_service.toggle_default(db_session, alice.id, photo.id) is True
        saved = await collection_service.list_default_photos(db_session, alice.id)
        assert [p.id for p in saved] == [photo.id]

        assert await collection_service.toggle_default(db_session, alice.id, photo.id) is False
        assert await collection_service.list_default_photos(db_session, alice.id) == []

    @pytest.mark.asyncio
    async def test_toggle_private_photo_of_other_forbidden(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        bob = await make_user("bob")
        photo = await make_photo(bob, is_public=False)

        with pytest.raises(ForbiddenError):
            await collection_service.toggle_default(db_session, alice.id, photo.id)

    @pytest.mark.asyncio
    async def test_default_cannot_be_deleted(self, db_session, make_user):
        alice = await make_user("alice")
        default = await collection_service.ensure_default_collection(db_session, alice.id)

        with pytest.raises(ValidationError) as exc_info:
            await collection_service.delete_collection(db_session, default.id, alice.id)
        assert exc_info.value.message_key == "COLLECTION.DEFAULT_UNDELETABLE"

    @pytest.mark.asyncio
    async def test_photo_made_private_disappears_from_saved(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        bob = await make_user("bob")
        photo = await make_photo(bob)
        await collection_service.toggle_default(db_session, alice.id, photo.id)

        await photo_service.update_visibility(db_session, photo.id, bob.id, False)

        assert await collection_service.list_default_photos(db_session, alice.id) == []


class TestCustomCollections:

    @pytest.mark.asyncio
    async def test_create_list_default_first(self, db_session, make_user):
        alice = await make_user("alice")
        await collection_service.create_collection(db_session, alice.id, CollectionCreateRequest(title="Cats"))
        await collection_service.create_collection(db_session, alice.id, CollectionCreateRequest(title="Dogs"))

        collections = await collection_service.list_collections(db_session, alice.id)

        assert collections[0].is_default is True
        assert [c.title for c in collections[1:]] == ["Dogs", "Cats"]

    @pytest.mark.asyncio
    async def test_add_remove_photo(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        photo = await make_photo(alice)
        created = await collection_service.create_collection(
            db_session, alice.id, CollectionCreateRequest(title="Best of")
        )

        detail = await collection_service.add_photo(db_session, created.id, photo.id, alice.id)
        assert detail.photo_count == 1

        with pytest.raises(ConflictError):
            await collection_service.add_photo(db_session, created.id, photo.id, alice.id)

        detail = await collection_service.remove_photo(db_session, created.id, photo.id, alice.id)
        assert detail.photos == []

        with pytest.raises(NotFoundError):
            await collection_service.remove_photo(db_session, created.id, photo.id, alice.id)

    @pytest.mark.asyncio
    async def test_collections_are_private_to_owner(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        created = await collection_service.create_collection(
            db_session, alice.id, CollectionCreateRequest(title="Secret")
        )

        with pytest.raises(ForbiddenError):
            await collection_service.get_collection(db_session, created.id, bob.id)
        with pytest.raises(ForbiddenError):
            await collection_service.update_collection(
                db_session, created.id, bob.id, CollectionUpdateRequest(title="Hacked")
            )

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        photo = await make_photo(alice)
        created = await collection_service.create_collection(
            db_session, alice.id, CollectionCreateRequest(title="Old")
        )
        await collection_service.add_photo(db_session, created.id, photo.id, alice.id)

        updated = await collection_service.update_collection(
            db_session, created.id, alice.id, CollectionUpdateRequest(title="New", description="Renamed")
        )
        assert (updated.title, updated.description) == ("New", "Renamed")

        await collection_service.delete_collection(db_session, created.id, alice.id)
        with pytest.raises(NotFoundError):
            await collection_service.get_collection(db_session, created.id, alice.id)
        assert await db_session.scalar(select(func.count(CollectionPhoto.id))) == 0

    @pytest.mark.asyncio
    async def test_deleting_photo_removes_memberships(self, db_session, make_user, make_photo):
        alice = await make_user("alice")
        photo = await make_photo(alice)
        created = await collection_service.create_collection(
            db_session, alice.id, CollectionCreateRequest(title="Mine")
        )
        await collection_service.add_photo(db_session, created.id, photo.id, alice.id)
        await collection_service.toggle_default(db_session, alice.id, photo.id)

        await photo_service.delete_photo(db_session, photo.id, alice.id)

        assert await db_session.scalar(select(func.count(CollectionPhoto.id))) == 0
