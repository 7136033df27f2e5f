"""
PhotoShare Backend - API Endpoint Tests
=========================================

What:  End-to-end requests through the ASGI app: routing, auth dependency,
       middleware headers, the error body and localization.
How:   Users are created through the API itself so every request commits
       through the same session dependency as production.
"""

from unittest.mock import AsyncMock, patch

import pytest

from photoshare.i18n import translate
from photoshare.services.notification_service import notification_service


async def _register(client, username: str, lang: str = "en"):
    """Register + login; returns (user json, auth headers)."""
    email = f"{username}@example.com"
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": "password123"},
    )
    assert response.status_code == 201, response.text
    login = await client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert login.status_code == 200, login.text
    headers = {"Authorization": f"Bearer {login.json()['token']}", "Accept-Language": lang}
    return response.json()["user"], headers


async def _upload(client, headers, image_bytes, title="Beach", is_public=True):
    response = await client.post(
        "/api/photos",
        headers=headers,
        files={"file": ("beach.jpg", image_bytes, "image/jpeg")},
        data={"title": title, "is_public": "true" if is_public else "false"},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_login_me(self, test_client):
        user, headers = await _register(test_client, "alice")
        assert user["email"] == "alice@example.com"
        assert "password_hash" not in user

        me = await test_client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["id"] == user["id"]
        assert me.headers["Content-Language"] == "en"
        assert me.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            json={"username": " Alice ", "email": "  Alice@Example.COM ", "password": "password123"},
        )
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "alice@example.com"
        assert response.json()["user"]["username"] == "Alice"

    @pytest.mark.asyncio
    async def test_short_password_error_body(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            headers={"Accept-Language": "en", "X-Request-ID": "req-1234"},
            json={"username": "alice", "email": "alice@example.com", "password": "short"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Password must be at least 8 characters."
        assert body["details"] == {"field": "password"}
        assert body["request_id"] == "req-1234"
        assert response.headers["X-Request-ID"] == "req-1234"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client):
        await _register(test_client, "alice")
        response = await test_client.post(
            "/api/auth/register",
            headers={"Accept-Language": "en"},
            json={"username": "other", "email": "alice@example.com", "password": "password123"},
        )
        assert response.status_code == 409
        assert response.json()["message"] == "This email is already registered."

    @pytest.mark.asyncio
    async def test_invalid_email_is_schema_error(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "not-an-email", "password": "password123"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert [f["field"] for f in body["details"]["fields"]] == ["email"]

    @pytest.mark.asyncio
    async def test_missing_field_is_localized(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            headers={"Accept-Language": "ja", "X-Request-ID": "req-ja"},
            json={"username": "alice", "email": "alice@example.com"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == translate("VALIDATION.FAILED", "ja")
        assert body["details"]["fields"][0]["field"] == "password"
        assert body["details"]["fields"][0]["type"] == "missing"
        assert body["request_id"] == "req-ja"

    @pytest.mark.asyncio
    async def test_bad_credentials(self, test_client):
        await _register(test_client, "alice")
        response = await test_client.post(
            "/api/auth/login",
            headers={"Accept-Language": "en"},
            json={"email": "alice@example.com", "password": "wrong-password"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."

    @pytest.mark.asyncio
    async def test_missing_token_defaults_to_korean(self, test_client):
        response = await test_client.get("/api/auth/me")
        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "unauthenticated"
        assert body["message"] == translate("AUTH.AUTHENTICATION_TOKEN_REQUIRED", "ko")
        assert response.headers["Content-Language"] == "ko"

    @pytest.mark.asyncio
    async def test_deleted_account_token_rejected(self, test_client):
        _, headers = await _register(test_client, "alice")

        deleted = await test_client.delete("/api/users/me", headers=headers)
        assert deleted.status_code == 200

        response = await test_client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == translate("AUTH.USER_NOT_FOUND", "en")

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client):
        response = await test_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer nonsense", "Accept-Language": "en"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == translate("AUTH.INVALID_TOKEN", "en")


class TestPhotoEndpoints:

    @pytest.mark.asyncio
    async def test_private_upload_visibility_and_images(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        photo = await _upload(test_client, alice, sample_image_bytes, is_public=False)

        anonymous = await test_client.get(f"/api/images/{photo['id']}", headers={"Accept-Language": "en"})
        assert anonymous.status_code == 403
        assert anonymous.json()["message"] == "This photo is private."

        original = await test_client.get(photo["image_url"], headers=alice)
        assert original.status_code == 200
        assert original.headers["content-type"] == "image/jpeg"
        thumbnail = await test_client.get(photo["thumbnail_url"], headers=alice)
        assert thumbnail.status_code == 200

        feed = await test_client.get("/api/photos")
        assert feed.json()["total"] == 0

        changed = await test_client.patch(
            f"/api/photos/{photo['id']}/visibility", headers=alice, json={"is_public": True}
        )
        assert changed.status_code == 200
        feed = await test_client.get("/api/photos")
        body = feed.json()
        assert body["total"] == 1
        assert body["has_more"] is False
        assert body["photos"][0]["owner"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_unsupported_upload(self, test_client):
        _, alice = await _register(test_client, "alice")
        response = await test_client.post(
            "/api/photos",
            headers=alice,
            files={"file": ("notes.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "file"

    @pytest.mark.asyncio
    async def test_feed_rejects_unknown_sort(self, test_client):
        response = await test_client.get(
            "/api/photos", params={"sort": "random"}, headers={"Accept-Language": "en"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "The request is invalid."
        assert body["details"]["fields"][0]["field"] == "sort"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 100000}])
    async def test_feed_rejects_out_of_range_paging(self, test_client, params):
        response = await test_client.get("/api/photos", params=params)
        assert response.status_code == 400
        assert response.json()["details"]["fields"][0]["field"] == next(iter(params))

    @pytest.mark.asyncio
    async def test_delete_photo(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        _, bob = await _register(test_client, "bob")
        photo = await _upload(test_client, alice, sample_image_bytes)

        forbidden = await test_client.delete(f"/api/photos/{photo['id']}", headers=bob)
        assert forbidden.status_code == 403

        deleted = await test_client.delete(f"/api/photos/{photo['id']}", headers=alice)
        assert deleted.status_code == 200
        assert deleted.json()["message"] == translate("PHOTO.DELETED", "en")

        gone = await test_client.get(f"/api/photos/{photo['id']}", headers=alice)
        assert gone.status_code == 404
        assert gone.json()["message"] == "Photo not found."


class TestSocialEndpoints:

    @pytest.mark.asyncio
    async def test_like_notifies_and_mark_read(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        _, bob = await _register(test_client, "bob")
        photo = await _upload(test_client, alice, sample_image_bytes)

        missing = await test_client.post("/api/likes", headers=bob, json={})
        assert missing.status_code == 400
        assert missing.json()["message"] == "Exactly one of photo_id, series_id or comment_id is required."

        liked = await test_client.post("/api/likes", headers=bob, json={"photo_id": photo["id"]})
        assert liked.json() == {"liked": True, "like_count": 1}

        inbox = (await test_client.get("/api/notifications", headers=alice)).json()
        assert inbox["unread_count"] == 1
        assert inbox["notifications"][0]["message"] == "bob liked your post."
        assert inbox["notifications"][0]["event_type"] == "NEW_LIKE"

        marked = await test_client.patch(
            "/api/notifications/read",
            headers=alice,
            json={"notification_ids": [inbox["notifications"][0]["id"]]},
        )
        assert marked.json()["updated"] == 1
        inbox = (await test_client.get("/api/notifications", headers=alice)).json()
        assert inbox["unread_count"] == 0

    @pytest.mark.asyncio
    async def test_comment_thread(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        _, bob = await _register(test_client, "bob")
        photo = await _upload(test_client, alice, sample_image_bytes)
        url = f"/api/photos/{photo['id']}/comments"

        blank = await test_client.post(url, headers=bob, json={"content": "   "})
        assert blank.status_code == 400
        assert blank.json()["message"] == "Comment content cannot be empty."

        root = await test_client.post(url, headers=bob, json={"content": "Where is this?"})
        assert root.status_code == 201
        reply = await test_client.post(
            url, headers=alice, json={"content": "Iceland", "parent_id": root.json()["id"]}
        )
        assert reply.status_code == 201

        listing = (await test_client.get(url)).json()
        assert listing["total"] == 2
        assert listing["comments"][0]["replies"][0]["content"] == "Iceland"

        removed = await test_client.delete(f"/api/comments/{root.json()['id']}", headers=bob)
        assert removed.status_code == 200
        assert (await test_client.get(url)).json()["total"] == 0

    @pytest.mark.asyncio
    async def test_follow_flow(self, test_client):
        alice_user, alice = await _register(test_client, "alice")
        bob_user, bob = await _register(test_client, "bob")

        self_follow = await test_client.post(f"/api/users/{alice_user['id']}/toggle-follow", headers=alice)
        assert self_follow.status_code == 400
        assert self_follow.json()["message"] == "You cannot follow yourself."

        followed = await test_client.post(f"/api/users/{bob_user['id']}/toggle-follow", headers=alice)
        assert followed.json() == {"is_following": True}

        followers = (await test_client.get(f"/api/users/{bob_user['id']}/followers")).json()
        assert followers["total"] == 1
        assert followers["users"][0]["username"] == "alice"

        status = await test_client.get(f"/api/users/{bob_user['id']}/follow-status", headers=alice)
        assert status.json() == {"is_following": True}

        profile = (await test_client.get("/api/users/me/profile", headers=bob)).json()
        assert profile["followers_count"] == 1
        assert profile["following_count"] == 0

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, test_client):
        _, alice = await _register(test_client, "alice")
        response = await test_client.post("/api/users/9999/toggle-follow", headers=alice)
        assert response.status_code == 404


class TestSeriesAndCollectionEndpoints:

    @pytest.mark.asyncio
    async def test_series_reorder(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        first = await _upload(test_client, alice, sample_image_bytes, title="first")
        second = await _upload(test_client, alice, sample_image_bytes, title="second")

        created = await test_client.post("/api/series", headers=alice, json={"title": "Iceland"})
        assert created.status_code == 201
        series_id = created.json()["id"]
        for photo in (first, second):
            added = await test_client.post(f"/api/series/{series_id}/photos/{photo['id']}", headers=alice)
            assert added.status_code == 200

        reordered = await test_client.put(
            f"/api/series/{series_id}/photos/order",
            headers=alice,
            json={"orders": [
                {"photo_id": second["id"], "position": 0},
                {"photo_id": first["id"], "position": 1},
            ]},
        )
        assert reordered.status_code == 200
        assert [p["photo"]["id"] for p in reordered.json()["photos"]] == [second["id"], first["id"]]

        mine = (await test_client.get("/api/series/me", headers=alice)).json()
        assert [s["photo_count"] for s in mine] == [2]

    @pytest.mark.asyncio
    async def test_default_collection_toggle(self, test_client, sample_image_bytes):
        _, alice = await _register(test_client, "alice")
        _, bob = await _register(test_client, "bob")
        photo = await _upload(test_client, alice, sample_image_bytes)

        toggled = await test_client.post(f"/api/photos/{photo['id']}/collection", headers=bob)
        assert toggled.json()["added"] is True

        saved = (await test_client.get("/api/users/me/collection", headers=bob)).json()
        assert [p["id"] for p in saved] == [photo["id"]]

        collections = (await test_client.get("/api/collections", headers=bob)).json()
        assert collections[0]["is_default"] is True
        assert collections[0]["title"] == "Saved photos"
        assert collections[0]["photo_count"] == 1

        undeletable = await test_client.delete(f"/api/collections/{collections[0]['id']}", headers=bob)
        assert undeletable.status_code == 400

        foreign = await test_client.get(f"/api/collections/{collections[0]['id']}", headers=alice)
        assert foreign.status_code == 403


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_unhandled_error_is_localized(self, test_client):
        _, alice = await _register(test_client, "alice")

        with patch.object(
            notification_service, "list_notifications", new=AsyncMock(side_effect=RuntimeError("boom"))
        ):
            response = await test_client.get("/api/notifications", headers=alice)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["message"] == "An unexpected error occurred."
        assert body["details"] is None
        assert body["request_id"]
        assert response.headers["X-Request-ID"] == body["request_id"]
        assert response.headers["Content-Language"] == "en"
