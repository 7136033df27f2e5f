"""
PhotoShare Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with the
       full schema, so services run against real SQL instead of mocks.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:          in-memory engine with all tables
    ├── db_session:         AsyncSession bound to db_engine
    ├── make_user:          factory for persisted users
    ├── make_photo:         factory for persisted photos (no stored files)
    ├── auth_headers:       Authorization + Accept-Language headers for a user
    ├── temp_storage:       temporary directory for file operations
    ├── image_factory:      encoded test images in any Pillow format
    ├── sample_image_bytes: real JPEG bytes produced by Pillow
    └── test_client:        HTTPX AsyncClient wired to the app and db_engine
"""

import io
import os
import tempfile

# Override settings for testing BEFORE any photoshare imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="photoshare_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEFAULT_LANGUAGE"] = "ko"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from photoshare.database import Base, get_db_session
from photoshare.models import Photo, User
from photoshare.services.security import create_access_token, hash_password

TEST_PASSWORD = "password123"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    One in-memory database per test. StaticPool keeps the single connection
    alive across sessions; the event hooks let SQLite honour SAVEPOINTs.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    """
    Usage:
        alice = await make_user("alice")
        bob = await make_user("bob", notify_likes=False)
    """
    async def _make_user(username: str = "alice", **overrides) -> User:
        fields = {
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": hash_password(TEST_PASSWORD),
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def make_photo(db_session):
    """Rows only; storage keys point at files that do not exist."""
    counter = {"n": 0}

    async def _make_photo(owner: User, is_public: bool = True, title: str = "Sunset") -> Photo:
        counter["n"] += 1
        photo = Photo(
            user_id=owner.id,
            title=title,
            image_key=f"photos/2026/10/19/test-{counter['n']}.jpg",
            thumbnail_key=f"thumbnails/2026/10/19/test-{counter['n']}.jpg",
            width=800,
            height=600,
            is_public=is_public,
        )
        db_session.add(photo)
        await db_session.flush()
        await db_session.refresh(photo, attribute_names=["owner"])
        return photo

    return _make_photo


def _auth_headers(user: User, lang: str = "en") -> dict:
    token = create_access_token(user.id, user.email, user.username)
    return {"Authorization": f"Bearer {token}", "Accept-Language": lang}


@pytest.fixture
def auth_headers():
    """
    Bearer token headers for a user, with English messages unless told
    otherwise: `auth_headers(alice)`, `auth_headers(alice, lang="ko")`.
    """
    return _auth_headers


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


def _make_image_bytes(image_format: str = "JPEG", size=(640, 480), mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color="orange").save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def image_factory():
    """`image_factory("PNG", size=(100, 50), mode="RGBA")` returns encoded bytes."""
    return _make_image_bytes


@pytest.fixture
def sample_image_bytes():
    """A real 640x480 JPEG, small enough for every size limit."""
    return _make_image_bytes()


# ══════════════════════════════════════════════════════════════════════════
# API client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the app through ASGITransport. Requests
    get their own sessions on the test database, committed like in
    production.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from photoshare.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    # Unhandled errors come back as the 500 body instead of raising in the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
