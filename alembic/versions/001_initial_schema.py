"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, photos, series, collections, comments, likes, follows
       and notifications with their constraints and indexes.
How:   Constraint names follow the naming convention in photoshare/database.py
       so later autogenerated migrations can address them.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.TIMESTAMP(timezone=True),
                server_default=sa.text("CURRENT_TIMESTAMP"),
                nullable=False,
            )
        )
    return columns


def _deleted_at():
    return sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True)


def _fk(column: str, table: str, ondelete: str = "CASCADE", nullable: bool = False):
    return sa.Column(
        column,
        sa.Integer(),
        sa.ForeignKey(f"{table}.id", ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image_url", sa.String(500), nullable=True),
        sa.Column("notify_likes", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("notify_comments", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("notify_follows", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("notify_series", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        _deleted_at(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "photos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_key", sa.String(500), nullable=False),
        sa.Column("thumbnail_key", sa.String(500), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        _deleted_at(),
        sa.PrimaryKeyConstraint("id", name="pk_photos"),
    )
    op.create_index("ix_photos_user_id", "photos", ["user_id"])
    # Public feed ordered by recency
    op.create_index("ix_photos_public_created_at", "photos", ["is_public", "created_at"])

    op.create_table(
        "series",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _fk("cover_photo_id", "photos", ondelete="SET NULL", nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        _deleted_at(),
        sa.PrimaryKeyConstraint("id", name="pk_series"),
    )
    op.create_index("ix_series_user_id", "series", ["user_id"])

    op.create_table(
        "series_photos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("series_id", "series"),
        _fk("photo_id", "photos"),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id", name="pk_series_photos"),
        sa.UniqueConstraint("series_id", "photo_id", name="uq_series_photos_series_id_photo_id"),
    )
    op.create_index("ix_series_photos_series_id", "series_photos", ["series_id"])

    op.create_table(
        "collections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_collections"),
    )
    op.create_index("ix_collections_user_id", "collections", ["user_id"])
    # At most one default collection per user
    op.create_index(
        "ix_collections_one_default_per_user",
        "collections",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("is_default"),
        sqlite_where=sa.text("is_default = 1"),
    )

    op.create_table(
        "collection_photos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("collection_id", "collections"),
        _fk("photo_id", "photos"),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id", name="pk_collection_photos"),
        sa.UniqueConstraint(
            "collection_id", "photo_id", name="uq_collection_photos_collection_id_photo_id"
        ),
    )
    op.create_index("ix_collection_photos_collection_id", "collection_photos", ["collection_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        _fk("photo_id", "photos", nullable=True),
        _fk("series_id", "series", nullable=True),
        _fk("parent_id", "comments", nullable=True),
        sa.Column("content", sa.String(1000), nullable=False),
        *_timestamps(updated=False),
        _deleted_at(),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        sa.CheckConstraint(
            "(photo_id IS NULL) <> (series_id IS NULL)",
            name="ck_comments_single_target",
        ),
    )
    op.create_index("ix_comments_photo_id_created_at", "comments", ["photo_id", "created_at"])
    op.create_index("ix_comments_series_id_created_at", "comments", ["series_id", "created_at"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        _fk("photo_id", "photos", nullable=True),
        _fk("series_id", "series", nullable=True),
        _fk("comment_id", "comments", nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id", name="pk_likes"),
        sa.CheckConstraint(
            "(CASE WHEN photo_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN series_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_likes_single_target",
        ),
        sa.UniqueConstraint("user_id", "photo_id", name="uq_likes_user_id_photo_id"),
        sa.UniqueConstraint("user_id", "series_id", name="uq_likes_user_id_series_id"),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_likes_user_id_comment_id"),
    )
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_photo_id", "likes", ["photo_id"])

    op.create_table(
        "follows",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("follower_id", "users"),
        _fk("following_id", "users"),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id", name="pk_follows"),
        sa.UniqueConstraint(
            "follower_id", "following_id", name="uq_follows_follower_id_following_id"
        ),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follows_no_self_follow"),
    )
    op.create_index("ix_follows_following_id", "follows", ["following_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users"),
        _fk("actor_id", "users"),
        sa.Column("event_type", sa.String(20), nullable=False),
        _fk("photo_id", "photos", nullable=True),
        _fk("series_id", "series", nullable=True),
        _fk("comment_id", "comments", nullable=True),
        _fk("follow_id", "follows", ondelete="SET NULL", nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
    )
    op.create_index(
        "ix_notifications_user_id_created_at", "notifications", ["user_id", "created_at"]
    )


def downgrade() -> None:
    """Drop every table, children first."""
    for table in (
        "notifications",
        "follows",
        "likes",
        "comments",
        "collection_photos",
        "collections",
        "series_photos",
        "series",
        "photos",
        "users",
    ):
        op.drop_table(table)
