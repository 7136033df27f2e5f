"""
PhotoShare Backend - ORM Models
=================================

Importing this package registers every table on `Base.metadata`, which is
what Alembic and the test suite's `create_all` rely on.
"""

from photoshare.models.base import SoftDeleteMixin, utcnow
from photoshare.models.collection import Collection, CollectionPhoto
from photoshare.models.comment import COMMENT_MAX_LENGTH, Comment
from photoshare.models.follow import Follow
from photoshare.models.like import Like
from photoshare.models.notification import EventType, Notification
from photoshare.models.photo import DEFAULT_PHOTO_TITLE, Photo
from photoshare.models.series import Series, SeriesPhoto
from photoshare.models.user import User

__all__ = [
    "COMMENT_MAX_LENGTH",
    "DEFAULT_PHOTO_TITLE",
    "Collection",
    "CollectionPhoto",
    "Comment",
    "EventType",
    "Follow",
    "Like",
    "Notification",
    "Photo",
    "Series",
    "SeriesPhoto",
    "SoftDeleteMixin",
    "User",
    "utcnow",
]
