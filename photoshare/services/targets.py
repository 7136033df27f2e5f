"""
PhotoShare Backend - Interaction Targets
==========================================

What:  Explicit sum types for "the thing being liked / commented on /
       referenced by a notification".
Why:   Storage keeps one nullable column per target kind. Passing three
       optional ids around invites "two set at once" bugs, so the service
       boundary only accepts these values and converts them to column
       values at the last moment.
"""

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from photoshare.exceptions import ValidationError


class TargetKind(str, enum.Enum):
    PHOTO = "photo"
    SERIES = "series"
    COMMENT = "comment"


_COLUMN_BY_KIND = {
    TargetKind.PHOTO: "photo_id",
    TargetKind.SERIES: "series_id",
    TargetKind.COMMENT: "comment_id",
}


@dataclass(frozen=True)
class LikeTarget:
    kind: TargetKind
    id: int

    @classmethod
    def from_ids(
        cls,
        photo_id: Optional[int] = None,
        series_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> "LikeTarget":
        """Builds a target from request fields; exactly one must be given."""
        supplied = [
            (kind, value)
            for kind, value in (
                (TargetKind.PHOTO, photo_id),
                (TargetKind.SERIES, series_id),
                (TargetKind.COMMENT, comment_id),
            )
            if value is not None
        ]
        if len(supplied) != 1:
            raise ValidationError(
                "LIKE.TARGET_REQUIRED",
                context={"supplied": [kind.value for kind, _ in supplied]},
            )
        kind, value = supplied[0]
        return cls(kind=kind, id=value)

    @property
    def column(self) -> str:
        return _COLUMN_BY_KIND[self.kind]

    def column_values(self) -> Dict[str, Optional[int]]:
        values: Dict[str, Optional[int]] = {"photo_id": None, "series_id": None, "comment_id": None}
        values[self.column] = self.id
        return values


@dataclass(frozen=True)
class CommentTarget:
    """A photo or a series; comments are never attached to comments directly."""

    kind: TargetKind
    id: int

    def __post_init__(self):
        if self.kind not in (TargetKind.PHOTO, TargetKind.SERIES):
            raise ValueError(f"Comments cannot target {self.kind.value}")

    @classmethod
    def photo(cls, photo_id: int) -> "CommentTarget":
        return cls(TargetKind.PHOTO, photo_id)

    @classmethod
    def series(cls, series_id: int) -> "CommentTarget":
        return cls(TargetKind.SERIES, series_id)

    @property
    def photo_id(self) -> Optional[int]:
        return self.id if self.kind is TargetKind.PHOTO else None

    @property
    def series_id(self) -> Optional[int]:
        return self.id if self.kind is TargetKind.SERIES else None


@dataclass(frozen=True)
class NotificationTarget:
    """
    Reference columns stored on a notification. Any subset may be set; all
    four take part in deduplication.
    """

    photo_id: Optional[int] = None
    series_id: Optional[int] = None
    comment_id: Optional[int] = None
    follow_id: Optional[int] = None

    @classmethod
    def for_like(cls, target: LikeTarget) -> "NotificationTarget":
        return cls(**target.column_values())

    def column_values(self) -> Dict[str, Optional[int]]:
        return {
            "photo_id": self.photo_id,
            "series_id": self.series_id,
            "comment_id": self.comment_id,
            "follow_id": self.follow_id,
        }
