"""
PhotoShare Backend - Comment Service
======================================

What:  Comment creation with single-target replies, tree retrieval and
       author-only deletion.

Creation flow:
    1. Reject blank content
    2. Check the photo/series is visible to the author (same rules as likes)
    3. With parent_id: the parent must be alive and hang off the same target
    4. Insert, then fan out:
         content owner  ← NEW_COMMENT
         parent author  ← NEW_REPLY (unless they own the content or wrote
                          the reply themselves)

Tree policy:
    Comments are read flat in creation order and rebuilt into a tree. A
    reply whose parent is missing or soft-deleted is dropped, together with
    anything below it; it is never promoted to a root.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.exceptions import ForbiddenError, NotFoundError, ValidationError
from photoshare.models import Comment, EventType, Like
from photoshare.schemas.comment import CommentResponse
from photoshare.schemas.user import UserSummary
from photoshare.services.access import get_active_comment, get_visible_target_owner
from photoshare.services.notification_service import notification_service
from photoshare.services.targets import CommentTarget, NotificationTarget, TargetKind

logger = logging.getLogger(__name__)


def _to_response(comment: Comment, like_count: int = 0) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        author=UserSummary.model_validate(comment.author),
        photo_id=comment.photo_id,
        series_id=comment.series_id,
        parent_id=comment.parent_id,
        created_at=comment.created_at,
        like_count=like_count,
        replies=[],
    )


def build_comment_tree(
    comments: Iterable[Comment], like_counts: Optional[Dict[int, int]] = None
) -> List[CommentResponse]:
    """
    Rebuild the reply tree from comments sorted by creation time.

    Orphans (parent not in `comments`) are dropped.
    """
    like_counts = like_counts or {}
    nodes: Dict[int, CommentResponse] = {}
    roots: List[CommentResponse] = []

    for comment in comments:
        node = _to_response(comment, like_counts.get(comment.id, 0))
        if comment.parent_id is None:
            roots.append(node)
        elif comment.parent_id in nodes:
            nodes[comment.parent_id].replies.append(node)
        else:
            continue
        nodes[comment.id] = node

    return roots


def count_tree(nodes: List[CommentResponse]) -> int:
    return sum(1 + count_tree(node.replies) for node in nodes)


class CommentService:

    async def create_comment(
        self,
        db: AsyncSession,
        user_id: int,
        target: CommentTarget,
        content: str,
        parent_id: Optional[int] = None,
    ) -> CommentResponse:
        text = (content or "").strip()
        if not text:
            raise ValidationError("COMMENT.CONTENT_REQUIRED", field="content")

        owner_id = await get_visible_target_owner(db, target, user_id)

        parent: Optional[Comment] = None
        if parent_id is not None:
            result = await db.execute(
                select(Comment).where(Comment.id == parent_id, Comment.active())
            )
            parent = result.scalar_one_or_none()
            if parent is None:
                raise NotFoundError("COMMENT.PARENT_NOT_FOUND", resource_id=parent_id)
            if parent.photo_id != target.photo_id or parent.series_id != target.series_id:
                raise ValidationError(
                    "COMMENT.PARENT_MISMATCH",
                    field="parent_id",
                    context={"parent_id": parent_id, "target": f"{target.kind.value}:{target.id}"},
                )

        comment = Comment(
            user_id=user_id,
            photo_id=target.photo_id,
            series_id=target.series_id,
            parent_id=parent_id,
            content=text,
        )
        db.add(comment)
        await db.flush()
        await db.refresh(comment, attribute_names=["author"])
        logger.info(
            "Comment %s created by user %s on %s %s",
            comment.id,
            user_id,
            target.kind.value,
            target.id,
        )

        notification_target = NotificationTarget(
            photo_id=target.photo_id,
            series_id=target.series_id,
            comment_id=comment.id,
        )
        await notification_service.notify(
            db, owner_id, user_id, EventType.NEW_COMMENT, notification_target
        )
        if parent is not None and parent.user_id not in (owner_id, user_id):
            await notification_service.notify(
                db, parent.user_id, user_id, EventType.NEW_REPLY, notification_target
            )

        return _to_response(comment)

    async def list_comments(
        self, db: AsyncSession, viewer_id: Optional[int], target: CommentTarget
    ) -> List[CommentResponse]:
        await get_visible_target_owner(db, target, viewer_id)

        if target.kind is TargetKind.PHOTO:
            target_filter = Comment.photo_id == target.id
        else:
            target_filter = Comment.series_id == target.id

        result = await db.execute(
            select(Comment)
            .where(target_filter, Comment.active())
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        comments = result.scalars().all()

        like_counts: Dict[int, int] = {}
        if comments:
            rows = await db.execute(
                select(Like.comment_id, func.count(Like.id))
                .where(Like.comment_id.in_([c.id for c in comments]))
                .group_by(Like.comment_id)
            )
            like_counts = {comment_id: count for comment_id, count in rows.all()}

        return build_comment_tree(comments, like_counts)

    async def delete_comment(self, db: AsyncSession, comment_id: int, user_id: int) -> None:
        comment = await get_active_comment(db, comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError("COMMENT.NOT_AUTHOR", context={"comment_id": comment_id})
        comment.soft_delete()
        await db.flush()
        logger.info("Comment %s deleted by user %s", comment_id, user_id)


comment_service = CommentService()
