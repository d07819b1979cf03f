from __future__ import annotations

from collections.abc import Collection
from datetime import timedelta

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ewm.api.v1.schemas.comments import CommentOut, NewComment, UpdateComment
from ewm.core.timeutil import utcnow
from ewm.models import Comment, CommentState, Event, EventState, User
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import BadRequestError, ConflictError, NotFoundError

logger = structlog.get_logger()

EDIT_WINDOW = timedelta(hours=24)


def count_published(db: Session, event_id: int) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(Comment)
            .where(Comment.event_id == event_id, Comment.state == CommentState.PUBLISHED)
        )
        or 0
    )


def count_published_by_event(db: Session, event_ids: Collection[int]) -> dict[int, int]:
    counts = {event_id: 0 for event_id in event_ids}
    if not counts:
        return counts

    rows = db.execute(
        select(Comment.event_id, func.count())
        .where(Comment.event_id.in_(counts), Comment.state == CommentState.PUBLISHED)
        .group_by(Comment.event_id)
    ).all()
    for event_id, total in rows:
        counts[event_id] = int(total)
    return counts


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment:
        raise NotFoundError(ErrorCode.COMMENT_NOT_FOUND.value, f"comment {comment_id} not found")
    return comment


def add_comment(db: Session, user_id: int, event_id: int, payload: NewComment) -> CommentOut:
    if not db.get(User, user_id):
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, f"user {user_id} not found")

    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found")
    if event.state != EventState.PUBLISHED:
        raise ConflictError(
            ErrorCode.EVENT_NOT_PUBLISHED.value, "cannot comment on an unpublished event"
        )

    if payload.parent_comment is not None:
        parent = _get_comment_or_404(db, payload.parent_comment)
        if parent.event_id != event.id:
            raise ConflictError(
                ErrorCode.PARENT_COMMENT_MISMATCH.value, "parent comment belongs to another event"
            )
        if parent.state != CommentState.PUBLISHED:
            raise ConflictError(
                ErrorCode.PARENT_COMMENT_MISMATCH.value,
                "cannot reply to a comment that is not published",
            )

    comment = Comment(
        text=payload.text,
        author_id=user_id,
        event_id=event.id,
        parent_comment_id=payload.parent_comment,
        state=CommentState.PENDING,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    logger.info("comment_added", comment_id=comment.id, event_id=event.id, user_id=user_id)
    return CommentOut.from_model(comment)


def update_comment(
    db: Session, user_id: int, comment_id: int, payload: UpdateComment
) -> CommentOut:
    """Let the author reword a published comment during its first 24 hours."""
    comment = _get_comment_or_404(db, comment_id)
    if comment.author_id != user_id:
        raise ConflictError(ErrorCode.NOT_AUTHOR.value, "cannot edit another user's comment")
    if comment.state != CommentState.PUBLISHED:
        raise ConflictError(
            ErrorCode.COMMENT_NOT_EDITABLE.value, "only published comments can be edited"
        )
    if comment.created_at + EDIT_WINDOW < utcnow():
        raise ConflictError(ErrorCode.COMMENT_NOT_EDITABLE.value, "edit window (24h) has expired")

    comment.text = payload.text
    comment.edited = True
    db.add(comment)
    db.commit()
    db.refresh(comment)

    logger.info("comment_updated", comment_id=comment.id, user_id=user_id)
    return CommentOut.from_model(comment)


def get_published_comment(db: Session, comment_id: int) -> CommentOut:
    comment = _get_comment_or_404(db, comment_id)
    if comment.state != CommentState.PUBLISHED:
        raise NotFoundError(ErrorCode.COMMENT_NOT_FOUND.value, f"comment {comment_id} not found")
    return CommentOut.from_model(comment)


def delete_comment(db: Session, user_id: int, comment_id: int) -> None:
    comment = _get_comment_or_404(db, comment_id)
    if comment.author_id != user_id:
        raise ConflictError(ErrorCode.NOT_AUTHOR.value, "cannot delete another user's comment")

    db.delete(comment)
    db.commit()
    logger.info("comment_deleted", comment_id=comment_id, user_id=user_id)


def list_user_comments(db: Session, user_id: int, offset: int, size: int) -> list[CommentOut]:
    comments = db.scalars(
        select(Comment)
        .where(Comment.author_id == user_id)
        .order_by(Comment.id)
        .offset(offset)
        .limit(size)
    ).all()
    return [CommentOut.from_model(c) for c in comments]


def list_published_comments(db: Session, event_id: int, offset: int, size: int) -> list[CommentOut]:
    comments = db.scalars(
        select(Comment)
        .where(Comment.event_id == event_id, Comment.state == CommentState.PUBLISHED)
        .order_by(Comment.id)
        .offset(offset)
        .limit(size)
    ).all()
    return [CommentOut.from_model(c) for c in comments]


def list_pending_comments(db: Session, offset: int, size: int) -> list[CommentOut]:
    comments = db.scalars(
        select(Comment)
        .where(Comment.state == CommentState.PENDING)
        .order_by(Comment.id)
        .offset(offset)
        .limit(size)
    ).all()
    return [CommentOut.from_model(c) for c in comments]


def moderate_comment(db: Session, comment_id: int, target: CommentState) -> CommentOut:
    if target == CommentState.PENDING:
        raise BadRequestError(
            ErrorCode.VALIDATION_ERROR.value, "comments can only be published or rejected"
        )

    comment = _get_comment_or_404(db, comment_id)
    if comment.state != CommentState.PENDING:
        raise ConflictError(
            ErrorCode.COMMENT_NOT_PENDING.value, "only pending comments can be moderated"
        )

    comment.state = target
    db.add(comment)
    db.commit()
    db.refresh(comment)

    logger.info("comment_moderated", comment_id=comment.id, state=target.value)
    return CommentOut.from_model(comment)
