from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ewm.api.deps import DBSession, Offset, Size
from ewm.api.v1.schemas.comments import CommentOut, NewComment, UpdateComment
from ewm.models.comment import CommentState
from ewm.services import comments_service

router = APIRouter(prefix="/users/{user_id}/comments", tags=["comments"])
admin_router = APIRouter(prefix="/admin/comments", tags=["admin"])
public_router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentOut, status_code=201)
def add_comment(
    user_id: int,
    payload: NewComment,
    db: DBSession,
    event_id: int = Query(alias="eventId"),
):
    return comments_service.add_comment(db, user_id, event_id, payload)


@router.get("", response_model=list[CommentOut])
def list_my_comments(user_id: int, db: DBSession, offset: Offset = 0, size: Size = 10):
    return comments_service.list_user_comments(db, user_id, offset, size)


@router.patch("/{comment_id}", response_model=CommentOut)
def update_comment(user_id: int, comment_id: int, payload: UpdateComment, db: DBSession):
    return comments_service.update_comment(db, user_id, comment_id, payload)


@router.delete("/{comment_id}", status_code=204)
def delete_comment(user_id: int, comment_id: int, db: DBSession):
    comments_service.delete_comment(db, user_id, comment_id)
    return Response(status_code=204)


@admin_router.get("", response_model=list[CommentOut])
def list_pending(db: DBSession, offset: Offset = 0, size: Size = 10):
    return comments_service.list_pending_comments(db, offset, size)


@admin_router.patch("/{comment_id}", response_model=CommentOut)
def moderate_comment(comment_id: int, db: DBSession, status: CommentState = Query()):
    return comments_service.moderate_comment(db, comment_id, status)


@public_router.get("/{comment_id}", response_model=CommentOut)
def get_comment(comment_id: int, db: DBSession):
    return comments_service.get_published_comment(db, comment_id)
