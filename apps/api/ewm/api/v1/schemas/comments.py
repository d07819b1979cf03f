from __future__ import annotations

from pydantic import Field

from ewm.api.v1.schemas.common import ApiDateTime, NonBlankStr, SchemaBase
from ewm.models.comment import Comment, CommentState


class NewComment(SchemaBase):
    text: NonBlankStr = Field(min_length=10, max_length=2000)
    parent_comment: int | None = None


class UpdateComment(SchemaBase):
    text: NonBlankStr = Field(min_length=10, max_length=2000)


class CommentOut(SchemaBase):
    id: int
    text: str
    author: str | None
    event_id: int
    parent_comment: int | None = None
    state: CommentState
    creation_date: ApiDateTime
    update_date: ApiDateTime | None = None
    edited: bool = False

    @classmethod
    def from_model(cls, comment: Comment) -> "CommentOut":
        return cls(
            id=comment.id,
            text=comment.text,
            author=comment.author.name if comment.author else None,
            event_id=comment.event_id,
            parent_comment=comment.parent_comment_id,
            state=comment.state,
            creation_date=comment.created_at,
            update_date=comment.updated_at if comment.edited else None,
            edited=comment.edited,
        )
