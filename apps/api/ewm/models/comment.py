from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ewm.models.base import Base, IdPrimaryKeyMixin, TimestampMixin
from ewm.models.user import User


class CommentState(str, Enum):
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class Comment(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "comments"
    __table_args__ = (sa.Index("ix_comments_event_state", "event_id", "state"),)

    text: Mapped[str] = mapped_column(String(2000), nullable=False)

    # Author may be removed later; the comment stays
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    # Replies reference their parent by id only
    parent_comment_id: Mapped[int | None] = mapped_column(
        ForeignKey("comments.id", ondelete="SET NULL"), nullable=True
    )

    state: Mapped[CommentState] = mapped_column(
        sa.Enum(CommentState, name="comment_state", native_enum=False, length=16),
        nullable=False,
        default=CommentState.PENDING,
    )
    edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    author: Mapped[User | None] = relationship(lazy="joined")
