from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ewm.core.timeutil import utcnow
from ewm.models.base import Base, IdPrimaryKeyMixin


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


class ParticipationRequest(Base, IdPrimaryKeyMixin):
    __tablename__ = "participation_requests"
    __table_args__ = (
        UniqueConstraint("event_id", "requester_id", name="uq_participation_requests_event_requester"),
    )

    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    created: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    status: Mapped[RequestStatus] = mapped_column(
        sa.Enum(RequestStatus, name="request_status", native_enum=False, length=16),
        nullable=False,
        default=RequestStatus.PENDING,
    )
