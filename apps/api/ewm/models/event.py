from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, composite, mapped_column, relationship

from ewm.models.base import Base, IdPrimaryKeyMixin
from ewm.models.category import Category
from ewm.models.user import User


class EventState(str, Enum):
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    CANCELED = "CANCELED"


class StateAction(str, Enum):
    SEND_TO_REVIEW = "SEND_TO_REVIEW"
    CANCEL_REVIEW = "CANCEL_REVIEW"
    PUBLISH_EVENT = "PUBLISH_EVENT"
    REJECT_EVENT = "REJECT_EVENT"


@dataclass
class Location:
    lat: float
    lon: float


class Event(Base, IdPrimaryKeyMixin):
    __tablename__ = "events"
    __table_args__ = (
        sa.CheckConstraint("participant_limit >= 0", name="ck_events_participant_limit"),
        sa.CheckConstraint("confirmed_requests >= 0", name="ck_events_confirmed_requests"),
        sa.Index("ix_events_state_event_date", "state", "event_date"),
    )

    annotation: Mapped[str] = mapped_column(String(2000), nullable=False)
    description: Mapped[str] = mapped_column(String(7000), nullable=False)
    title: Mapped[str] = mapped_column(String(120), nullable=False)

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id"), nullable=False, index=True
    )
    initiator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    location: Mapped[Location] = composite(
        mapped_column("lat", Float, nullable=False),
        mapped_column("lon", Float, nullable=False),
    )

    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    participant_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    request_moderation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    state: Mapped[EventState] = mapped_column(
        sa.Enum(EventState, name="event_state", native_enum=False, length=16),
        nullable=False,
        default=EventState.PENDING,
    )

    event_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    published_on: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Admission counter; only moves under a row lock (see requests_service)
    confirmed_requests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped[Category] = relationship(lazy="joined", innerjoin=True)
    initiator: Mapped[User] = relationship(lazy="joined", innerjoin=True)

    @property
    def has_free_slots(self) -> bool:
        return self.participant_limit == 0 or self.confirmed_requests < self.participant_limit
