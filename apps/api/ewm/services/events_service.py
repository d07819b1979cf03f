from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ewm.api.v1.schemas.events import (
    AdminEventSearch,
    EventFullOut,
    EventPatch,
    EventShortOut,
    NewEvent,
    PublicEventSearch,
    UpdateEventAdminRequest,
    UpdateEventUserRequest,
)
from ewm.core.timeutil import utcnow
from ewm.models import Category, Event, EventState, Location, User
from ewm.services.comments_service import count_published, count_published_by_event
from ewm.services.error_codes import ErrorCode
from ewm.services.event_transitions import Actor, next_state
from ewm.services.exceptions import BadRequestError, ConflictError, NotFoundError
from ewm.services.views import fetch_views, record_hit
from ewm.stats.base import EndpointHit, StatsClient

logger = structlog.get_logger()

MIN_LEAD_TIME = timedelta(hours=2)
INITIATOR_EDITABLE_STATES = frozenset({EventState.PENDING, EventState.CANCELED})


class EventSort(str, Enum):
    EVENT_DATE = "EVENT_DATE"
    VIEWS = "VIEWS"


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, f"user {user_id} not found")
    return user


def _get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError(
            ErrorCode.CATEGORY_NOT_FOUND.value, f"category {category_id} not found"
        )
    return category


def _get_owned_event_or_404(db: Session, user_id: int, event_id: int) -> Event:
    # Someone else's event is reported exactly like a missing one
    event = db.scalar(
        select(Event).where(Event.id == event_id, Event.initiator_id == user_id)
    )
    if not event:
        raise NotFoundError(
            ErrorCode.EVENT_NOT_FOUND.value,
            f"event {event_id} not found for user {user_id}",
        )
    return event


def _check_participant_limit(event: Event, limit: int | None) -> None:
    if limit is None:
        return
    if limit < 0:
        raise BadRequestError(
            ErrorCode.INVALID_PARTICIPANT_LIMIT.value, "participantLimit cannot be negative"
        )
    if 0 < limit < event.confirmed_requests:
        raise ConflictError(
            ErrorCode.PARTICIPANT_LIMIT_BELOW_CONFIRMED.value,
            f"participantLimit cannot be below {event.confirmed_requests} confirmed requests",
        )


def _patch_data(patch: EventPatch) -> dict[str, Any]:
    return patch.model_dump(exclude_unset=True, exclude_none=True, exclude={"state_action"})


def _apply_patch(db: Session, event: Event, patch_data: dict[str, Any]) -> None:
    if "category" in patch_data:
        event.category = _get_category_or_404(db, patch_data.pop("category"))
    if "location" in patch_data:
        location = patch_data.pop("location")
        event.location = Location(lat=location["lat"], lon=location["lon"])
    for key, value in patch_data.items():
        setattr(event, key, value)


def _save(db: Session, event: Event) -> Event:
    db.add(event)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.INTEGRITY_VIOLATION.value, "event violates a constraint") from exc
    db.refresh(event)
    return event


def create_event(db: Session, user_id: int, payload: NewEvent) -> EventFullOut:
    initiator = _get_user_or_404(db, user_id)
    category = _get_category_or_404(db, payload.category)

    now = utcnow()
    if payload.event_date < now + MIN_LEAD_TIME:
        raise ConflictError(
            ErrorCode.EVENT_DATE_TOO_SOON.value,
            "event date must be at least 2 hours from now",
        )

    event = Event(
        annotation=payload.annotation,
        description=payload.description,
        title=payload.title,
        category=category,
        initiator=initiator,
        location=Location(lat=payload.location.lat, lon=payload.location.lon),
        event_date=payload.event_date,
        paid=payload.paid,
        participant_limit=payload.participant_limit,
        request_moderation=payload.request_moderation,
        state=EventState.PENDING,
        created_on=now,
        published_on=None,
        confirmed_requests=0,
    )
    event = _save(db, event)

    logger.info("event_created", event_id=event.id, user_id=user_id)
    return EventFullOut.from_model(event)


def update_event_by_initiator(
    db: Session, user_id: int, event_id: int, patch: UpdateEventUserRequest
) -> EventFullOut:
    event = _get_owned_event_or_404(db, user_id, event_id)

    if event.state not in INITIATOR_EDITABLE_STATES:
        raise ConflictError(
            ErrorCode.EVENT_NOT_EDITABLE.value,
            "only pending or canceled events can be changed by the initiator",
        )

    _check_participant_limit(event, patch.participant_limit)

    now = utcnow()
    if patch.event_date is not None and patch.event_date < now + MIN_LEAD_TIME:
        raise BadRequestError(
            ErrorCode.EVENT_DATE_TOO_SOON.value,
            "eventDate must be at least 2 hours from now",
        )

    new_state = event.state
    if patch.state_action is not None:
        new_state = next_state(
            Actor.INITIATOR,
            event.state,
            patch.state_action,
            patch.event_date or event.event_date,
            now,
        )

    _apply_patch(db, event, _patch_data(patch))
    event.state = new_state
    event = _save(db, event)

    logger.info("event_updated", event_id=event.id, actor="initiator", state=event.state.value)
    return EventFullOut.from_model(event)


def update_event_by_admin(
    db: Session, event_id: int, patch: UpdateEventAdminRequest
) -> EventFullOut:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found")

    _check_participant_limit(event, patch.participant_limit)

    now = utcnow()
    if patch.event_date is not None and patch.event_date < now:
        raise BadRequestError(
            ErrorCode.EVENT_DATE_IN_PAST.value, "eventDate must not be in the past"
        )

    new_state = event.state
    if patch.state_action is not None:
        new_state = next_state(
            Actor.ADMIN,
            event.state,
            patch.state_action,
            patch.event_date or event.event_date,
            now,
        )

    _apply_patch(db, event, _patch_data(patch))
    if new_state == EventState.PUBLISHED and event.state != EventState.PUBLISHED:
        event.published_on = now
    event.state = new_state
    event = _save(db, event)

    logger.info("event_updated", event_id=event.id, actor="admin", state=event.state.value)
    return EventFullOut.from_model(event)


def list_initiator_events(db: Session, user_id: int, offset: int, size: int) -> list[EventShortOut]:
    _get_user_or_404(db, user_id)
    events = db.scalars(
        select(Event)
        .where(Event.initiator_id == user_id)
        .order_by(Event.created_on.desc(), Event.id.desc())
        .offset(offset)
        .limit(size)
    ).all()
    return [EventShortOut.from_model(e) for e in events]


def get_initiator_event(db: Session, user_id: int, event_id: int) -> EventFullOut:
    return EventFullOut.from_model(_get_owned_event_or_404(db, user_id, event_id))


def _parse_sort(raw: str | None) -> EventSort | None:
    if raw is None or not raw.strip():
        return None
    try:
        return EventSort(raw.strip().upper())
    except ValueError:
        raise BadRequestError(ErrorCode.INVALID_SORT.value, f"unsupported sort: {raw}") from None


def _parse_states(raw: list[str] | None) -> list[EventState] | None:
    if not raw:
        return None
    try:
        return [EventState(value.strip().upper()) for value in raw]
    except ValueError:
        raise BadRequestError(
            ErrorCode.INVALID_STATE_FILTER.value, f"invalid state value in filter: {raw}"
        ) from None


def _check_range(start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and end < start:
        raise BadRequestError(
            ErrorCode.INVALID_DATE_RANGE.value, "rangeEnd must be equal to or after rangeStart"
        )


def search_public(
    db: Session,
    stats: StatsClient | None,
    filters: PublicEventSearch,
    hit: EndpointHit | None = None,
) -> list[EventShortOut]:
    record_hit(stats, hit)

    now = utcnow()
    start = filters.range_start or now
    _check_range(start, filters.range_end)
    sort = _parse_sort(filters.sort)

    stmt = select(Event).where(
        Event.state == EventState.PUBLISHED,
        Event.event_date >= start,
    )
    if filters.range_end is not None:
        stmt = stmt.where(Event.event_date <= filters.range_end)

    text = (filters.text or "").strip()
    if text:
        like = f"%{text.lower()}%"
        stmt = stmt.where(or_(Event.annotation.ilike(like), Event.description.ilike(like)))
    if filters.categories:
        stmt = stmt.where(Event.category_id.in_(filters.categories))
    if filters.paid is not None:
        stmt = stmt.where(Event.paid == filters.paid)
    if filters.only_available:
        stmt = stmt.where(
            or_(
                Event.participant_limit == 0,
                Event.confirmed_requests < Event.participant_limit,
            )
        )

    if sort == EventSort.EVENT_DATE:
        stmt = stmt.order_by(Event.event_date.asc(), Event.id.asc())
    else:
        stmt = stmt.order_by(Event.id.asc())

    events = list(db.scalars(stmt.offset(filters.offset).limit(filters.size)).all())
    if not events:
        return []

    # Views can only be ordered once they are known, so VIEWS sorts the page
    ids = [e.id for e in events]
    views = fetch_views(stats, ids, start, filters.range_end or now)
    if sort == EventSort.VIEWS:
        events.sort(key=lambda e: views.get(e.id, 0), reverse=True)

    comment_counts = count_published_by_event(db, ids)
    return [
        EventShortOut.from_model(e, views=views.get(e.id, 0), comment_count=comment_counts.get(e.id, 0))
        for e in events
    ]


def get_public_event(
    db: Session,
    stats: StatsClient | None,
    event_id: int,
    hit: EndpointHit | None = None,
) -> EventFullOut:
    record_hit(stats, hit)

    event = db.scalar(
        select(Event).where(Event.id == event_id, Event.state == EventState.PUBLISHED)
    )
    if not event:
        raise NotFoundError(
            ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found or not published"
        )

    since = event.published_on or event.created_on
    views = fetch_views(stats, [event.id], since, utcnow())
    return EventFullOut.from_model(
        event,
        views=views.get(event.id, 0),
        comment_count=count_published(db, event.id),
    )


def search_admin(db: Session, filters: AdminEventSearch) -> list[EventFullOut]:
    _check_range(filters.range_start, filters.range_end)
    states = _parse_states(filters.states)

    stmt = select(Event)
    if filters.users:
        stmt = stmt.where(Event.initiator_id.in_(filters.users))
    if states:
        stmt = stmt.where(Event.state.in_(states))
    if filters.categories:
        stmt = stmt.where(Event.category_id.in_(filters.categories))
    if filters.range_start is not None:
        stmt = stmt.where(Event.event_date >= filters.range_start)
    if filters.range_end is not None:
        stmt = stmt.where(Event.event_date <= filters.range_end)

    events = db.scalars(
        stmt.order_by(Event.created_on.desc(), Event.id.desc())
        .offset(filters.offset)
        .limit(filters.size)
    ).all()
    return [EventFullOut.from_model(e) for e in events]


def count_events_by_category(db: Session, category_id: int) -> int:
    return int(
        db.scalar(
            select(func.count()).select_from(Event).where(Event.category_id == category_id)
        )
        or 0
    )
