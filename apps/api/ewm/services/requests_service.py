"""Participation requests and admission control.

``Event.confirmed_requests`` only changes in ``add_request`` and
``update_request_statuses``. Both lock the event row with SELECT ... FOR UPDATE
and then bump the counter with a conditional UPDATE that re-checks the limit
in the database, in the same transaction as the request rows. Backends that
ignore FOR UPDATE (SQLite) still cannot overshoot the limit.
"""

from __future__ import annotations

import structlog
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ewm.api.v1.schemas.requests import (
    EventRequestStatusUpdateRequest,
    EventRequestStatusUpdateResult,
    ParticipationRequestOut,
)
from ewm.core.timeutil import utcnow
from ewm.models import Event, EventState, ParticipationRequest, RequestStatus, User
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import BadRequestError, ConflictError, NotFoundError

logger = structlog.get_logger()

BULK_TARGET_STATUSES = frozenset({RequestStatus.CONFIRMED, RequestStatus.REJECTED})


def _lock_event(db: Session, event_id: int) -> Event:
    event = db.scalar(
        select(Event)
        .where(Event.id == event_id)
        .with_for_update(of=Event)
        .execution_options(populate_existing=True)
    )
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found")
    return event


def _reserve_slots(db: Session, event_id: int, count: int) -> None:
    """Add ``count`` to the confirmed counter if the limit still allows it."""
    result = db.execute(
        update(Event)
        .where(
            Event.id == event_id,
            or_(
                Event.participant_limit == 0,
                Event.confirmed_requests + count <= Event.participant_limit,
            ),
        )
        .values(confirmed_requests=Event.confirmed_requests + count)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise ConflictError(
            ErrorCode.PARTICIPANT_LIMIT_REACHED.value,
            f"cannot confirm {count} more requests, event participant limit reached",
        )


def _request_exists(db: Session, event_id: int, user_id: int) -> bool:
    return (
        db.scalar(
            select(ParticipationRequest.id)
            .where(
                ParticipationRequest.event_id == event_id,
                ParticipationRequest.requester_id == user_id,
            )
            .limit(1)
        )
        is not None
    )


def add_request(db: Session, user_id: int, event_id: int) -> ParticipationRequestOut:
    if not db.get(User, user_id):
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, f"user {user_id} not found")

    try:
        event = _lock_event(db, event_id)

        if _request_exists(db, event.id, user_id):
            raise ConflictError(ErrorCode.REQUEST_ALREADY_EXISTS.value, "request already exists")
        if event.initiator_id == user_id:
            raise ConflictError(
                ErrorCode.REQUEST_BY_INITIATOR.value,
                "initiator cannot request participation in own event",
            )
        if event.state != EventState.PUBLISHED:
            raise ConflictError(
                ErrorCode.EVENT_NOT_PUBLISHED.value,
                "cannot participate in an unpublished event",
            )
        if event.participant_limit < 0:
            raise BadRequestError(
                ErrorCode.INVALID_PARTICIPANT_LIMIT.value, "participant limit cannot be negative"
            )
        if not event.has_free_slots:
            raise ConflictError(
                ErrorCode.PARTICIPANT_LIMIT_REACHED.value, "event participant limit reached"
            )

        auto_confirm = event.participant_limit == 0 or not event.request_moderation
        if auto_confirm:
            _reserve_slots(db, event.id, 1)

        request = ParticipationRequest(
            event_id=event.id,
            requester_id=user_id,
            created=utcnow(),
            status=RequestStatus.CONFIRMED if auto_confirm else RequestStatus.PENDING,
        )
        db.add(request)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.REQUEST_ALREADY_EXISTS.value, "request already exists") from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(request)
    logger.info(
        "request_added",
        request_id=request.id,
        event_id=event_id,
        user_id=user_id,
        status=request.status.value,
    )
    return ParticipationRequestOut.from_model(request)


def cancel_request(db: Session, user_id: int, request_id: int) -> ParticipationRequestOut:
    request = db.get(ParticipationRequest, request_id)
    if not request:
        raise NotFoundError(ErrorCode.REQUEST_NOT_FOUND.value, f"request {request_id} not found")
    if request.requester_id != user_id:
        raise ConflictError(ErrorCode.NOT_REQUESTER.value, "cannot cancel another user's request")

    previous = request.status
    # confirmed_requests is left as is, even when a CONFIRMED request is canceled
    request.status = RequestStatus.CANCELED
    db.add(request)
    db.commit()
    db.refresh(request)

    logger.info(
        "request_canceled",
        request_id=request.id,
        user_id=user_id,
        previous_status=previous.value,
    )
    return ParticipationRequestOut.from_model(request)


def get_user_requests(db: Session, user_id: int) -> list[ParticipationRequestOut]:
    if not db.get(User, user_id):
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, f"user {user_id} not found")

    requests = db.scalars(
        select(ParticipationRequest)
        .where(ParticipationRequest.requester_id == user_id)
        .order_by(ParticipationRequest.id)
    ).all()
    return [ParticipationRequestOut.from_model(r) for r in requests]


def get_event_requests(db: Session, user_id: int, event_id: int) -> list[ParticipationRequestOut]:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found")
    if event.initiator_id != user_id:
        raise ConflictError(ErrorCode.NOT_INITIATOR.value, "user is not the initiator of this event")

    requests = db.scalars(
        select(ParticipationRequest)
        .where(ParticipationRequest.event_id == event_id)
        .order_by(ParticipationRequest.id)
    ).all()
    return [ParticipationRequestOut.from_model(r) for r in requests]


def update_request_statuses(
    db: Session,
    user_id: int,
    event_id: int,
    payload: EventRequestStatusUpdateRequest,
) -> EventRequestStatusUpdateResult:
    """Confirm or reject a batch of PENDING requests, all or nothing.

    Confirming more requests than the event has free slots fails the whole
    batch with a Conflict; nothing is confirmed and nothing is rejected.
    """
    if payload.status not in BULK_TARGET_STATUSES:
        raise BadRequestError(
            ErrorCode.INVALID_REQUEST_STATUS.value,
            f"status must be CONFIRMED or REJECTED, got {payload.status.value}",
        )

    try:
        event = _lock_event(db, event_id)
        if event.initiator_id != user_id:
            raise ConflictError(
                ErrorCode.NOT_INITIATOR.value, "user is not the initiator of this event"
            )

        request_ids = list(dict.fromkeys(payload.request_ids))
        found = {
            r.id: r
            for r in db.scalars(
                select(ParticipationRequest)
                .where(
                    ParticipationRequest.id.in_(request_ids),
                    ParticipationRequest.event_id == event.id,
                )
                .with_for_update()
                .execution_options(populate_existing=True)
            ).all()
        }
        missing = [request_id for request_id in request_ids if request_id not in found]
        if missing:
            raise NotFoundError(
                ErrorCode.REQUEST_NOT_FOUND.value, f"requests not found for event: {missing}"
            )

        requests = [found[request_id] for request_id in request_ids]
        not_pending = [r.id for r in requests if r.status != RequestStatus.PENDING]
        if not_pending:
            raise ConflictError(
                ErrorCode.REQUEST_NOT_PENDING.value,
                f"only pending requests can be changed: {not_pending}",
            )

        if payload.status == RequestStatus.CONFIRMED:
            if event.participant_limit > 0:
                free = event.participant_limit - event.confirmed_requests
                if len(requests) > free:
                    raise ConflictError(
                        ErrorCode.PARTICIPANT_LIMIT_REACHED.value,
                        f"cannot confirm {len(requests)} requests, {max(free, 0)} slots left",
                    )
            _reserve_slots(db, event.id, len(requests))
            for r in requests:
                r.status = RequestStatus.CONFIRMED
        else:
            for r in requests:
                r.status = RequestStatus.REJECTED

        db.commit()
    except Exception:
        db.rollback()
        raise

    outs = [ParticipationRequestOut.from_model(r) for r in requests]
    logger.info(
        "request_statuses_updated",
        event_id=event_id,
        user_id=user_id,
        status=payload.status.value,
        count=len(outs),
        confirmed_requests=event.confirmed_requests,
    )
    if payload.status == RequestStatus.CONFIRMED:
        return EventRequestStatusUpdateResult(confirmed_requests=outs)
    return EventRequestStatusUpdateResult(rejected_requests=outs)
