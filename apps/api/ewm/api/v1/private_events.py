from __future__ import annotations

from fastapi import APIRouter

from ewm.api.deps import DBSession, Offset, Size
from ewm.api.v1.schemas.events import EventFullOut, EventShortOut, NewEvent, UpdateEventUserRequest
from ewm.api.v1.schemas.requests import (
    EventRequestStatusUpdateRequest,
    EventRequestStatusUpdateResult,
    ParticipationRequestOut,
)
from ewm.services import events_service, requests_service

router = APIRouter(prefix="/users/{user_id}/events", tags=["events: initiator"])


@router.post("", response_model=EventFullOut, status_code=201)
def create_event(user_id: int, payload: NewEvent, db: DBSession):
    return events_service.create_event(db, user_id, payload)


@router.get("", response_model=list[EventShortOut])
def list_my_events(user_id: int, db: DBSession, offset: Offset = 0, size: Size = 10):
    return events_service.list_initiator_events(db, user_id, offset, size)


@router.get("/{event_id}", response_model=EventFullOut)
def get_my_event(user_id: int, event_id: int, db: DBSession):
    return events_service.get_initiator_event(db, user_id, event_id)


@router.patch("/{event_id}", response_model=EventFullOut)
def update_my_event(user_id: int, event_id: int, payload: UpdateEventUserRequest, db: DBSession):
    return events_service.update_event_by_initiator(db, user_id, event_id, payload)


@router.get("/{event_id}/requests", response_model=list[ParticipationRequestOut])
def list_event_requests(user_id: int, event_id: int, db: DBSession):
    return requests_service.get_event_requests(db, user_id, event_id)


@router.patch("/{event_id}/requests", response_model=EventRequestStatusUpdateResult)
def update_event_requests(
    user_id: int,
    event_id: int,
    payload: EventRequestStatusUpdateRequest,
    db: DBSession,
):
    return requests_service.update_request_statuses(db, user_id, event_id, payload)
