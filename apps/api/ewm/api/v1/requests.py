from __future__ import annotations

from fastapi import APIRouter, Query

from ewm.api.deps import DBSession
from ewm.api.v1.schemas.requests import ParticipationRequestOut
from ewm.services import requests_service

router = APIRouter(prefix="/users/{user_id}/requests", tags=["requests"])


@router.get("", response_model=list[ParticipationRequestOut])
def list_my_requests(user_id: int, db: DBSession):
    return requests_service.get_user_requests(db, user_id)


@router.post("", response_model=ParticipationRequestOut, status_code=201)
def add_request(user_id: int, db: DBSession, event_id: int = Query(alias="eventId")):
    return requests_service.add_request(db, user_id, event_id)


@router.patch("/{request_id}/cancel", response_model=ParticipationRequestOut)
def cancel_request(user_id: int, request_id: int, db: DBSession):
    return requests_service.cancel_request(db, user_id, request_id)
