from __future__ import annotations

from fastapi import APIRouter, Query

from ewm.api.deps import DBSession, Offset, Size, split_csv, split_csv_ints
from ewm.api.v1.schemas.events import AdminEventSearch, EventFullOut, UpdateEventAdminRequest
from ewm.services import events_service

router = APIRouter(prefix="/admin/events", tags=["admin"])


@router.get("", response_model=list[EventFullOut])
def search_events(
    db: DBSession,
    users: list[str] | None = Query(default=None),
    states: list[str] | None = Query(default=None),
    categories: list[str] | None = Query(default=None),
    range_start: str | None = Query(default=None, alias="rangeStart"),
    range_end: str | None = Query(default=None, alias="rangeEnd"),
    offset: Offset = 0,
    size: Size = 10,
):
    filters = AdminEventSearch(
        users=split_csv_ints(users, "users"),
        states=split_csv(states),
        categories=split_csv_ints(categories, "categories"),
        range_start=range_start,
        range_end=range_end,
        offset=offset,
        size=size,
    )
    return events_service.search_admin(db, filters)


@router.patch("/{event_id}", response_model=EventFullOut)
def update_event(event_id: int, payload: UpdateEventAdminRequest, db: DBSession):
    return events_service.update_event_by_admin(db, event_id, payload)
