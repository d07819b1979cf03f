from __future__ import annotations

from fastapi import APIRouter, Query

from ewm.api.deps import DBSession, Hit, Offset, Size, Stats, split_csv_ints
from ewm.api.v1.schemas.comments import CommentOut
from ewm.api.v1.schemas.events import EventFullOut, EventShortOut, PublicEventSearch
from ewm.services import comments_service, events_service

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventShortOut])
def search_events(
    db: DBSession,
    stats: Stats,
    hit: Hit,
    text: str | None = Query(default=None),
    categories: list[str] | None = Query(default=None),
    paid: bool | None = Query(default=None),
    range_start: str | None = Query(default=None, alias="rangeStart"),
    range_end: str | None = Query(default=None, alias="rangeEnd"),
    only_available: bool = Query(default=False, alias="onlyAvailable"),
    sort: str | None = Query(default=None),
    offset: Offset = 0,
    size: Size = 10,
):
    filters = PublicEventSearch(
        text=text,
        categories=split_csv_ints(categories, "categories"),
        paid=paid,
        range_start=range_start,
        range_end=range_end,
        only_available=only_available,
        sort=sort,
        offset=offset,
        size=size,
    )
    return events_service.search_public(db, stats, filters, hit)


@router.get("/{event_id}", response_model=EventFullOut)
def get_event(event_id: int, db: DBSession, stats: Stats, hit: Hit):
    return events_service.get_public_event(db, stats, event_id, hit)


@router.get("/{event_id}/comments", response_model=list[CommentOut])
def list_event_comments(event_id: int, db: DBSession, offset: Offset = 0, size: Size = 10):
    return comments_service.list_published_comments(db, event_id, offset, size)
