from __future__ import annotations

from pydantic import Field

from ewm.api.v1.schemas.common import (
    ApiDateTime,
    CategoryOut,
    NonBlankStr,
    SchemaBase,
    UserShortOut,
)
from ewm.models.event import Event, EventState, StateAction


class LocationIn(SchemaBase):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class LocationOut(SchemaBase):
    lat: float
    lon: float


class NewEvent(SchemaBase):
    annotation: NonBlankStr = Field(min_length=20, max_length=2000)
    description: NonBlankStr = Field(min_length=20, max_length=7000)
    title: NonBlankStr = Field(min_length=3, max_length=120)
    category: int
    location: LocationIn
    event_date: ApiDateTime
    paid: bool = False
    participant_limit: int = Field(default=0, ge=0)
    request_moderation: bool = True


class EventPatch(SchemaBase):
    """Partial update: absent or null fields leave the event unchanged."""

    annotation: NonBlankStr | None = Field(default=None, min_length=20, max_length=2000)
    description: NonBlankStr | None = Field(default=None, min_length=20, max_length=7000)
    title: NonBlankStr | None = Field(default=None, min_length=3, max_length=120)
    category: int | None = None
    location: LocationIn | None = None
    paid: bool | None = None
    participant_limit: int | None = None
    request_moderation: bool | None = None
    event_date: ApiDateTime | None = None
    state_action: StateAction | None = None


class UpdateEventUserRequest(EventPatch):
    pass


class UpdateEventAdminRequest(EventPatch):
    pass


class EventShortOut(SchemaBase):
    id: int
    annotation: str
    title: str
    category: CategoryOut
    initiator: UserShortOut
    paid: bool
    event_date: ApiDateTime
    confirmed_requests: int
    views: int = 0
    comment_count: int = 0

    @classmethod
    def from_model(cls, event: Event, views: int = 0, comment_count: int = 0):
        out = cls.model_validate(event)
        return out.model_copy(update={"views": views, "comment_count": comment_count})


class EventFullOut(EventShortOut):
    description: str
    location: LocationOut
    participant_limit: int
    request_moderation: bool
    state: EventState
    created_on: ApiDateTime
    published_on: ApiDateTime | None = None


class PublicEventSearch(SchemaBase):
    text: str | None = None
    categories: list[int] | None = None
    paid: bool | None = None
    range_start: ApiDateTime | None = None
    range_end: ApiDateTime | None = None
    only_available: bool = False
    sort: str | None = None
    offset: int = Field(default=0, ge=0)
    size: int = Field(default=10, gt=0)


class AdminEventSearch(SchemaBase):
    users: list[int] | None = None
    states: list[str] | None = None
    categories: list[int] | None = None
    range_start: ApiDateTime | None = None
    range_end: ApiDateTime | None = None
    offset: int = Field(default=0, ge=0)
    size: int = Field(default=10, gt=0)
