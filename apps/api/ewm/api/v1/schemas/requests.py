from __future__ import annotations

from pydantic import Field

from ewm.api.v1.schemas.common import ApiDateTime, SchemaBase
from ewm.models.participation_request import ParticipationRequest, RequestStatus


class ParticipationRequestOut(SchemaBase):
    id: int
    requester: int
    event: int
    status: RequestStatus
    created: ApiDateTime

    @classmethod
    def from_model(cls, request: ParticipationRequest) -> "ParticipationRequestOut":
        return cls(
            id=request.id,
            requester=request.requester_id,
            event=request.event_id,
            status=request.status,
            created=request.created,
        )


class EventRequestStatusUpdateRequest(SchemaBase):
    request_ids: list[int] = Field(min_length=1)
    status: RequestStatus


class EventRequestStatusUpdateResult(SchemaBase):
    confirmed_requests: list[ParticipationRequestOut] = Field(default_factory=list)
    rejected_requests: list[ParticipationRequestOut] = Field(default_factory=list)
