from ewm.services.events_service import (
    create_event,
    get_initiator_event,
    get_public_event,
    list_initiator_events,
    search_admin,
    search_public,
    update_event_by_admin,
    update_event_by_initiator,
)
from ewm.services.requests_service import (
    add_request,
    cancel_request,
    get_event_requests,
    get_user_requests,
    update_request_statuses,
)

__all__ = [
    "create_event",
    "update_event_by_initiator",
    "update_event_by_admin",
    "list_initiator_events",
    "get_initiator_event",
    "search_public",
    "get_public_event",
    "search_admin",
    "add_request",
    "cancel_request",
    "get_user_requests",
    "get_event_requests",
    "update_request_statuses",
]
