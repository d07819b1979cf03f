from ewm.api.v1.schemas.categories import NewCategory
from ewm.api.v1.schemas.comments import CommentOut, NewComment, UpdateComment
from ewm.api.v1.schemas.common import ApiDateTime, CategoryOut, SchemaBase, UserShortOut
from ewm.api.v1.schemas.events import (
    AdminEventSearch,
    EventFullOut,
    EventShortOut,
    LocationIn,
    LocationOut,
    NewEvent,
    PublicEventSearch,
    UpdateEventAdminRequest,
    UpdateEventUserRequest,
)
from ewm.api.v1.schemas.requests import (
    EventRequestStatusUpdateRequest,
    EventRequestStatusUpdateResult,
    ParticipationRequestOut,
)
from ewm.api.v1.schemas.users import NewUser, UserOut

__all__ = [
    "ApiDateTime",
    "SchemaBase",
    "CategoryOut",
    "UserShortOut",
    "NewCategory",
    "NewUser",
    "UserOut",
    "LocationIn",
    "LocationOut",
    "NewEvent",
    "UpdateEventUserRequest",
    "UpdateEventAdminRequest",
    "EventShortOut",
    "EventFullOut",
    "PublicEventSearch",
    "AdminEventSearch",
    "ParticipationRequestOut",
    "EventRequestStatusUpdateRequest",
    "EventRequestStatusUpdateResult",
    "NewComment",
    "UpdateComment",
    "CommentOut",
]
