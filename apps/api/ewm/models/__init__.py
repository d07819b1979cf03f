from ewm.models.base import Base
from ewm.models.category import Category
from ewm.models.comment import Comment, CommentState
from ewm.models.event import Event, EventState, Location, StateAction
from ewm.models.participation_request import ParticipationRequest, RequestStatus
from ewm.models.user import User

__all__ = [
    "Base",
    "User",
    "Category",
    "Event",
    "EventState",
    "StateAction",
    "Location",
    "ParticipationRequest",
    "RequestStatus",
    "Comment",
    "CommentState",
]
