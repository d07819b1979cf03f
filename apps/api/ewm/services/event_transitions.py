"""Event moderation state machine.

The table maps (current state, action) to the next state for each actor.
A pair missing from the table is a Conflict when the actor may use the
action at all, and a BadRequest otherwise. Nothing here touches the
database.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from ewm.models.event import EventState, StateAction
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import BadRequestError, ConflictError

PUBLISH_LEAD_TIME = timedelta(hours=1)


class Actor(str, Enum):
    INITIATOR = "INITIATOR"
    ADMIN = "ADMIN"


_TRANSITIONS: dict[Actor, dict[tuple[EventState, StateAction], EventState]] = {
    Actor.INITIATOR: {
        (EventState.PENDING, StateAction.SEND_TO_REVIEW): EventState.PENDING,
        (EventState.CANCELED, StateAction.SEND_TO_REVIEW): EventState.PENDING,
        (EventState.PENDING, StateAction.CANCEL_REVIEW): EventState.CANCELED,
        (EventState.CANCELED, StateAction.CANCEL_REVIEW): EventState.CANCELED,
    },
    Actor.ADMIN: {
        (EventState.PENDING, StateAction.PUBLISH_EVENT): EventState.PUBLISHED,
        (EventState.PENDING, StateAction.REJECT_EVENT): EventState.CANCELED,
        (EventState.CANCELED, StateAction.REJECT_EVENT): EventState.CANCELED,
    },
}

_ALLOWED_ACTIONS: dict[Actor, frozenset[StateAction]] = {
    actor: frozenset(action for _, action in table) for actor, table in _TRANSITIONS.items()
}

_CONFLICT_MESSAGES: dict[StateAction, tuple[ErrorCode, str]] = {
    StateAction.PUBLISH_EVENT: (
        ErrorCode.EVENT_NOT_PENDING,
        "only pending events can be published",
    ),
    StateAction.REJECT_EVENT: (
        ErrorCode.EVENT_ALREADY_PUBLISHED,
        "published events cannot be rejected",
    ),
}


def next_state(
    actor: Actor,
    current: EventState,
    action: StateAction,
    event_date: datetime,
    now: datetime,
) -> EventState:
    if action not in _ALLOWED_ACTIONS[actor]:
        raise BadRequestError(
            ErrorCode.INVALID_STATE_ACTION.value,
            f"unsupported stateAction for {actor.value.lower()}: {action.value}",
        )

    target = _TRANSITIONS[actor].get((current, action))
    if target is None:
        code, message = _CONFLICT_MESSAGES.get(
            action,
            (ErrorCode.EVENT_NOT_EDITABLE, f"cannot apply {action.value} to {current.value} event"),
        )
        raise ConflictError(code.value, message)

    if action == StateAction.PUBLISH_EVENT and event_date < now + PUBLISH_LEAD_TIME:
        raise ConflictError(
            ErrorCode.EVENT_DATE_TOO_SOON.value,
            "event date must be at least 1 hour after publish time",
        )

    return target
