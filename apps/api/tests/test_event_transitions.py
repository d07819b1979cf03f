from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from ewm.models import EventState, StateAction
from ewm.services.error_codes import ErrorCode
from ewm.services.event_transitions import Actor, next_state
from ewm.services.exceptions import BadRequestError, ConflictError

NOW = datetime(2030, 6, 1, 12, 0, 0)
LATER = NOW + timedelta(days=3)


@pytest.mark.parametrize(
    "current, action, expected",
    [
        (EventState.PENDING, StateAction.SEND_TO_REVIEW, EventState.PENDING),
        (EventState.CANCELED, StateAction.SEND_TO_REVIEW, EventState.PENDING),
        (EventState.PENDING, StateAction.CANCEL_REVIEW, EventState.CANCELED),
        (EventState.CANCELED, StateAction.CANCEL_REVIEW, EventState.CANCELED),
    ],
)
def test_initiator_transitions(current, action, expected):
    assert next_state(Actor.INITIATOR, current, action, LATER, NOW) == expected


@pytest.mark.parametrize(
    "current, action, expected",
    [
        (EventState.PENDING, StateAction.PUBLISH_EVENT, EventState.PUBLISHED),
        (EventState.PENDING, StateAction.REJECT_EVENT, EventState.CANCELED),
        (EventState.CANCELED, StateAction.REJECT_EVENT, EventState.CANCELED),
    ],
)
def test_admin_transitions(current, action, expected):
    assert next_state(Actor.ADMIN, current, action, LATER, NOW) == expected


@pytest.mark.parametrize("action", [StateAction.PUBLISH_EVENT, StateAction.REJECT_EVENT])
def test_initiator_cannot_use_admin_actions(action):
    with pytest.raises(BadRequestError) as err:
        next_state(Actor.INITIATOR, EventState.PENDING, action, LATER, NOW)
    assert err.value.code == ErrorCode.INVALID_STATE_ACTION.value


@pytest.mark.parametrize("action", [StateAction.SEND_TO_REVIEW, StateAction.CANCEL_REVIEW])
def test_admin_cannot_use_initiator_actions(action):
    with pytest.raises(BadRequestError):
        next_state(Actor.ADMIN, EventState.PENDING, action, LATER, NOW)


@pytest.mark.parametrize("current", [EventState.PUBLISHED, EventState.CANCELED])
def test_publish_requires_pending(current):
    with pytest.raises(ConflictError) as err:
        next_state(Actor.ADMIN, current, StateAction.PUBLISH_EVENT, LATER, NOW)
    assert err.value.code == ErrorCode.EVENT_NOT_PENDING.value


def test_published_event_cannot_be_rejected():
    with pytest.raises(ConflictError) as err:
        next_state(Actor.ADMIN, EventState.PUBLISHED, StateAction.REJECT_EVENT, LATER, NOW)
    assert err.value.code == ErrorCode.EVENT_ALREADY_PUBLISHED.value


def test_initiator_cannot_touch_published_event():
    with pytest.raises(ConflictError):
        next_state(Actor.INITIATOR, EventState.PUBLISHED, StateAction.CANCEL_REVIEW, LATER, NOW)


def test_publish_needs_one_hour_lead():
    with pytest.raises(ConflictError) as err:
        next_state(
            Actor.ADMIN,
            EventState.PENDING,
            StateAction.PUBLISH_EVENT,
            NOW + timedelta(minutes=59),
            NOW,
        )
    assert err.value.code == ErrorCode.EVENT_DATE_TOO_SOON.value

    exactly_one_hour = NOW + timedelta(hours=1)
    assert (
        next_state(Actor.ADMIN, EventState.PENDING, StateAction.PUBLISH_EVENT, exactly_one_hour, NOW)
        == EventState.PUBLISHED
    )
