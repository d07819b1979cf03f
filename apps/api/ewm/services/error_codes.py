from enum import Enum


class ErrorCode(str, Enum):
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    EVENT_DATE_TOO_SOON = "EVENT_DATE_TOO_SOON"
    EVENT_DATE_IN_PAST = "EVENT_DATE_IN_PAST"
    EVENT_NOT_EDITABLE = "EVENT_NOT_EDITABLE"
    EVENT_NOT_PENDING = "EVENT_NOT_PENDING"
    EVENT_ALREADY_PUBLISHED = "EVENT_ALREADY_PUBLISHED"
    EVENT_NOT_PUBLISHED = "EVENT_NOT_PUBLISHED"
    INVALID_STATE_ACTION = "INVALID_STATE_ACTION"
    INVALID_STATE_FILTER = "INVALID_STATE_FILTER"
    INVALID_SORT = "INVALID_SORT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_PARTICIPANT_LIMIT = "INVALID_PARTICIPANT_LIMIT"
    PARTICIPANT_LIMIT_BELOW_CONFIRMED = "PARTICIPANT_LIMIT_BELOW_CONFIRMED"

    REQUEST_ALREADY_EXISTS = "REQUEST_ALREADY_EXISTS"
    REQUEST_BY_INITIATOR = "REQUEST_BY_INITIATOR"
    PARTICIPANT_LIMIT_REACHED = "PARTICIPANT_LIMIT_REACHED"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    INVALID_REQUEST_STATUS = "INVALID_REQUEST_STATUS"
    NOT_REQUESTER = "NOT_REQUESTER"
    NOT_INITIATOR = "NOT_INITIATOR"

    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"

    PARENT_COMMENT_MISMATCH = "PARENT_COMMENT_MISMATCH"
    COMMENT_NOT_PENDING = "COMMENT_NOT_PENDING"
    COMMENT_NOT_EDITABLE = "COMMENT_NOT_EDITABLE"
    NOT_AUTHOR = "NOT_AUTHOR"

    INTEGRITY_VIOLATION = "INTEGRITY_VIOLATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
