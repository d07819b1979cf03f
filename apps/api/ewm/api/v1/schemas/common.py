from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from ewm.core.timeutil import format_datetime, parse_datetime, to_naive_utc


def _coerce_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return parse_datetime(value)
        except ValueError as exc:
            raise ValueError("datetime must be formatted as yyyy-MM-dd HH:mm:ss") from exc
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return value


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Naive UTC on the way in, "yyyy-MM-dd HH:mm:ss" on the way out
ApiDateTime = Annotated[
    datetime,
    BeforeValidator(_coerce_datetime),
    PlainSerializer(format_datetime, return_type=str, when_used="json"),
]

NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class SchemaBase(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CategoryOut(SchemaBase):
    id: int
    name: str


class UserShortOut(SchemaBase):
    id: int
    name: str
