from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from ewm.core.config import settings
from ewm.core.timeutil import utcnow
from ewm.db import get_db
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import BadRequestError
from ewm.stats.base import EndpointHit, StatsClient
from ewm.stats.factory import get_stats_client

DBSession = Annotated[Session, Depends(get_db)]


def get_stats() -> StatsClient:
    return get_stats_client()


Stats = Annotated[StatsClient, Depends(get_stats)]


def endpoint_hit(request: Request) -> EndpointHit:
    return EndpointHit(
        app=settings.app_name,
        uri=request.url.path,
        ip=request.client.host if request.client else "unknown",
        timestamp=utcnow(),
    )


Hit = Annotated[EndpointHit, Depends(endpoint_hit)]

Offset = Annotated[int, Query(alias="from", ge=0)]
Size = Annotated[int, Query(gt=0)]


def split_csv(values: list[str] | None) -> list[str] | None:
    """Accept both repeated (``?ids=1&ids=2``) and comma-joined (``?ids=1,2``) values."""
    if not values:
        return None
    parts = [part.strip() for value in values for part in value.split(",")]
    return [part for part in parts if part] or None


def split_csv_ints(values: list[str] | None, name: str) -> list[int] | None:
    parts = split_csv(values)
    if parts is None:
        return None
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise BadRequestError(
            ErrorCode.VALIDATION_ERROR.value, f"{name} must be a list of integers"
        ) from None
