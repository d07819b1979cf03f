"""Best-effort calls to the statistics service.

Neither helper ever raises: a failed hit is logged and dropped, a failed
views query yields zero for every requested event.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import structlog

from ewm.stats.base import EndpointHit, StatsClient

logger = structlog.get_logger()

EVENT_URI_PREFIX = "/events/"


def event_uri(event_id: int) -> str:
    return f"{EVENT_URI_PREFIX}{event_id}"


def _event_id_from_uri(uri: str) -> int | None:
    if not uri.startswith(EVENT_URI_PREFIX):
        return None
    tail = uri[len(EVENT_URI_PREFIX):].split("/", 1)[0]
    return int(tail) if tail.isdigit() else None


def record_hit(stats: StatsClient | None, hit: EndpointHit | None) -> None:
    if stats is None or hit is None:
        return
    try:
        stats.record_hit(hit)
    except Exception as exc:
        logger.warning("stats_hit_failed", uri=hit.uri, error=str(exc))


def fetch_views(
    stats: StatsClient | None,
    event_ids: Iterable[int],
    start: datetime,
    end: datetime,
) -> dict[int, int]:
    views = {event_id: 0 for event_id in event_ids}
    if stats is None or not views or end < start:
        return views

    uris = [event_uri(event_id) for event_id in views]
    try:
        rows = stats.get_stats(start, end, uris, unique=True)
    except Exception as exc:
        logger.warning("stats_views_failed", uris=len(uris), error=str(exc))
        return views

    for row in rows:
        event_id = _event_id_from_uri(row.uri)
        if event_id in views:
            views[event_id] += row.hits
    return views
