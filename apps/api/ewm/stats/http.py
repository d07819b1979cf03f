from __future__ import annotations

from datetime import datetime

import httpx
import structlog

from ewm.core.timeutil import format_datetime
from ewm.stats.base import EndpointHit, StatsClient, ViewStats

logger = structlog.get_logger()


class HttpStatsClient(StatsClient):
    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 2.0,
        read_timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def record_hit(self, hit: EndpointHit) -> None:
        resp = self._client.post(
            "/hit",
            json={
                "app": hit.app,
                "uri": hit.uri,
                "ip": hit.ip,
                "timestamp": format_datetime(hit.timestamp),
            },
        )
        resp.raise_for_status()

    def get_stats(
        self,
        start: datetime,
        end: datetime,
        uris: list[str],
        unique: bool = False,
    ) -> list[ViewStats]:
        if end < start:
            raise ValueError("end must be equal to or after start")

        params: list[tuple[str, str]] = [
            ("start", format_datetime(start)),
            ("end", format_datetime(end)),
            ("unique", "true" if unique else "false"),
        ]
        params.extend(("uris", uri) for uri in uris)

        logger.debug("stats_query", uris=len(uris), unique=unique)
        resp = self._client.get("/stats", params=params)
        resp.raise_for_status()

        body = resp.json() or []
        return [
            ViewStats(app=item.get("app", ""), uri=item["uri"], hits=int(item.get("hits") or 0))
            for item in body
            if item and item.get("uri")
        ]

    def close(self) -> None:
        self._client.close()
