from __future__ import annotations

from functools import lru_cache

from ewm.core.config import settings
from ewm.stats.base import StatsClient
from ewm.stats.http import HttpStatsClient


def create_stats_client(base_url: str | None = None) -> StatsClient:
    return HttpStatsClient(
        base_url or settings.stats_server_url,
        connect_timeout=settings.stats_connect_timeout,
        read_timeout=settings.stats_read_timeout,
    )


@lru_cache(maxsize=1)
def get_stats_client() -> StatsClient:
    return create_stats_client()


def close_stats_client() -> None:
    if get_stats_client.cache_info().currsize:
        get_stats_client().close()
        get_stats_client.cache_clear()
