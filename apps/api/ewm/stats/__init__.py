from ewm.stats.base import EndpointHit, StatsClient, ViewStats
from ewm.stats.factory import close_stats_client, create_stats_client, get_stats_client

__all__ = [
    "EndpointHit",
    "StatsClient",
    "ViewStats",
    "close_stats_client",
    "create_stats_client",
    "get_stats_client",
]
