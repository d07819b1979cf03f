from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class EndpointHit:
    app: str
    uri: str
    ip: str
    timestamp: datetime


@dataclass(frozen=True)
class ViewStats:
    app: str
    uri: str
    hits: int


class StatsClient(ABC):
    @abstractmethod
    def record_hit(self, hit: EndpointHit) -> None:
        """Send one hit to the statistics service."""

    @abstractmethod
    def get_stats(
        self,
        start: datetime,
        end: datetime,
        uris: list[str],
        unique: bool = False,
    ) -> list[ViewStats]:
        """Return hit counts per uri for the [start, end] window."""

    def close(self) -> None:
        """Release connections held by the client."""
