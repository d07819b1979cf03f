from __future__ import annotations

import json
from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from ewm.main import app
from ewm.stats.base import EndpointHit
from ewm.stats.factory import get_stats_client
from ewm.stats.http import HttpStatsClient


def _client(handler) -> HttpStatsClient:
    return HttpStatsClient("http://stats.test/", transport=httpx.MockTransport(handler))


def test_record_hit_posts_formatted_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    _client(handler).record_hit(
        EndpointHit(
            app="ewm-main-service",
            uri="/events/1",
            ip="10.0.0.1",
            timestamp=datetime(2030, 1, 2, 3, 4, 5),
        )
    )

    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/hit"
    assert json.loads(seen[0].content) == {
        "app": "ewm-main-service",
        "uri": "/events/1",
        "ip": "10.0.0.1",
        "timestamp": "2030-01-02 03:04:05",
    }


def test_get_stats_sends_window_and_uris():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"app": "ewm-main-service", "uri": "/events/1", "hits": 4},
                {"app": "ewm-main-service", "uri": "/events/2", "hits": 1},
            ],
        )

    rows = _client(handler).get_stats(
        datetime(2030, 1, 1, 0, 0, 0),
        datetime(2030, 1, 31, 23, 59, 59),
        ["/events/1", "/events/2"],
        unique=True,
    )

    assert [(r.uri, r.hits) for r in rows] == [("/events/1", 4), ("/events/2", 1)]
    params = seen[0].url.params
    assert seen[0].url.path == "/stats"
    assert params["start"] == "2030-01-01 00:00:00"
    assert params["end"] == "2030-01-31 23:59:59"
    assert params["unique"] == "true"
    assert params.get_list("uris") == ["/events/1", "/events/2"]


def test_get_stats_rejects_inverted_window():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ValueError):
        _client(handler).get_stats(
            datetime(2030, 1, 2), datetime(2030, 1, 1), ["/events/1"]
        )


def test_server_errors_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).get_stats(datetime(2030, 1, 1), datetime(2030, 1, 2), ["/events/1"])


def test_cached_client_is_closed_on_shutdown():
    cached = get_stats_client()
    with TestClient(app):
        pass

    assert cached._client.is_closed
    assert get_stats_client.cache_info().currsize == 0
