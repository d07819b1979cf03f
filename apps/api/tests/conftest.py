from __future__ import annotations

import itertools
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Point the app at a throwaway database before it is imported
os.environ.setdefault("ENV", "test")
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{Path(tempfile.gettempdir()) / 'ewm-tests.db'}"
)
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("STATS_SERVER_URL", "http://stats.invalid")

from ewm.api.deps import get_stats  # noqa: E402
from ewm.core.timeutil import format_datetime, utcnow  # noqa: E402
from ewm.db import SessionLocal, engine  # noqa: E402
from ewm.main import app  # noqa: E402
from ewm.models import Base  # noqa: E402
from ewm.stats.base import EndpointHit, StatsClient, ViewStats  # noqa: E402


class FakeStatsClient(StatsClient):
    """In-memory stand-in for the statistics service."""

    def __init__(self) -> None:
        self.hits: list[EndpointHit] = []
        self.views: dict[str, int] = {}
        self.queries: list[tuple[datetime, datetime, list[str], bool]] = []
        self.fail = False

    def record_hit(self, hit: EndpointHit) -> None:
        if self.fail:
            raise RuntimeError("stats server unavailable")
        self.hits.append(hit)

    def get_stats(self, start, end, uris, unique=False):
        self.queries.append((start, end, list(uris), unique))
        if self.fail:
            raise RuntimeError("stats server unavailable")
        return [
            ViewStats(app="ewm-main-service", uri=uri, hits=self.views[uri])
            for uri in uris
            if uri in self.views
        ]


class Api:
    """Shortcuts for building fixtures through the HTTP surface."""

    _seq = itertools.count(1)

    def __init__(self, client: TestClient) -> None:
        self.client = client

    def user(self, name: str | None = None) -> dict:
        n = next(self._seq)
        resp = self.client.post(
            "/admin/users",
            json={"name": name or f"User {n}", "email": f"user{n}@example.com"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def category(self, name: str | None = None) -> dict:
        n = next(self._seq)
        resp = self.client.post("/admin/categories", json={"name": name or f"Category {n}"})
        assert resp.status_code == 201, resp.text
        return resp.json()

    def event_payload(self, category_id: int, **overrides) -> dict:
        payload = {
            "annotation": "A long enough annotation for the event",
            "description": "A long enough description of what will happen at the event",
            "title": "Weekend hike",
            "category": category_id,
            "location": {"lat": 55.75, "lon": 37.62},
            "eventDate": in_future(days=1),
            "paid": False,
            "participantLimit": 0,
            "requestModeration": True,
        }
        payload.update(overrides)
        return payload

    def event(self, user_id: int, category_id: int | None = None, **overrides) -> dict:
        if category_id is None:
            category_id = self.category()["id"]
        resp = self.client.post(
            f"/users/{user_id}/events", json=self.event_payload(category_id, **overrides)
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def publish(self, event_id: int) -> dict:
        resp = self.client.patch(
            f"/admin/events/{event_id}", json={"stateAction": "PUBLISH_EVENT"}
        )
        assert resp.status_code == 200, resp.text
        return resp.json()

    def published_event(self, user_id: int, category_id: int | None = None, **overrides) -> dict:
        return self.publish(self.event(user_id, category_id, **overrides)["id"])

    def participate(self, user_id: int, event_id: int):
        return self.client.post(f"/users/{user_id}/requests", params={"eventId": event_id})


def in_future(**delta) -> str:
    return format_datetime(utcnow() + timedelta(**delta))


@pytest.fixture(scope="session", autouse=True)
def schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_db():
    # Ensure a clean slate for each test
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture(autouse=True)
def stats() -> FakeStatsClient:
    fake = FakeStatsClient()
    app.dependency_overrides[get_stats] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_stats, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def api(client: TestClient) -> Api:
    return Api(client)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
