from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy import update

from ewm.core.timeutil import utcnow
from ewm.models import Comment


def test_health_and_request_id(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_user_admin(client: TestClient):
    resp = client.post("/admin/users", json={"name": "Ada Lovelace", "email": "ada@example.com"})
    assert resp.status_code == 201
    ada = resp.json()
    assert ada["email"] == "ada@example.com"

    dup = client.post("/admin/users", json={"name": "Ada Again", "email": "ADA@example.com"})
    assert dup.status_code == 409
    assert dup.json()["code"] == "EMAIL_ALREADY_EXISTS"

    bad = client.post("/admin/users", json={"name": "No Mail", "email": "not-an-email"})
    assert bad.status_code == 400

    alan = client.post(
        "/admin/users", json={"name": "Alan Turing", "email": "alan@example.com"}
    ).json()

    listed = client.get("/admin/users", params={"ids": [alan["id"], ada["id"]]})
    assert [u["id"] for u in listed.json()] == [alan["id"], ada["id"]]

    page = client.get("/admin/users", params={"from": 1, "size": 1})
    assert [u["id"] for u in page.json()] == [alan["id"]]

    assert client.delete(f"/admin/users/{ada['id']}").status_code == 204
    assert client.delete(f"/admin/users/{ada['id']}").status_code == 404


def test_categories(client: TestClient, api):
    resp = client.post("/admin/categories", json={"name": "Concerts"})
    assert resp.status_code == 201
    concerts = resp.json()

    dup = client.post("/admin/categories", json={"name": "concerts"})
    assert dup.status_code == 409
    assert dup.json()["code"] == "CATEGORY_NAME_EXISTS"

    assert client.post("/admin/categories", json={"name": "   "}).status_code == 400

    renamed = client.patch(f"/admin/categories/{concerts['id']}", json={"name": "Live music"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Live music"

    assert client.get(f"/categories/{concerts['id']}").json()["name"] == "Live music"
    assert [c["id"] for c in client.get("/categories").json()] == [concerts["id"]]
    assert client.get("/categories/999999").status_code == 404

    api.event(api.user()["id"], concerts["id"])
    in_use = client.delete(f"/admin/categories/{concerts['id']}")
    assert in_use.status_code == 409
    assert in_use.json()["code"] == "CATEGORY_IN_USE"

    empty = api.category()
    assert client.delete(f"/admin/categories/{empty['id']}").status_code == 204
    assert client.get(f"/categories/{empty['id']}").status_code == 404


def test_comment_moderation_flow(client: TestClient, api):
    owner = api.user()
    reader = api.user()
    draft = api.event(owner["id"])

    on_draft = client.post(
        f"/users/{reader['id']}/comments",
        params={"eventId": draft["id"]},
        json={"text": "Is this event happening?"},
    )
    assert on_draft.status_code == 409

    event = api.published_event(owner["id"])
    resp = client.post(
        f"/users/{reader['id']}/comments",
        params={"eventId": event["id"]},
        json={"text": "Count me in, sounds great"},
    )
    assert resp.status_code == 201
    comment = resp.json()
    assert comment["state"] == "PENDING"
    assert comment["author"] == reader["name"]
    assert comment["eventId"] == event["id"]

    assert client.get(f"/events/{event['id']}/comments").json() == []
    pending = client.get("/admin/comments").json()
    assert [c["id"] for c in pending] == [comment["id"]]

    assert (
        client.patch(f"/admin/comments/{comment['id']}", params={"status": "PENDING"}).status_code
        == 400
    )
    published = client.patch(f"/admin/comments/{comment['id']}", params={"status": "PUBLISHED"})
    assert published.status_code == 200
    assert published.json()["state"] == "PUBLISHED"

    again = client.patch(f"/admin/comments/{comment['id']}", params={"status": "REJECTED"})
    assert again.status_code == 409

    public = client.get(f"/events/{event['id']}/comments").json()
    assert [c["id"] for c in public] == [comment["id"]]

    reply = client.post(
        f"/users/{owner['id']}/comments",
        params={"eventId": event["id"]},
        json={"text": "See you there then!", "parentComment": comment["id"]},
    )
    assert reply.status_code == 201
    assert reply.json()["parentComment"] == comment["id"]

    mine = client.get(f"/users/{reader['id']}/comments").json()
    assert [c["id"] for c in mine] == [comment["id"]]


def test_only_author_deletes_comment(client: TestClient, api):
    owner = api.user()
    reader = api.user()
    event = api.published_event(owner["id"])
    comment = client.post(
        f"/users/{reader['id']}/comments",
        params={"eventId": event["id"]},
        json={"text": "A comment worth keeping"},
    ).json()

    resp = client.delete(f"/users/{owner['id']}/comments/{comment['id']}")
    assert resp.status_code == 409
    assert resp.json()["code"] == "NOT_AUTHOR"

    assert client.delete(f"/users/{reader['id']}/comments/{comment['id']}").status_code == 204
    assert client.delete(f"/users/{reader['id']}/comments/{comment['id']}").status_code == 404


def test_unknown_route_uses_error_payload(client: TestClient):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    body = resp.json()
    assert body["status"] == "NOT_FOUND"
    assert body["reason"] == "The required object was not found."


def _comment(client: TestClient, user_id: int, event_id: int, text: str) -> dict:
    resp = client.post(
        f"/users/{user_id}/comments", params={"eventId": event_id}, json={"text": text}
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_author_edits_published_comment(client: TestClient, api):
    owner = api.user()
    reader = api.user()
    event = api.published_event(owner["id"])
    comment = _comment(client, reader["id"], event["id"], "First take on the event")
    url = f"/users/{reader['id']}/comments/{comment['id']}"

    pending = client.patch(url, json={"text": "Edited while still queued"})
    assert pending.status_code == 409
    assert pending.json()["code"] == "COMMENT_NOT_EDITABLE"

    client.patch(f"/admin/comments/{comment['id']}", params={"status": "PUBLISHED"})

    stranger = client.patch(
        f"/users/{owner['id']}/comments/{comment['id']}", json={"text": "Not your words to change"}
    )
    assert stranger.status_code == 409
    assert stranger.json()["code"] == "NOT_AUTHOR"

    assert client.patch(url, json={"text": "short"}).status_code == 400
    assert (
        client.patch(
            f"/users/{reader['id']}/comments/999999", json={"text": "Nothing to edit here"}
        ).status_code
        == 404
    )

    resp = client.patch(url, json={"text": "Second take, with more detail"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["text"] == "Second take, with more detail"
    assert body["edited"] is True
    assert body["updateDate"] is not None
    assert body["state"] == "PUBLISHED"


def test_comment_edit_window_expires(client: TestClient, api, db_session):
    owner = api.user()
    reader = api.user()
    event = api.published_event(owner["id"])
    comment = _comment(client, reader["id"], event["id"], "Written a long time ago")
    client.patch(f"/admin/comments/{comment['id']}", params={"status": "PUBLISHED"})

    db_session.execute(
        update(Comment)
        .where(Comment.id == comment["id"])
        .values(created_at=utcnow() - timedelta(hours=25))
    )
    db_session.commit()

    resp = client.patch(
        f"/users/{reader['id']}/comments/{comment['id']}", json={"text": "Too late to reword"}
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "COMMENT_NOT_EDITABLE"


def test_public_comment_by_id(client: TestClient, api):
    owner = api.user()
    reader = api.user()
    event = api.published_event(owner["id"])
    visible = _comment(client, reader["id"], event["id"], "This one gets approved")
    hidden = _comment(client, reader["id"], event["id"], "This one is still queued")
    client.patch(f"/admin/comments/{visible['id']}", params={"status": "PUBLISHED"})

    resp = client.get(f"/comments/{visible['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == visible["id"]
    assert resp.json()["author"] == reader["name"]

    assert client.get(f"/comments/{hidden['id']}").status_code == 404
    assert client.get("/comments/999999").status_code == 404


def test_user_list_accepts_comma_joined_ids(client: TestClient, api):
    first = api.user()
    second = api.user()
    api.user()

    resp = client.get("/admin/users", params={"ids": f"{second['id']},{first['id']}"})
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [second["id"], first["id"]]

    assert client.get("/admin/users", params={"ids": "1,two"}).status_code == 400
