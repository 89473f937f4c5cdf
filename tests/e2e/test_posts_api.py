"""End-to-end tests for the post and comment API."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from tally.config import Settings
from tally.interface.api.app import create_app
from tally.util.jwt import create_token
from tests.di import build_test_container


def _auth(user_id=None) -> dict[str, str]:
    token = create_token(str(user_id or uuid4()), Settings().auth)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    """Test client backed by the in-memory test container."""
    app = create_app(build_test_container())
    with TestClient(app) as test_client:
        yield test_client


def _create_post(client, headers, **body) -> dict:
    response = client.post("/posts", json={"title": "A post", "text": "body", **body}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestPosts:
    """POST/GET/DELETE /posts."""

    def test_create_requires_auth(self, client):
        response = client.post("/posts", json={"title": "x", "text": "y"})

        assert response.status_code == 401

    def test_create_rejects_post_without_body(self, client):
        response = client.post("/posts", json={"title": "x"}, headers=_auth())

        assert response.status_code == 400

    def test_list_includes_caller_votes(self, client):
        voter = uuid4()
        first = _create_post(client, _auth(), title="First")
        second = _create_post(client, _auth(), title="Second")
        client.post(
            "/vote",
            json={"resource_id": first["post_id"], "resource_type": "post", "direction": "up"},
            headers=_auth(voter),
        )

        response = client.get("/posts", params={"sort": "recent"}, headers=_auth(voter))

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 2
        votes = {p["post_id"]: p["vote"] for p in body["posts"]}
        assert votes == {first["post_id"]: "up", second["post_id"]: None}

    def test_list_rejects_bad_paging(self, client):
        assert client.get("/posts", params={"limit": 0}).status_code == 422
        assert client.get("/posts", params={"sort": "hot"}).status_code == 422

    def test_delete_is_owner_gated(self, client):
        author = uuid4()
        post = _create_post(client, _auth(author))

        forbidden = client.delete(f"/posts/{post['post_id']}", headers=_auth())
        deleted = client.delete(f"/posts/{post['post_id']}", headers=_auth(author))
        again = client.delete(f"/posts/{post['post_id']}", headers=_auth(author))

        assert forbidden.status_code == 403
        assert deleted.status_code == 200
        assert deleted.json() == {"post_id": post["post_id"], "deleted": True}
        assert again.status_code == 404
        assert client.get("/posts").json()["total"] == 0


class TestComments:
    """POST/GET /posts/{id}/comments."""

    def test_comment_thread(self, client):
        post = _create_post(client, _auth())
        parent = client.post(
            f"/posts/{post['post_id']}/comments",
            json={"text": "Parent"},
            headers=_auth(),
        )
        reply = client.post(
            f"/posts/{post['post_id']}/comments",
            json={"text": "Reply", "parent_id": parent.json()["comment_id"]},
            headers=_auth(),
        )

        listing = client.get(f"/posts/{post['post_id']}/comments")

        assert parent.status_code == 201
        assert reply.status_code == 201
        assert listing.status_code == 200
        assert listing.json()["total"] == 2
        # Both comments share the frozen test clock, so only membership is stable
        parents = {c["text"]: c["parent_id"] for c in listing.json()["comments"]}
        assert parents == {"Parent": None, "Reply": parent.json()["comment_id"]}

    def test_comments_on_missing_post(self, client):
        missing = uuid4()

        assert client.get(f"/posts/{missing}/comments").status_code == 404
        assert (
            client.post(
                f"/posts/{missing}/comments", json={"text": "hi"}, headers=_auth()
            ).status_code
            == 404
        )

    def test_malformed_post_id(self, client):
        assert client.get("/posts/not-a-uuid/comments").status_code == 400
