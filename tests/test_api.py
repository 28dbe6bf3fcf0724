"""HTTP tests for the FastAPI app - runs the real lifespan on temp backends."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from lyntfeed.api import create_app


COOKIE = "_TOKEN__DO_NOT_SHARE"


@pytest.fixture
def client(config):
    """TestClient with the app-owned service, no credential set."""
    with TestClient(create_app(config)) as c:
        yield c


@pytest.fixture
def authed(client, token):
    """TestClient carrying a valid auth cookie."""
    client.cookies.set(COOKIE, token)
    return client


def blob_names(config) -> list[str]:
    root = Path(config.blob_root)
    if not root.exists():
        return []
    return sorted(p.name for p in root.iterdir() if not p.name.endswith(".meta.json"))


class TestHealth:
    """Test system endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCreateEndpoint:
    """Test POST /api/lynt."""

    def test_create_returns_201(self, authed):
        response = authed.post("/api/lynt", data={"content": "hello"})

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "hello"
        assert body["authorId"] == "user-1"
        assert body["isRepost"] is False
        assert body["hasImage"] is False

    def test_content_too_long(self, authed):
        response = authed.post("/api/lynt", data={"content": "a" * 281})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid content"}

    def test_content_at_limit(self, authed):
        response = authed.post("/api/lynt", data={"content": "a" * 280})
        assert response.status_code == 201

    def test_invalid_repost(self, authed):
        response = authed.post("/api/lynt", data={"content": "x", "reposted": "999"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid reposted lynt ID"}

    def test_valid_repost(self, authed):
        original = authed.post("/api/lynt", data={"content": "original"}).json()
        response = authed.post("/api/lynt", data={"content": "", "reposted": original["id"]})

        assert response.status_code == 201
        assert response.json()["isRepost"] is True
        assert response.json()["parentId"] == original["id"]

    def test_image_upload(self, authed, config, make_image):
        response = authed.post(
            "/api/lynt",
            data={"content": "pic"},
            files={"image": ("photo.png", make_image(1600, 800), "image/png")},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["hasImage"] is True
        assert blob_names(config) == [f"{body['id']}.webp"]

    def test_bad_image_is_generic_500(self, authed):
        response = authed.post(
            "/api/lynt",
            data={"content": "pic"},
            files={"image": ("photo.png", b"not an image", "image/png")},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create lynt"}

    def test_missing_auth(self, client, config):
        response = client.post("/api/lynt", data={"content": "hello"})
        assert response.status_code == 401
        assert response.json() == {"error": "Missing authentication"}

    def test_bad_auth(self, client):
        client.cookies.set(COOKIE, "garbage")
        response = client.post("/api/lynt", data={"content": "hello"})
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication failed"}


class TestReadEndpoint:
    """Test GET /api/lynt."""

    def test_read_with_chain(self, authed):
        b = authed.post("/api/lynt", data={"content": "B"}).json()
        c = authed.post("/api/lynt", data={"content": "C", "reposted": b["id"]}).json()
        d = authed.post("/api/lynt", data={"content": "D", "reposted": c["id"]}).json()

        response = authed.get("/api/lynt", params={"id": d["id"]})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == d["id"]
        assert [i["id"] for i in body["referencedLynts"]] == [b["id"]]

    def test_views_increment(self, authed):
        item = authed.post("/api/lynt", data={"content": "x"}).json()
        authed.get("/api/lynt", params={"id": item["id"]})
        response = authed.get("/api/lynt", params={"id": item["id"]})
        assert response.json()["views"] == 1

    def test_missing_id(self, authed):
        response = authed.get("/api/lynt")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing lynt ID"}

    def test_not_found(self, authed):
        response = authed.get("/api/lynt", params={"id": "123"})
        assert response.status_code == 404
        assert response.json() == {"error": "Lynt not found"}

    def test_missing_auth_leaves_views(self, authed, token):
        item = authed.post("/api/lynt", data={"content": "x"}).json()

        authed.cookies.clear()
        response = authed.get("/api/lynt", params={"id": item["id"]})
        assert response.status_code == 401

        authed.cookies.set(COOKIE, token)
        assert authed.get("/api/lynt", params={"id": item["id"]}).json()["views"] == 0


class TestUploadEndpoint:
    """Test POST /api/upload."""

    def test_upload(self, authed, config, make_image):
        response = authed.post(
            "/api/upload",
            files={"file": ("me.jpg", make_image(300, 300, fmt="JPEG"), "image/jpeg")},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "File uploaded successfully"}
        assert blob_names(config) == ["user-1"]

    def test_missing_file(self, authed):
        response = authed.post("/api/upload", data={"other": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    def test_bad_file(self, authed):
        response = authed.post(
            "/api/upload",
            files={"file": ("me.jpg", b"junk", "image/jpeg")},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "File upload failed"}

    def test_missing_auth_writes_nothing(self, client, config, make_image):
        response = client.post(
            "/api/upload",
            files={"file": ("me.png", make_image(10, 10), "image/png")},
        )
        assert response.status_code == 401
        assert blob_names(config) == []


class TestMalformedRequests:
    """Test framework validation failures use the error envelope."""

    def test_image_field_not_a_file(self, authed):
        response = authed.post("/api/lynt", data={"content": "hi", "image": "not-a-file"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input"}

    def test_upload_field_not_a_file(self, authed, config):
        response = authed.post("/api/upload", data={"file": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input"}
        assert blob_names(config) == []

    def test_body_does_not_echo_input(self, authed):
        response = authed.post("/api/lynt", data={"content": "hi", "image": "secret-value"})
        assert "secret-value" not in response.text
        assert "detail" not in response.json()

    def test_missing_auth_checked_first(self, client):
        response = client.post("/api/lynt", data={"content": "hi", "image": "not-a-file"})
        assert response.status_code == 401
        assert response.json() == {"error": "Missing authentication"}

    def test_bad_auth_checked_first(self, client):
        client.cookies.set(COOKIE, "garbage")
        response = client.post("/api/upload", data={"file": "x"})
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication failed"}


class TestRequestContext:
    """Test request id propagation."""

    def test_request_id_generated(self, client):
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 32

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    def test_error_responses_carry_request_id(self, client):
        response = client.post("/api/lynt", data={"content": "hi"})
        assert response.status_code == 401
        assert "X-Request-ID" in response.headers
