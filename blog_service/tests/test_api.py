from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from blog_service.app.main import create_app
from blog_service.app.services.posts_service import (
    get_cover_storage,
    get_post_repository,
)
from blog_service.app.services.users_service import get_user_repository


@pytest.fixture
def client(app_config, user_repo, post_repo, cover_storage) -> TestClient:
    app = create_app(app_config)
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_post_repository] = lambda: post_repo
    app.dependency_overrides[get_cover_storage] = lambda: cover_storage
    return TestClient(app)


def _auth_header(client: TestClient, username: str, password: str = "s3cret") -> dict[str, str]:
    """가입 + 로그인 후 Bearer 헤더를 돌려준다. 유저 전환을 위해 쿠키는 비운다."""

    client.post("/register", json={"username": username, "password": password})
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200
    token = response.cookies["token"]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def _create_post(client: TestClient, headers: dict[str, str], title: str = "Title") -> dict:
    response = client.post(
        "/post",
        data={"title": title, "summary": "Summary", "content": "<p>Body</p>"},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register_returns_user_without_password(client: TestClient) -> None:
    response = client.post("/register", json={"username": "alice", "password": "s3cret"})

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "alice"
    assert set(body) == {"id", "username"}


def test_register_duplicate_is_400(client: TestClient) -> None:
    client.post("/register", json={"username": "alice", "password": "s3cret"})

    response = client.post("/register", json={"username": "alice", "password": "x"})

    assert response.status_code == 400
    assert "already taken" in response.json()["detail"]


def test_login_sets_http_only_cookie_and_profile_reads_it(client: TestClient) -> None:
    client.post("/register", json={"username": "alice", "password": "s3cret"})

    login = client.post("/login", json={"username": "alice", "password": "s3cret"})

    assert login.status_code == 200
    assert login.json()["username"] == "alice"
    set_cookie = login.headers["set-cookie"]
    assert "token=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=none" in set_cookie.lower()

    profile = client.get("/profile")
    assert profile.status_code == 200
    assert profile.json()["username"] == "alice"
    assert profile.json()["id"] == login.json()["id"]


def test_login_wrong_password_is_400(client: TestClient) -> None:
    client.post("/register", json={"username": "alice", "password": "s3cret"})

    response = client.post("/login", json={"username": "alice", "password": "nope"})

    assert response.status_code == 400
    assert "token" not in response.cookies


def test_profile_without_token_is_401(client: TestClient) -> None:
    response = client.get("/profile")

    assert response.status_code == 401


def test_profile_with_invalid_token_is_401(client: TestClient) -> None:
    response = client.get("/profile", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "invalid token"


def test_logout_clears_cookie(client: TestClient) -> None:
    response = client.post("/logout")

    assert response.status_code == 200
    assert response.json() == "ok"
    assert 'token=""' in response.headers["set-cookie"] or "token=;" in response.headers["set-cookie"]


def test_create_post_requires_authentication(client: TestClient, post_repo) -> None:
    response = client.post(
        "/post",
        data={"title": "Title", "summary": "Summary", "content": "Body"},
    )

    assert response.status_code == 401
    assert post_repo.posts == {}


def test_create_post_with_cover(client: TestClient, cover_storage) -> None:
    headers = _auth_header(client, "alice")

    response = client.post(
        "/post",
        data={"title": "Title", "summary": "Summary", "content": "Body"},
        files={"file": ("cover.png", b"\x89PNG...", "image/png")},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["cover"] == "https://covers.example.com/cover.png"
    assert body["author"]["username"] == "alice"
    assert cover_storage.uploaded == ["cover.png"]


def test_create_post_missing_fields_is_400(client: TestClient) -> None:
    headers = _auth_header(client, "alice")

    response = client.post("/post", data={"title": "Only title"}, headers=headers)

    assert response.status_code == 400


def test_get_post_and_missing_post(client: TestClient) -> None:
    headers = _auth_header(client, "alice")
    created = _create_post(client, headers)

    found = client.get(f"/post/{created['id']}")
    missing = client.get("/post/64b7f0c2a1b2c3d4e5f60718")
    malformed = client.get("/post/not-an-id")

    assert found.status_code == 200
    assert found.json()["author"]["username"] == "alice"
    assert missing.status_code == 404
    assert malformed.status_code == 404


def test_list_posts_pages_with_limit(client: TestClient) -> None:
    headers = _auth_header(client, "alice")
    for i in range(12):
        _create_post(client, headers, title=f"post-{i}")

    first = client.get("/post", params={"page": 1, "limit": 5}).json()
    third = client.get("/post", params={"page": 3, "limit": 5}).json()
    beyond = client.get("/post", params={"page": 4, "limit": 5}).json()

    assert first["total"] == 12
    assert first["totalPages"] == 3
    assert first["page"] == 1
    assert len(first["posts"]) == 5
    assert len(third["posts"]) == 2
    assert beyond["posts"] == []
    assert beyond["totalPages"] == 3


def test_list_posts_uses_default_limit(client: TestClient) -> None:
    headers = _auth_header(client, "alice")
    for i in range(11):
        _create_post(client, headers, title=f"post-{i}")

    body = client.get("/post").json()

    assert len(body["posts"]) == 10
    assert body["totalPages"] == 2


def test_list_posts_rejects_page_zero(client: TestClient) -> None:
    response = client.get("/post", params={"page": 0})

    assert response.status_code == 422


def test_update_post_by_author(client: TestClient) -> None:
    headers = _auth_header(client, "alice")
    created = _create_post(client, headers)

    response = client.put(
        "/post",
        data={
            "id": created["id"],
            "title": "Edited",
            "summary": "New summary",
            "content": "New body",
        },
        headers=headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["title"] == "Edited"
    assert response.json()["author"]["id"] == created["author"]["id"]


def test_update_post_by_other_user_is_403(client: TestClient, cover_storage) -> None:
    alice = _auth_header(client, "alice")
    bob = _auth_header(client, "bob")
    created = _create_post(client, alice)

    response = client.put(
        "/post",
        data={"id": created["id"], "title": "Hijack", "summary": "s", "content": "c"},
        files={"file": ("cover.png", b"img", "image/png")},
        headers=bob,
    )

    assert response.status_code == 403
    assert cover_storage.uploaded == []


def test_update_missing_post_is_404(client: TestClient) -> None:
    headers = _auth_header(client, "alice")

    response = client.put(
        "/post",
        data={"id": "64b7f0c2a1b2c3d4e5f60718", "title": "t", "summary": "s", "content": "c"},
        headers=headers,
    )

    assert response.status_code == 404


def test_delete_post_flow(client: TestClient, post_repo) -> None:
    alice = _auth_header(client, "alice")
    bob = _auth_header(client, "bob")
    created = _create_post(client, alice)

    assert client.delete(f"/post/{created['id']}").status_code == 401
    assert client.delete(f"/post/{created['id']}", headers=bob).status_code == 403

    response = client.delete(f"/post/{created['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert post_repo.posts == {}

    again = client.delete(f"/post/{created['id']}", headers=alice)
    assert again.status_code == 404


def test_responses_carry_request_id(client: TestClient) -> None:
    response = client.get("/post", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"


def test_list_posts_with_huge_page_is_empty(client: TestClient) -> None:
    headers = _auth_header(client, "alice")
    _create_post(client, headers)

    response = client.get("/post", params={"page": 10**18, "limit": 100})

    assert response.status_code == 200
    assert response.json()["posts"] == []
    assert response.json()["totalPages"] == 1
