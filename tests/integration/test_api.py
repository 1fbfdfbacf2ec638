"""
End-to-end tests over the HTTP surface.

Each test gets a fresh database; requests run through the full app with one
session per request.
"""

import uuid

import pytest
from httpx import AsyncClient


async def _signup(client: AsyncClient, username: str) -> dict:
    """Register and log in; return auth headers."""
    r = await client.post(
        "/api/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": "secret123"},
    )
    assert r.status_code == 201, r.text
    login = await client.post(
        "/api/auth/login",
        json={"username": username, "password": "secret123"},
    )
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['accessToken']}"}


async def _project(client: AsyncClient, headers: dict, **overrides) -> dict:
    body = {
        "title": "Portfolio site",
        "description": "A personal site built with FastAPI",
        "tags": ["Python", "web"],
        "repoUrl": "https://github.com/example/site",
        **overrides,
    }
    r = await client.post("/api/projects", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# --- Auth ---


@pytest.mark.asyncio
async def test_register_response_shape(client: AsyncClient):
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )

    assert r.status_code == 201
    data = r.json()
    assert data["message"] == "User registered successfully."
    assert data["user"]["username"] == "alice"
    assert data["userId"] == data["user"]["id"]
    assert "createdAt" in data["user"]
    assert "password" not in r.text
    assert "passwordHash" not in data["user"]


@pytest.mark.asyncio
async def test_register_duplicate_is_conflict(client: AsyncClient):
    await _signup(client, "alice")
    r = await client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "new@example.com", "password": "secret123"},
    )

    assert r.status_code == 409
    assert r.json() == {"detail": "Username or Email already exists.", "code": "conflict"}


@pytest.mark.asyncio
async def test_register_rejects_bad_input_with_400(client: AsyncClient):
    r = await client.post(
        "/api/auth/register",
        json={"username": "al", "email": "not-an-email", "password": "123"},
    )

    assert r.status_code == 400
    body = r.json()
    assert body["code"] == "validation_error"
    assert {e["field"] for e in body["errors"]} == {"username", "email", "password"}


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client: AsyncClient):
    await _signup(client, "alice")

    wrong_password = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "nope-nope"}
    )
    unknown_user = await client.post(
        "/api/auth/login", json={"username": "mallory", "password": "secret123"}
    )

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


@pytest.mark.asyncio
async def test_me_and_logout(client: AsyncClient):
    headers = await _signup(client, "alice")

    me = await client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"

    logout = await client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully."


@pytest.mark.asyncio
async def test_protected_routes_need_a_valid_token(client: AsyncClient):
    missing = await client.get("/api/auth/me")
    assert missing.status_code == 401
    assert missing.headers["www-authenticate"] == "Bearer"
    assert missing.json()["code"] == "unauthenticated"

    bad = await client.post(
        "/api/projects",
        json={"title": "Whatever", "description": "Whatever you like"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert bad.status_code == 401


# --- Projects and forums ---


@pytest.mark.asyncio
async def test_project_lifecycle(client: AsyncClient):
    alice = await _signup(client, "alice")
    bob = await _signup(client, "bob")

    project = await _project(client, alice)
    assert project["owner"]["username"] == "alice"
    assert project["tags"] == ["python", "web"]
    assert project["repoUrl"] == "https://github.com/example/site"
    assert project["likesCount"] == 0
    project_id = project["id"]

    fetched = await client.get(f"/api/projects/{project_id}")
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Portfolio site"

    forbidden = await client.put(
        f"/api/projects/{project_id}", json={"title": "Hijacked"}, headers=bob
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Forbidden: You are not the owner of this project."

    updated = await client.put(
        f"/api/projects/{project_id}",
        json={"title": "Renamed site", "liveUrl": "https://example.com"},
        headers=alice,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Renamed site"
    assert updated.json()["liveUrl"] == "https://example.com"
    assert updated.json()["description"] == project["description"]

    assert (await client.delete(f"/api/projects/{project_id}", headers=bob)).status_code == 403
    deleted = await client.delete(f"/api/projects/{project_id}", headers=alice)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/projects/{project_id}")).status_code == 404
    assert (await client.delete(f"/api/projects/{project_id}", headers=alice)).status_code == 404


@pytest.mark.asyncio
async def test_create_project_validation(client: AsyncClient):
    alice = await _signup(client, "alice")

    r = await client.post(
        "/api/projects",
        json={"title": "ab", "description": "short", "repoUrl": "nope"},
        headers=alice,
    )

    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"title", "description", "repo_url"}


@pytest.mark.asyncio
async def test_update_with_no_allowed_field_is_400(client: AsyncClient):
    alice = await _signup(client, "alice")
    project = await _project(client, alice)

    r = await client.put(f"/api/projects/{project['id']}", json={}, headers=alice)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_malformed_and_unknown_ids(client: AsyncClient):
    assert (await client.get("/api/projects/not-a-uuid")).status_code == 400
    assert (await client.get(f"/api/forums/{uuid.uuid4()}")).status_code == 404


@pytest.mark.asyncio
async def test_listing_paginates(client: AsyncClient):
    alice = await _signup(client, "alice")
    for i in range(12):
        r = await client.post(
            "/api/forums",
            json={"title": f"Forum {i}", "description": "A place to talk"},
            headers=alice,
        )
        assert r.status_code == 201

    page = await client.get("/api/forums", params={"page": 2, "limit": 5})
    assert page.status_code == 200
    body = page.json()
    assert len(body["data"]) == 5
    assert body["meta"] == {"currentPage": 2, "totalPages": 3, "total": 12, "limit": 5}

    assert (await client.get("/api/forums", params={"limit": 0})).status_code == 400


@pytest.mark.asyncio
async def test_like_toggle(client: AsyncClient):
    alice = await _signup(client, "alice")
    bob = await _signup(client, "bob")
    forum = (
        await client.post(
            "/api/forums",
            json={"title": "General", "description": "Talk about anything"},
            headers=alice,
        )
    ).json()

    liked = await client.post(f"/api/forums/{forum['id']}/like", headers=bob)
    assert liked.status_code == 200
    assert liked.json() == {"message": "Forum liked", "state": "liked", "liked": True, "likesCount": 1}

    fetched = (await client.get(f"/api/forums/{forum['id']}")).json()
    assert fetched["likesCount"] == 1
    assert len(fetched["likes"]) == 1

    unliked = await client.post(f"/api/forums/{forum['id']}/like", headers=bob)
    assert unliked.json()["state"] == "unliked"
    assert unliked.json()["likesCount"] == 0

    assert (await client.post(f"/api/forums/{forum['id']}/like")).status_code == 401


# --- Comments ---


@pytest.mark.asyncio
async def test_comment_flow(client: AsyncClient):
    alice = await _signup(client, "alice")
    bob = await _signup(client, "bob")
    project = await _project(client, alice)

    created = await client.post(
        "/api/comments",
        json={"content": "Great work", "projectId": project["id"]},
        headers=bob,
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["parentKind"] == "project"
    assert comment["projectId"] == project["id"]
    assert comment["forumId"] is None
    assert comment["author"]["username"] == "bob"

    listed = await client.get("/api/comments", params={"projectId": project["id"]})
    assert listed.status_code == 200
    assert [c["content"] for c in listed.json()] == ["Great work"]

    not_author = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "Edited"}, headers=alice
    )
    assert not_author.status_code == 403

    edited = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "Great work!"}, headers=bob
    )
    assert edited.status_code == 200
    assert edited.json()["content"] == "Great work!"

    assert (await client.delete(f"/api/comments/{comment['id']}", headers=alice)).status_code == 403
    assert (await client.delete(f"/api/comments/{comment['id']}", headers=bob)).status_code == 204
    assert (await client.get("/api/comments", params={"projectId": project["id"]})).json() == []


@pytest.mark.asyncio
async def test_comment_parent_rules(client: AsyncClient):
    alice = await _signup(client, "alice")

    neither = await client.post("/api/comments", json={"content": "hi"}, headers=alice)
    assert neither.status_code == 400

    both = await client.post(
        "/api/comments",
        json={"content": "hi", "projectId": str(uuid.uuid4()), "forumId": str(uuid.uuid4())},
        headers=alice,
    )
    assert both.status_code == 400

    missing = await client.post(
        "/api/comments", json={"content": "hi", "forumId": str(uuid.uuid4())}, headers=alice
    )
    assert missing.status_code == 404

    assert (await client.get("/api/comments")).status_code == 400


@pytest.mark.asyncio
async def test_deleting_parent_removes_its_comments(client: AsyncClient):
    alice = await _signup(client, "alice")
    bob = await _signup(client, "bob")
    project = await _project(client, alice)
    await client.post(
        "/api/comments", json={"content": "First!", "projectId": project["id"]}, headers=bob
    )

    assert (await client.delete(f"/api/projects/{project['id']}", headers=alice)).status_code == 204

    listed = await client.get("/api/comments", params={"projectId": project["id"]})
    assert listed.status_code == 200
    assert listed.json() == []


# --- Tags and search ---


@pytest.mark.asyncio
async def test_tags_and_search(client: AsyncClient):
    alice = await _signup(client, "alice")
    await _project(client, alice, title="Rustacean toolkit", tags=["Rust", "cli"])
    await _project(client, alice, title="Another site", description="Nothing about that language")

    tags = await client.get("/api/tags")
    assert tags.status_code == 200
    assert tags.json() == ["cli", "python", "rust", "web"]

    r = await client.get("/api/search", params={"query": "rustacean"})
    assert r.status_code == 200
    body = r.json()
    assert body["query"] == "rustacean"
    assert body["results"]["projects"]["total"] == 1
    hit = body["results"]["projects"]["data"][0]
    assert hit["title"] == "Rustacean toolkit"
    assert hit["score"] == 3.0
    assert body["results"]["forums"]["data"] == []
    assert body["meta"] == {"requestedPage": 1, "requestedLimit": 10, "totalApproximateResults": 1}

    assert (await client.get("/api/search")).status_code == 400
    assert (await client.get("/api/search", params={"query": "  "})).status_code == 400


# --- Service info ---


@pytest.mark.asyncio
async def test_health_and_request_id(client: AsyncClient):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.headers["x-request-id"]

    echoed = await client.get("/", headers={"X-Request-ID": "abc-123"})
    assert echoed.headers["x-request-id"] == "abc-123"


@pytest.mark.asyncio
async def test_unknown_route_and_method_keep_error_shape(client: AsyncClient):
    missing = await client.get("/api/nowhere", headers={"X-Request-ID": "req-404"})
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Not Found"}
    assert missing.headers["x-request-id"] == "req-404"

    wrong_method = await client.patch("/api/projects")
    assert wrong_method.status_code == 405
    assert wrong_method.headers["x-request-id"]


@pytest.mark.asyncio
async def test_overlong_fields_are_400(client: AsyncClient):
    headers = await _signup(client, "alice")
    body = {
        "title": "t" * 201,
        "description": "A personal site built with FastAPI",
        "liveUrl": "https://example.com/" + "a" * 2048,
    }
    r = await client.post("/api/projects", json=body, headers=headers)
    assert r.status_code == 400
    fields = {error["field"] for error in r.json()["errors"]}
    assert fields == {"title", "live_url"}
