"""Test user record validation and management."""

from __future__ import annotations

import pytest

from tests.conftest import JSON, create_user


@pytest.mark.asyncio
async def test_create_user(client):
    user = await create_user(client, "Ada Lovelace", "ada@example.com")
    assert isinstance(user["id"], int)
    assert user["name"] == "Ada Lovelace"
    assert user["email"] == "ada@example.com"
    assert user["created_at"]


@pytest.mark.asyncio
async def test_create_user_trims_fields(client):
    resp = await client.post(
        "/api/users", json={"name": "  Bo  ", "email": " bo@example.com "}, headers=JSON
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Bo"
    assert data["email"] == "bo@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "A", "  A  "])
async def test_create_user_short_name(client, name):
    resp = await client.post(
        "/api/users", json={"name": name, "email": "x@example.com"}, headers=JSON
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Name must be at least 2 characters"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email", ["", "plain", "no@dot", "two@@example.com", "sp ace@example.com", "@example.com"]
)
async def test_create_user_invalid_email(client, email):
    resp = await client.post("/api/users", json={"name": "Valid", "email": email}, headers=JSON)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Enter a valid email address"


@pytest.mark.asyncio
async def test_create_user_missing_fields(client):
    resp = await client.post("/api/users", json={}, headers=JSON)
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client):
    await create_user(client, "First", "same@example.com")
    resp = await client.post(
        "/api/users", json={"name": "Second", "email": "SAME@example.com"}, headers=JSON
    )
    assert resp.status_code == 409
    assert "already registered" in resp.json()["error"]

    listing = await client.get("/api/users", headers=JSON)
    assert listing.json()["total"] == 1


@pytest.mark.asyncio
async def test_list_users_in_creation_order(client):
    a = await create_user(client, "Alpha", "a@example.com")
    b = await create_user(client, "Beta", "b@example.com")
    resp = await client.get("/api/users", headers=JSON)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [u["id"] for u in data["users"]] == [a["id"], b["id"]]


@pytest.mark.asyncio
async def test_update_user(client):
    user = await create_user(client)
    resp = await client.put(
        f"/api/users/{user['id']}",
        json={"name": "Alice Smith", "email": "alice.smith@example.com"},
        headers=JSON,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Alice Smith"
    assert data["email"] == "alice.smith@example.com"
    assert data["created_at"] == user["created_at"]


@pytest.mark.asyncio
async def test_update_user_keeps_own_email(client):
    user = await create_user(client, "Carol", "carol@example.com")
    resp = await client.put(
        f"/api/users/{user['id']}",
        json={"name": "Caroline", "email": "carol@example.com"},
        headers=JSON,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Caroline"


@pytest.mark.asyncio
async def test_update_user_duplicate_email(client):
    await create_user(client, "Dan", "dan@example.com")
    eve = await create_user(client, "Eve", "eve@example.com")
    resp = await client.put(
        f"/api/users/{eve['id']}", json={"name": "Eve", "email": "dan@example.com"}, headers=JSON
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_update_user_validation(client):
    user = await create_user(client)
    resp = await client.put(
        f"/api/users/{user['id']}", json={"name": "Z", "email": "z@example.com"}, headers=JSON
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Name must be at least 2 characters"


@pytest.mark.asyncio
async def test_update_missing_user(client):
    resp = await client.put(
        "/api/users/77", json={"name": "Nobody", "email": "n@example.com"}, headers=JSON
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_invalid_user_id(client):
    resp = await client.put(
        "/api/users/abc", json={"name": "Nobody", "email": "n@example.com"}, headers=JSON
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid ID"
    resp = await client.delete("/api/users/abc", headers=JSON)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_delete_user(client):
    user = await create_user(client)
    resp = await client.delete(f"/api/users/{user['id']}", headers=JSON)
    assert resp.status_code == 200
    assert resp.json() == {"message": "User deleted"}

    resp = await client.delete(f"/api/users/{user['id']}", headers=JSON)
    assert resp.status_code == 404

    # The freed email can be registered again
    await create_user(client)


@pytest.mark.asyncio
async def test_users_markdown_listing(client):
    await create_user(client)
    resp = await client.get("/api/users")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/markdown")
    assert "alice@example.com" in resp.text
