"""Test the editor and preview endpoints used by the memo editor page."""

from __future__ import annotations

import pytest

from tests.conftest import JSON


@pytest.mark.asyncio
async def test_change_continues_bullet(client):
    resp = await client.post(
        "/api/editor/change", json={"text": "- first\n", "cursor": 8}, headers=JSON
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "text": "- first\n- ",
        "selection_start": 10,
        "selection_end": 10,
        "handled": True,
    }


@pytest.mark.asyncio
async def test_change_passthrough(client):
    resp = await client.post("/api/editor/change", json={"text": "plain", "cursor": 5}, headers=JSON)
    data = resp.json()
    assert data["text"] == "plain"
    assert data["selection_start"] == 5
    assert data["handled"] is False


@pytest.mark.asyncio
async def test_keydown_tab(client):
    resp = await client.post(
        "/api/editor/keydown",
        json={"text": "- a\n- b", "selection_start": 7, "selection_end": 7},
        headers=JSON,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["text"] == "- a\n  - b"
    assert (data["selection_start"], data["selection_end"]) == (9, 9)
    assert data["handled"] is True


@pytest.mark.asyncio
async def test_keydown_shift_tab(client):
    resp = await client.post(
        "/api/editor/keydown",
        json={"text": "  - b", "selection_start": 5, "shift": True},
        headers=JSON,
    )
    data = resp.json()
    assert data["text"] == "- b"
    assert data["selection_start"] == 3


@pytest.mark.asyncio
async def test_keydown_other_key(client):
    resp = await client.post(
        "/api/editor/keydown",
        json={"text": "abc", "selection_start": 1, "selection_end": 2, "key": "a"},
        headers=JSON,
    )
    data = resp.json()
    assert data["text"] == "abc"
    assert (data["selection_start"], data["selection_end"]) == (1, 2)
    assert data["handled"] is False


@pytest.mark.asyncio
async def test_keydown_bad_payload(client):
    resp = await client.post(
        "/api/editor/keydown", json={"text": "abc", "selection_start": "x"}, headers=JSON
    )
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_preview(client):
    resp = await client.post(
        "/api/preview", json={"content": "# Title\n\n- a\n  - b\n"}, headers=JSON
    )
    assert resp.status_code == 200
    data = resp.json()
    assert "<h1>Title</h1>" in data["html"]
    assert '<span class="marker" aria-hidden="true">○</span>' in data["html"]
    assert data["text"].startswith("Title\n\n• a")


@pytest.mark.asyncio
async def test_preview_empty(client):
    resp = await client.post("/api/preview", json={}, headers=JSON)
    assert resp.json() == {"html": "", "text": ""}


@pytest.mark.asyncio
async def test_preview_markdown_body(client):
    resp = await client.post(
        "/api/preview",
        content="**bold**".encode(),
        headers={**JSON, "Content-Type": "text/markdown"},
    )
    assert resp.json()["html"] == "<p><strong>bold</strong></p>"
