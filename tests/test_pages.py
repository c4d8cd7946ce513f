"""Test the server-rendered HTML pages."""

from __future__ import annotations

import pytest

from tests.conftest import create_memo, create_user


@pytest.mark.asyncio
async def test_landing(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "Simple markdown memos" in resp.text
    assert 'href="/memos"' in resp.text


@pytest.mark.asyncio
async def test_memos_page_empty(client):
    resp = await client.get("/memos")
    assert resp.status_code == 200
    assert "No memos yet." in resp.text
    assert "New memo" in resp.text
    assert 'data-api="/api/memos" data-method="POST"' in resp.text


@pytest.mark.asyncio
async def test_memos_page_lists_cards(client):
    await create_memo(client, "Shopping <list>", "- milk\n  - oat")
    resp = await client.get("/memos")
    assert "Shopping &lt;list&gt;" in resp.text
    assert '<span class="marker" aria-hidden="true">•</span>milk' in resp.text
    assert '<span class="marker" aria-hidden="true">○</span>oat' in resp.text


@pytest.mark.asyncio
async def test_memo_card_excerpt(client):
    await create_memo(client, "Long", "x" * 200)
    resp = await client.get("/memos")
    assert "x" * 150 + "..." in resp.text
    assert "x" * 151 not in resp.text


@pytest.mark.asyncio
async def test_memo_card_short_content_not_truncated(client):
    await create_memo(client, "Short", "tiny note")
    resp = await client.get("/memos")
    assert "tiny note" in resp.text
    assert "tiny note..." not in resp.text


@pytest.mark.asyncio
async def test_memos_page_edit_mode(client):
    memo = await create_memo(client, "Editable", "body text")
    resp = await client.get(f"/memos?edit={memo['id']}")
    assert resp.status_code == 200
    assert "Edit memo" in resp.text
    assert f'data-api="/api/memos/{memo["id"]}" data-method="PUT"' in resp.text
    assert 'value="Editable"' in resp.text
    assert ">body text</textarea>" in resp.text


@pytest.mark.asyncio
async def test_memos_page_edit_missing_memo_falls_back_to_new(client):
    resp = await client.get("/memos?edit=999")
    assert resp.status_code == 200
    assert "New memo" in resp.text


@pytest.mark.asyncio
async def test_memos_page_preview_mode(client):
    memo = await create_memo(client, "Preview me", "## Sub\n\n- a")
    resp = await client.get(f"/memos?edit={memo['id']}&preview=true")
    assert resp.status_code == 200
    assert '<div id="preview" class="md-preview panel" ><h2>Sub</h2>' in resp.text
    assert ">Edit</button>" in resp.text


@pytest.mark.asyncio
async def test_memo_detail(client):
    memo = await create_memo(client, "Detail", "**bold** words")
    resp = await client.get(f"/memos/{memo['id']}")
    assert resp.status_code == 200
    assert "<title>Detail - Memopad</title>" in resp.text
    assert "<p><strong>bold</strong> words</p>" in resp.text


@pytest.mark.asyncio
async def test_memo_detail_not_found(client):
    resp = await client.get("/memos/12345")
    assert resp.status_code == 404
    assert "Memo 12345 not found." in resp.text


@pytest.mark.asyncio
async def test_users_page(client):
    user = await create_user(client, "Grace", "grace@example.com")
    resp = await client.get("/users")
    assert resp.status_code == 200
    assert "Grace (grace@example.com)" in resp.text
    assert f'data-delete="/api/users/{user["id"]}"' in resp.text
    assert "Add user" in resp.text


@pytest.mark.asyncio
async def test_users_page_edit_mode(client):
    user = await create_user(client, "Heidi", "heidi@example.com")
    resp = await client.get(f"/users?edit={user['id']}")
    assert "Edit user" in resp.text
    assert 'value="heidi@example.com"' in resp.text


@pytest.mark.asyncio
async def test_users_page_empty(client):
    resp = await client.get("/users")
    assert "No users yet." in resp.text


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_robots_and_favicon(client):
    resp = await client.get("/robots.txt")
    assert "Disallow: /api/" in resp.text
    resp = await client.get("/favicon.ico")
    assert resp.headers["content-type"].startswith("image/svg+xml")


@pytest.mark.asyncio
async def test_editor_script_orders_requests_and_drops_stale_replies(client):
    resp = await client.get("/memos")
    script = resp.text
    # One request at a time, each reading the value left by the previous reply
    assert "queue = queue.then(task)" in script
    # A reply is only applied while the textarea still holds the text it was computed from
    assert "if (area.value !== sent || !result.handled) return;" in script
    # Selection is restored on the next tick, before the next queued request runs
    assert "setTimeout(function () {" in script


@pytest.mark.asyncio
async def test_editor_script_continues_lists_after_any_newline(client):
    resp = await client.get("/memos")
    assert 'area.value[caret - 1] !== "\\n"' in resp.text
    assert "insertLineBreak" not in resp.text
