"""Browser-facing pages: landing, memo editor, memo view and user management."""

from __future__ import annotations

import html
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from memopad.config import settings
from memopad.database import get_db_session
from memopad.preview import render_markdown
from memopad.services.memos import get_memo, list_memos
from memopad.services.users import get_user, list_users

router = APIRouter()


_CSS = """\
  body {
    font-family: Verdana, Geneva, sans-serif;
    font-size: 10pt;
    background: #eef2ff;
    color: #1f2937;
    margin: 0;
    padding: 0;
  }
  .container {
    max-width: 1000px;
    margin: 0 auto;
  }
  .header {
    background: #fff;
    border-bottom: 1px solid #e5e7eb;
    padding: 8px 14px;
    display: flex;
    align-items: center;
    justify-content: space-between;
  }
  .header .title {
    font-weight: bold;
    font-size: 13pt;
    color: #4f46e5;
    text-decoration: none;
  }
  .header nav a {
    color: #4b5563;
    text-decoration: none;
    margin-left: 12px;
  }
  .header nav a.active {
    color: #111827;
    font-weight: bold;
  }
  .columns {
    display: grid;
    grid-template-columns: 1fr 1fr;
    gap: 16px;
    padding: 16px 14px;
  }
  .panel {
    background: #fff;
    border: 1px solid #e5e7eb;
    border-radius: 6px;
    padding: 14px;
  }
  .panel h2 {
    font-size: 11pt;
    margin: 0 0 10px 0;
  }
  label {
    display: block;
    font-size: 9pt;
    color: #374151;
    margin: 8px 0 3px 0;
  }
  input[type=text], input[type=email], textarea {
    width: 100%;
    box-sizing: border-box;
    padding: 6px;
    border: 1px solid #d1d5db;
    border-radius: 4px;
    font-size: 10pt;
  }
  textarea {
    min-height: 300px;
    font-family: monospace;
  }
  button, .button {
    padding: 5px 12px;
    border: none;
    border-radius: 4px;
    background: #4f46e5;
    color: #fff;
    cursor: pointer;
    font-size: 9pt;
    text-decoration: none;
  }
  button.secondary, .button.secondary {
    background: #e5e7eb;
    color: #374151;
  }
  button.link {
    background: none;
    color: #4f46e5;
    padding: 0;
  }
  button.danger {
    background: none;
    color: #dc2626;
  }
  .row {
    display: flex;
    justify-content: space-between;
    align-items: center;
  }
  .actions {
    margin-top: 10px;
    display: flex;
    gap: 6px;
  }
  .card {
    background: #fff;
    border: 1px solid #e5e7eb;
    border-radius: 6px;
    padding: 10px 12px;
    margin-bottom: 10px;
  }
  .card h3 {
    margin: 0 0 6px 0;
    font-size: 11pt;
  }
  .card h3 a {
    color: #111827;
    text-decoration: none;
  }
  .card .excerpt {
    max-height: 8em;
    overflow: hidden;
    color: #4b5563;
  }
  .muted {
    color: #6b7280;
    font-size: 8pt;
  }
  .empty {
    text-align: center;
    color: #6b7280;
    padding: 20px 0;
  }
  .error {
    background: #fee2e2;
    border: 1px solid #f87171;
    color: #b91c1c;
    padding: 8px 12px;
    border-radius: 4px;
    margin: 16px 14px 0 14px;
    position: relative;
  }
  .error[hidden] {
    display: none;
  }
  .error button {
    position: absolute;
    top: 4px;
    right: 6px;
    background: none;
    color: #b91c1c;
  }
  .hero {
    text-align: center;
    padding: 60px 14px;
  }
  .hero h1 {
    font-size: 20pt;
    color: #111827;
  }
  .hero p {
    color: #4b5563;
    line-height: 1.6;
  }
  ul.people {
    list-style: none;
    padding: 0;
    margin: 0;
  }
  ul.people li {
    border: 1px solid #e5e7eb;
    border-radius: 4px;
    padding: 8px 10px;
    margin-bottom: 6px;
    background: #fff;
  }
  @media (max-width: 700px) {
    .columns {
      grid-template-columns: 1fr;
    }
  }"""

_MD_CSS = """\
  .md-preview { line-height: 1.6; min-height: 300px; }
  .md-preview h1 { font-size: 16pt; margin: 0 0 12px 0; }
  .md-preview h2 { font-size: 13pt; margin: 0 0 10px 0; }
  .md-preview h3 { font-size: 11pt; margin: 0 0 8px 0; }
  .md-preview p { margin: 0 0 12px 0; }
  .md-preview ul.bullets { list-style: none; padding-left: 24px; margin: 0 0 12px 0; }
  .md-preview ul.bullets > li { position: relative; margin-bottom: 3px; }
  .md-preview ul.bullets > li > .marker { position: absolute; left: -16px; }
  .md-preview ol.numbers { list-style: decimal; padding-left: 24px; margin: 0 0 12px 0; }
  .md-preview code.inline { background: #f3f4f6; border-radius: 3px; padding: 1px 4px; }
  .md-preview pre { background: #f3f4f6; padding: 12px; border-radius: 4px;
                    overflow-x: auto; margin: 0 0 12px 0; }
  .md-preview blockquote { border-left: 4px solid #d1d5db; padding-left: 12px;
                           font-style: italic; margin: 0 0 12px 0; }
  .md-preview table { border-collapse: collapse; margin: 0 0 12px 0; }
  .md-preview th, .md-preview td { border: 1px solid #d1d5db; padding: 3px 8px; }
"""

# Binds forms, delete buttons, the preview toggle and the markdown textarea to the
# JSON API. Selection changes wait for the next tick so the new value is in place.
_PAGE_JS = """\
(function () {
  const JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"};
  const errorBox = document.getElementById("error");

  function showError(message) {
    errorBox.querySelector("p").textContent = message;
    errorBox.hidden = false;
  }
  errorBox.querySelector("button").addEventListener("click", function () {
    errorBox.hidden = true;
  });

  async function call(method, url, body) {
    const resp = await fetch(url, {
      method: method,
      headers: JSON_HEADERS,
      body: body === undefined ? undefined : JSON.stringify(body),
    });
    const data = await resp.json().catch(function () { return {}; });
    if (!resp.ok) {
      throw new Error(data.error || "Request failed");
    }
    return data;
  }

  document.querySelectorAll("form[data-api]").forEach(function (form) {
    form.addEventListener("submit", async function (e) {
      e.preventDefault();
      const body = Object.fromEntries(new FormData(form).entries());
      try {
        await call(form.dataset.method, form.dataset.api, body);
        window.location = form.dataset.done;
      } catch (err) {
        showError(err.message);
      }
    });
  });

  document.querySelectorAll("button[data-delete]").forEach(function (button) {
    button.addEventListener("click", async function () {
      if (!confirm("Delete this record?")) return;
      button.disabled = true;
      try {
        await call("DELETE", button.dataset.delete);
        window.location.reload();
      } catch (err) {
        showError(err.message);
        button.disabled = false;
      }
    });
  });

  const area = document.querySelector("textarea[data-editor]");
  if (!area) return;

  // Editor requests run one at a time, each on the value left by the previous one
  let queue = Promise.resolve();
  function enqueue(task) {
    queue = queue.then(task).catch(function (err) { showError(err.message); });
  }

  async function runEngine(url, payload) {
    const sent = area.value;
    const result = await call("POST", url, payload(sent));
    // Anything typed while the request was in flight wins over a stale reply
    if (area.value !== sent || !result.handled) return;
    area.value = result.text;
    await new Promise(function (resolve) {
      setTimeout(function () {
        area.selectionStart = result.selection_start;
        area.selectionEnd = result.selection_end;
        resolve();
      }, 0);
    });
  }

  area.addEventListener("input", function () {
    const caret = area.selectionStart;
    if (caret === 0 || area.value[caret - 1] !== "\\n") return;
    enqueue(function () {
      return runEngine("/api/editor/change", function (text) {
        return {text: text, cursor: area.selectionStart};
      });
    });
  });

  area.addEventListener("keydown", function (e) {
    if (e.key !== "Tab") return;
    e.preventDefault();
    const shift = e.shiftKey;
    enqueue(function () {
      return runEngine("/api/editor/keydown", function (text) {
        return {
          text: text,
          selection_start: area.selectionStart,
          selection_end: area.selectionEnd,
          key: "Tab",
          shift: shift,
        };
      });
    });
  });

  const toggle = document.getElementById("preview-toggle");
  const preview = document.getElementById("preview");
  toggle.addEventListener("click", async function () {
    if (preview.hidden) {
      const result = await call("POST", "/api/preview", {content: area.value});
      preview.innerHTML = result.html;
      preview.hidden = false;
      area.hidden = true;
      toggle.textContent = "Edit";
    } else {
      preview.hidden = true;
      area.hidden = false;
      toggle.textContent = "Preview";
    }
  });
})();
"""


def _page(title: str, body: str, active: str = "") -> str:
    def nav(href: str, label: str) -> str:
        cls = ' class="active"' if href == active else ""
        return f'<a href="{href}"{cls}>{label}</a>'

    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{html.escape(title)}</title>
<link rel="icon" href="/favicon.ico" type="image/svg+xml">
<style>{_CSS}
{_MD_CSS}</style>
</head>
<body>
<div class="container">
<div class="header">
  <a class="title" href="/">Memopad</a>
  <nav>{nav("/memos", "memos")}{nav("/users", "users")}</nav>
</div>
<div id="error" class="error" role="alert" hidden><p></p><button type="button">&times;</button></div>
{body}
</div>
<script>{_PAGE_JS}</script>
</body>
</html>"""


def _format_time(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M")


def _excerpt(content: str) -> str:
    limit = settings.memo_preview_length
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


def _render_landing() -> str:
    body = """\
<div class="hero">
  <h1>Simple markdown memos</h1>
  <p>
    Keep your ideas tidy. Write memos in markdown, preview them as you go,
    and manage the people you share them with.
  </p>
  <a class="button" href="/memos">Write a memo &rarr;</a>
</div>"""
    return _page("Memopad", body)


def _render_memo_card(memo: dict) -> str:
    mid = memo["id"]
    return f"""\
<div class="card">
  <h3><a href="/memos/{mid}">{html.escape(memo["title"])}</a></h3>
  <div class="excerpt md-preview">{render_markdown(_excerpt(memo["content"]))}</div>
  <div class="row">
    <span class="muted">{_format_time(memo["updated_at"])}</span>
    <span class="actions">
      <a class="button secondary" href="/memos?edit={mid}">Edit</a>
      <button type="button" class="danger" data-delete="/api/memos/{mid}">Delete</button>
    </span>
  </div>
</div>"""


def _render_memos(memos: list[dict], editing: dict | None, preview: bool) -> str:
    if editing:
        heading = "Edit memo"
        api, method, submit = f"/api/memos/{editing['id']}", "PUT", "Update"
        title, content = editing["title"], editing["content"]
        cancel = '<a class="button secondary" href="/memos">Cancel</a>'
    else:
        heading = "New memo"
        api, method, submit = "/api/memos", "POST", "Save"
        title, content, cancel = "", "", ""

    preview_html = render_markdown(content) if preview else ""
    cards = "\n".join(_render_memo_card(m) for m in memos)
    if not memos:
        cards = '<div class="panel empty">No memos yet.</div>'

    body = f"""\
<div class="columns">
  <div class="panel">
    <h2>{heading}</h2>
    <form id="memo-form" data-api="{api}" data-method="{method}" data-done="/memos">
      <label for="title">Title</label>
      <input type="text" id="title" name="title" value="{html.escape(title)}"
             placeholder="Title" required>
      <div class="row">
        <label for="content">Content</label>
        <button type="button" class="link" id="preview-toggle">{"Edit" if preview else "Preview"}</button>
      </div>
      <textarea id="content" name="content" data-editor placeholder="Write markdown"
                {"hidden" if preview else ""}>{html.escape(content)}</textarea>
      <div id="preview" class="md-preview panel" {"" if preview else "hidden"}>{preview_html}</div>
      <div class="actions">
        <button type="submit">{submit}</button>
        {cancel}
      </div>
    </form>
  </div>
  <div>
    <h2>Memos</h2>
    {cards}
  </div>
</div>"""
    return _page("Memos - Memopad", body, active="/memos")


def _render_memo_detail(memo: dict) -> str:
    body = f"""\
<div class="columns" style="grid-template-columns: 1fr">
  <div class="panel">
    <div class="row">
      <h2>{html.escape(memo["title"])}</h2>
      <a class="button secondary" href="/memos?edit={memo["id"]}">Edit</a>
    </div>
    <div class="muted">Updated {_format_time(memo["updated_at"])}</div>
    <div class="md-preview">{render_markdown(memo["content"])}</div>
  </div>
</div>"""
    return _page(f"{memo['title']} - Memopad", body, active="/memos")


def _render_not_found(what: str, back: str) -> str:
    body = f"""\
<div class="columns" style="grid-template-columns: 1fr">
  <div class="panel">
    <p>{html.escape(what)} not found.</p>
    <a href="{back}">&larr; back</a>
  </div>
</div>"""
    return _page("Not Found - Memopad", body)


def _render_users(users: list[dict], editing: dict | None) -> str:
    if editing:
        heading = "Edit user"
        api, method, submit = f"/api/users/{editing['id']}", "PUT", "Update"
        name, email = editing["name"], editing["email"]
        cancel = '<a class="button secondary" href="/users">Cancel</a>'
    else:
        heading = "Add user"
        api, method, submit = "/api/users", "POST", "Add"
        name, email, cancel = "", "", ""

    rows = "\n".join(
        f"""\
<li class="row">
  <span>{html.escape(u["name"])} ({html.escape(u["email"])})</span>
  <span class="actions">
    <a class="button secondary" href="/users?edit={u["id"]}">Edit</a>
    <button type="button" class="danger" data-delete="/api/users/{u["id"]}">Delete</button>
  </span>
</li>"""
        for u in users
    )
    if not users:
        rows = '<li class="empty">No users yet.</li>'

    body = f"""\
<div class="columns">
  <div class="panel">
    <h2>{heading}</h2>
    <form id="user-form" data-api="{api}" data-method="{method}" data-done="/users">
      <label for="name">Name</label>
      <input type="text" id="name" name="name" value="{html.escape(name)}" required minlength="2">
      <label for="email">Email</label>
      <input type="email" id="email" name="email" value="{html.escape(email)}" required>
      <div class="actions">
        <button type="submit">{submit}</button>
        {cancel}
      </div>
    </form>
  </div>
  <div>
    <h2>Users</h2>
    <ul class="people">
{rows}
    </ul>
  </div>
</div>"""
    return _page("Users - Memopad", body, active="/users")


@router.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing():
    return HTMLResponse(_render_landing())


@router.get("/memos", include_in_schema=False, response_class=HTMLResponse)
async def memos_page(
    edit: int | None = None,
    preview: bool = False,
    session: AsyncSession = Depends(get_db_session),
):
    memos, _ = await list_memos(session)
    editing = await get_memo(session, edit) if edit is not None else None
    return HTMLResponse(_render_memos(memos, editing, preview))


@router.get("/memos/{memo_id}", include_in_schema=False, response_class=HTMLResponse)
async def memo_page(memo_id: int, session: AsyncSession = Depends(get_db_session)):
    memo = await get_memo(session, memo_id)
    if not memo:
        return HTMLResponse(_render_not_found(f"Memo {memo_id}", "/memos"), status_code=404)
    return HTMLResponse(_render_memo_detail(memo))


@router.get("/users", include_in_schema=False, response_class=HTMLResponse)
async def users_page(
    edit: int | None = None,
    session: AsyncSession = Depends(get_db_session),
):
    users, _ = await list_users(session)
    editing = await get_user(session, edit) if edit is not None else None
    return HTMLResponse(_render_users(users, editing))
