# ruff: noqa: E501
"""Seed Memopad with demo users and memos.

Usage:
    # Start server with relaxed rate limits for seeding:
    MEMOPAD_RATE_LIMIT_WRITE="100/minute" uv run uvicorn memopad.main:app --port 8000

    # Then seed:
    uv run python scripts/seed.py                          # localhost:8000
    uv run python scripts/seed.py https://memopad.example  # elsewhere
"""

from __future__ import annotations

import asyncio
import sys

import httpx

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

USERS = [
    {"name": "Ada Lovelace", "email": "ada@example.com"},
    {"name": "Grace Hopper", "email": "grace@example.com"},
    {"name": "Alan Turing", "email": "alan@example.com"},
    {"name": "Katherine Johnson", "email": "katherine@example.com"},
]

# ---------------------------------------------------------------------------
# Memos: nested lists show off the per-depth bullet markers
# ---------------------------------------------------------------------------

MEMOS = [
    {
        "title": "Weekly groceries",
        "content": (
            "- Produce\n"
            "  - apples\n"
            "  - spinach\n"
            "- Dairy\n"
            "  - oat milk\n"
            "    - the unsweetened one\n"
            "- Bread\n"
        ),
    },
    {
        "title": "Release checklist",
        "content": (
            "# 0.2.0\n\n"
            "1. Bump the version\n"
            "2. Run the tests\n"
            "3. Tag and push\n\n"
            "```bash\ngit tag v0.2.0 && git push --tags\n```\n"
        ),
    },
    {
        "title": "Reading notes",
        "content": (
            "## Structure and Interpretation\n\n"
            "> Programs must be written for people to read, and only incidentally for machines to execute.\n\n"
            "- Chapter 1\n"
            "  - procedures as black boxes\n"
            "    - `sqrt` by Newton's method\n"
            "      - fixed points\n"
            "        - damping\n"
            "          - back to the first marker\n"
        ),
    },
    {
        "title": "Meeting: roadmap",
        "content": (
            "| Item | Owner | Status |\n"
            "|------|-------|:------:|\n"
            "| Markdown preview | Ada | done |\n"
            "| Tab indentation | Grace | done |\n"
            "| Sharing | Alan | ~~planned~~ parked |\n"
        ),
    },
    {
        "title": "Scratchpad",
        "content": "Quick thoughts go here. " * 12,
    },
]


async def main():
    json_headers = {"Accept": "application/json", "Content-Type": "application/json"}
    async with httpx.AsyncClient(base_url=BASE, timeout=30, headers=json_headers) as client:
        for user in USERS:
            resp = await client.post("/api/users", json=user)
            if resp.status_code == 201:
                data = resp.json()
                print(f"  added user {user['name']:20s} → {data['id']}")
            elif resp.status_code == 409:
                print(f"  exists     {user['email']}")
            else:
                print(f"  FAILED {user['name']}: {resp.status_code} {resp.text[:100]}")

        print(f"\n--- Writing {len(MEMOS)} memos ---\n")

        for memo in MEMOS:
            resp = await client.post("/api/memos", json=memo)
            if resp.status_code == 201:
                data = resp.json()
                print(f"  memo {data['id']:4d}  {memo['title'][:60]}")
            else:
                print(f"  FAILED posting: {resp.status_code} {resp.text[:100]}")

        resp = await client.get("/api/memos")
        if resp.status_code == 200:
            print(f"\n  {resp.json()['total']} memos in total")


if __name__ == "__main__":
    print(f"\n--- Seeding {BASE} ---\n")
    asyncio.run(main())
