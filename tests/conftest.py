"""Test fixtures with in-memory SQLite via SQLModel."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from memopad.database import get_db_session
from memopad.db_models import Memo, User  # noqa: F401 (register tables)
from memopad.main import app
from memopad.rate_limit import limiter

JSON = {"Accept": "application/json"}


@pytest.fixture
async def db():
    engine = create_async_engine(
        "sqlite+aiosqlite://", echo=False, connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]

    async def override_get_db_session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    limiter.reset()

    yield factory

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_memo(client: AsyncClient, title: str = "Memo", content: str = "") -> dict:
    """Helper: create a memo through the API and return it."""
    resp = await client.post("/api/memos", json={"title": title, "content": content}, headers=JSON)
    assert resp.status_code == 201
    return resp.json()


async def create_user(client: AsyncClient, name: str = "Alice", email: str = "alice@example.com") -> dict:
    resp = await client.post("/api/users", json={"name": name, "email": email}, headers=JSON)
    assert resp.status_code == 201
    return resp.json()
