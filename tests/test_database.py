"""Test startup migrations against file-backed SQLite databases."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlmodel import SQLModel

from memopad.database import BASELINE_REVISION, close_db, init_db


def _state(path) -> tuple[set[str], str | None]:
    engine = create_engine(f"sqlite:///{path}")
    with engine.connect() as conn:
        tables = set(inspect(conn).get_table_names())
        rev = None
        if "alembic_version" in tables:
            rev = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    engine.dispose()
    return tables, rev


@pytest.mark.asyncio
async def test_fresh_database_is_migrated(tmp_path):
    path = tmp_path / "nested" / "memopad.db"
    await init_db(f"sqlite+aiosqlite:///{path}")
    await close_db()

    tables, rev = _state(path)
    assert {"memos", "users", "alembic_version"} <= tables
    assert rev == BASELINE_REVISION


@pytest.mark.asyncio
async def test_untracked_database_is_stamped(tmp_path):
    path = tmp_path / "legacy.db"
    engine = create_engine(f"sqlite:///{path}")
    SQLModel.metadata.create_all(engine)
    engine.dispose()

    await init_db(f"sqlite+aiosqlite:///{path}")
    await close_db()

    tables, rev = _state(path)
    assert "alembic_version" in tables
    assert rev == BASELINE_REVISION


@pytest.mark.asyncio
async def test_restart_is_a_noop(tmp_path):
    path = tmp_path / "memopad.db"
    url = f"sqlite+aiosqlite:///{path}"
    await init_db(url)
    await close_db()
    await init_db(url)
    await close_db()

    _, rev = _state(path)
    assert rev == BASELINE_REVISION
