"""Async engine, session dependency and schema migrations."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

import sqlalchemy
from alembic import command
from alembic.config import Config
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from memopad.db_models import Memo, User  # noqa: F401 (register tables)

logger = logging.getLogger("memopad.database")

BASELINE_REVISION = "001"
MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

_engine = None
_session_factory = None


async def init_db(url: str = "sqlite+aiosqlite:///data/memopad.db") -> None:
    """Open the engine and bring the schema up to the latest revision."""
    global _engine, _session_factory
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}
        _ensure_sqlite_dir(url)
    _engine = create_async_engine(url, echo=False, connect_args=connect_args, pool_pre_ping=True)
    _session_factory = sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]

    async with _engine.begin() as conn:
        if url.startswith("sqlite"):
            await conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            await conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        # Alembic's command API is synchronous
        await conn.run_sync(migrate)


def _ensure_sqlite_dir(url: str) -> None:
    _, _, path = url.partition(":///")
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


def alembic_config(sync_conn) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # env.py reuses this connection instead of opening its own engine
    cfg.attributes["connection"] = sync_conn
    return cfg


def migrate(sync_conn) -> None:
    """Upgrade to head.

    A database built by ``create_all`` before migrations existed has the
    tables but no ``alembic_version``; it is stamped at the baseline first.
    """
    cfg = alembic_config(sync_conn)
    tables = set(sqlalchemy.inspect(sync_conn).get_table_names())
    current = MigrationContext.configure(sync_conn).get_current_revision()
    head = ScriptDirectory.from_config(cfg).get_current_head()

    if "alembic_version" not in tables and "memos" in tables:
        logger.info("Untracked schema found, stamping baseline %s", BASELINE_REVISION)
        command.stamp(cfg, BASELINE_REVISION)
        current = BASELINE_REVISION

    if current == head:
        logger.debug("Schema is at head (%s)", head)
        return
    logger.info("Migrating schema %s -> %s", current or "(empty)", head)
    command.upgrade(cfg, "head")


async def close_db() -> None:
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    assert _session_factory is not None, "Database not initialised, call init_db() first"
    async with _session_factory() as session:
        yield session
