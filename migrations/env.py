"""Alembic environment for Memopad.

At app startup ``memopad.database`` hands over its open connection through
``config.attributes["connection"]``. Run standalone, the environment builds a
synchronous SQLite engine from ``MEMOPAD_DATABASE_URL``.
"""

from __future__ import annotations

import logging

from alembic import context
from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

from memopad.db_models import Memo, User  # noqa: F401 (register tables)

logger = logging.getLogger("alembic.env")

config = context.config
target_metadata = SQLModel.metadata


def _sync_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from memopad.config import settings

    if settings.database_url.startswith("sqlite"):
        return settings.database_url.replace("sqlite+aiosqlite", "sqlite")
    return f"sqlite:///{settings.database_url}"


def _run(connection) -> None:
    # SQLite cannot ALTER most things in place; batch mode rebuilds tables
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit the migration SQL instead of executing it."""
    context.configure(
        url=_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        _run(connection)
        return

    engine = create_engine(_sync_url(), poolclass=pool.NullPool)
    logger.info("Migrating %s", engine.url.render_as_string(hide_password=True))
    with engine.connect() as conn:
        _run(conn)
        conn.commit()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
