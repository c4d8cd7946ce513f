"""Memo persistence service backed by SQLModel."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from memopad.db_models import Memo

logger = logging.getLogger("memopad.services.memos")


def memo_to_dict(memo: Memo) -> dict:
    return {
        "id": memo.id,
        "title": memo.title,
        "content": memo.content,
        "created_at": memo.created_at,
        "updated_at": memo.updated_at,
    }


async def create_memo(session: AsyncSession, title: str, content: str = "") -> dict:
    memo = Memo(title=title, content=content)
    session.add(memo)
    await session.commit()
    await session.refresh(memo)
    logger.info("Created memo %s", memo.id)
    return memo_to_dict(memo)


async def list_memos(session: AsyncSession, offset: int = 0, limit: int = 100) -> tuple[list[dict], int]:
    """Return (memos, total_count), most recently updated first."""
    count_result = await session.execute(select(func.count()).select_from(Memo))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Memo)
        .order_by(col(Memo.updated_at).desc(), col(Memo.id).desc())
        .offset(offset)
        .limit(limit)
    )
    return [memo_to_dict(m) for m in result.scalars().all()], total


async def get_memo(session: AsyncSession, memo_id: int) -> dict | None:
    memo = await session.get(Memo, memo_id)
    return memo_to_dict(memo) if memo else None


async def update_memo(
    session: AsyncSession, memo_id: int, title: str, content: str = ""
) -> dict | None:
    memo = await session.get(Memo, memo_id)
    if not memo:
        return None
    memo.title = title
    memo.content = content
    memo.updated_at = datetime.now(UTC)
    session.add(memo)
    await session.commit()
    await session.refresh(memo)
    logger.info("Updated memo %s", memo_id)
    return memo_to_dict(memo)


async def delete_memo(session: AsyncSession, memo_id: int) -> bool:
    memo = await session.get(Memo, memo_id)
    if not memo:
        return False
    await session.delete(memo)
    await session.commit()
    logger.info("Deleted memo %s", memo_id)
    return True
