"""User record service backed by SQLModel."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from memopad.db_models import User

logger = logging.getLogger("memopad.services.users")


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at,
    }


async def _email_taken(session: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
    query = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await session.execute(query)
    return result.first() is not None


async def create_user(session: AsyncSession, name: str, email: str) -> dict:
    """Create a user. Raises ValueError when the email is already registered."""
    if await _email_taken(session, email):
        raise ValueError(f"Email already registered: {email}")

    user = User(name=name, email=email)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ValueError(f"Email already registered: {email}") from e
    await session.refresh(user)
    logger.info("Created user %s", user.id)
    return user_to_dict(user)


async def list_users(session: AsyncSession, offset: int = 0, limit: int = 100) -> tuple[list[dict], int]:
    count_result = await session.execute(select(func.count()).select_from(User))
    total = count_result.scalar_one()

    result = await session.execute(
        select(User).order_by(col(User.id)).offset(offset).limit(limit)
    )
    return [user_to_dict(u) for u in result.scalars().all()], total


async def get_user(session: AsyncSession, user_id: int) -> dict | None:
    user = await session.get(User, user_id)
    return user_to_dict(user) if user else None


async def update_user(session: AsyncSession, user_id: int, name: str, email: str) -> dict | None:
    """Update a user. Returns None when missing; raises ValueError on a duplicate email."""
    user = await session.get(User, user_id)
    if not user:
        return None
    if await _email_taken(session, email, exclude_id=user_id):
        raise ValueError(f"Email already registered: {email}")

    user.name = name
    user.email = email
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ValueError(f"Email already registered: {email}") from e
    await session.refresh(user)
    logger.info("Updated user %s", user_id)
    return user_to_dict(user)


async def delete_user(session: AsyncSession, user_id: int) -> bool:
    user = await session.get(User, user_id)
    if not user:
        return False
    await session.delete(user)
    await session.commit()
    logger.info("Deleted user %s", user_id)
    return True
