"""User directory queries and account deletion."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from rmce.auth.ownership import ensure_owner
from rmce.auth.service import get_user_by_id
from rmce.db.models import User
from rmce.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.id.asc()))
    return list(result.scalars().all())


async def get_user(db: AsyncSession, user_id: int) -> User:
    """Fetch a user or raise NotFoundError."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def delete_user(db: AsyncSession, user_id: int, caller_id: int) -> None:
    """
    Delete an account. Only the account holder may do this.

    Owned routes, scores and challenges go with it via ON DELETE CASCADE;
    authored posts are kept with their author cleared.
    """
    user = await get_user(db, user_id)
    ensure_owner("User", user_id, user.id, caller_id)

    await db.delete(user)
    await db.flush()
    logger.info("user_deleted", user_id=user_id)
