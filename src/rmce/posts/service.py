"""Post CRUD. Posts are edited or deleted only by their author."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.ownership import ensure_owner
from rmce.db.models import Post
from rmce.errors import NotFoundError
from rmce.patch import PostPatch

logger = logging.getLogger(__name__)


async def list_posts(db: AsyncSession) -> list[Post]:
    result = await db.execute(select(Post).order_by(Post.created_at.desc(), Post.id.desc()))
    return list(result.scalars().all())


async def get_post(db: AsyncSession, post_id: int) -> Post:
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post", post_id)
    return post


async def create_post(db: AsyncSession, author_id: int, title: str, body: str) -> Post:
    post = Post(user_id=author_id, title=title, body=body, created_at=datetime.now(timezone.utc))
    db.add(post)
    await db.flush()
    logger.info("Post %d created by %d", post.id, author_id)
    return post


async def update_post(db: AsyncSession, post_id: int, caller_id: int, patch: PostPatch) -> Post:
    """Merge ``patch`` into the caller's post. Posts without an author are frozen."""
    post = await get_post(db, post_id)
    ensure_owner("Post", post_id, post.user_id, caller_id)
    patch.apply(post)
    await db.flush()
    return post


async def delete_post(db: AsyncSession, post_id: int, caller_id: int) -> None:
    post = await get_post(db, post_id)
    ensure_owner("Post", post_id, post.user_id, caller_id)
    await db.delete(post)
    await db.flush()
    logger.info("Post %d deleted by %d", post_id, caller_id)
