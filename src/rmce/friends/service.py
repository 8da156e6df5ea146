"""Friendship edges between users.

Rules:
- An edge is directed: user_id asked friend_id
- Re-sending a request resets the caller's edge to pending
- Only the recipient (friend_id) may accept or reject
- Accepting flips that one edge; no reciprocal edge is created
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.service import user_exists
from rmce.db.models import Friendship, User
from rmce.errors import ForbiddenError, NotFoundError, PayloadValidationError

logger = logging.getLogger(__name__)

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"


async def send_request(db: AsyncSession, user_id: int, friend_id: int) -> Friendship:
    """Create or reset the user_id -> friend_id edge as pending."""
    if friend_id == user_id:
        raise PayloadValidationError("Cannot befriend yourself", details={"field": "friend_id"})
    if not await user_exists(db, friend_id):
        raise NotFoundError("User", friend_id)

    result = await db.execute(
        select(Friendship).where(Friendship.user_id == user_id, Friendship.friend_id == friend_id)
    )
    friendship = result.scalar_one_or_none()
    if friendship is None:
        friendship = Friendship(
            user_id=user_id,
            friend_id=friend_id,
            status=PENDING,
            created_at=datetime.now(timezone.utc),
        )
        db.add(friendship)
    else:
        friendship.status = PENDING
    await db.flush()

    logger.info("Friend request %d: %d -> %d", friendship.id, user_id, friend_id)
    return friendship


async def _answer(db: AsyncSession, friendship_id: int, caller_id: int, status: str) -> Friendship:
    result = await db.execute(select(Friendship).where(Friendship.id == friendship_id))
    friendship = result.scalar_one_or_none()
    if friendship is None:
        raise NotFoundError("Friendship", friendship_id)
    if friendship.friend_id != caller_id:
        logger.warning(
            "User %d tried to answer friend request %d addressed to %d",
            caller_id, friendship_id, friendship.friend_id,
        )
        raise ForbiddenError("Only the recipient can answer a friend request")

    friendship.status = status
    await db.flush()
    logger.info("Friend request %d %s by %d", friendship_id, status, caller_id)
    return friendship


async def accept_request(db: AsyncSession, friendship_id: int, caller_id: int) -> Friendship:
    return await _answer(db, friendship_id, caller_id, ACCEPTED)


async def reject_request(db: AsyncSession, friendship_id: int, caller_id: int) -> Friendship:
    return await _answer(db, friendship_id, caller_id, REJECTED)


async def list_friends(db: AsyncSession, user_id: int) -> list[tuple[Friendship, User]]:
    """Accepted outgoing edges with the friend's user row."""
    result = await db.execute(
        select(Friendship, User)
        .join(User, User.id == Friendship.friend_id)
        .where(Friendship.user_id == user_id, Friendship.status == ACCEPTED)
        .order_by(User.username.asc())
    )
    return [(f, u) for f, u in result.all()]


async def list_pending_requests(db: AsyncSession, user_id: int) -> list[tuple[Friendship, User]]:
    """Incoming pending requests with the requester's user row, newest first."""
    result = await db.execute(
        select(Friendship, User)
        .join(User, User.id == Friendship.user_id)
        .where(Friendship.friend_id == user_id, Friendship.status == PENDING)
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
    )
    return [(f, u) for f, u in result.all()]
