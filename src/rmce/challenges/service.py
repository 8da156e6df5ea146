"""Challenge lifecycle against the store.

Rules:
- Challenges always start pending; any number may exist per route
- accept is a conditional update on status = pending (losing racers see 404)
- complete locks the row, merges the patch and recomputes the winner
- A completed challenge is frozen
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.service import user_exists
from rmce.challenges.engine import COMPLETED, PENDING, is_terminal, resolve_completion
from rmce.db.models import Challenge
from rmce.errors import NotFoundError, PayloadValidationError
from rmce.patch import ChallengePatch
from rmce.routes.service import route_exists

logger = logging.getLogger(__name__)


async def get_challenge(db: AsyncSession, challenge_id: int) -> Challenge:
    """Get a challenge by ID or raise NotFoundError."""
    result = await db.execute(select(Challenge).where(Challenge.id == challenge_id))
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise NotFoundError("Challenge", challenge_id)
    return challenge


async def create_challenge(
    db: AsyncSession,
    route_id: int,
    challenger_id: int,
    challenged_id: int | None = None,
) -> Challenge:
    """Create a pending challenge. ``challenged_id=None`` makes it open to anyone."""
    if not await route_exists(db, route_id):
        raise NotFoundError("Route", route_id)
    if challenged_id is not None:
        if challenged_id == challenger_id:
            raise PayloadValidationError(
                "Cannot challenge yourself", details={"field": "challenged_id"}
            )
        if not await user_exists(db, challenged_id):
            raise NotFoundError("User", challenged_id)

    challenge = Challenge(
        route_id=route_id,
        challenger_id=challenger_id,
        challenged_id=challenged_id,
        status=PENDING,
        created_at=datetime.now(timezone.utc),
    )
    db.add(challenge)
    await db.flush()
    logger.info(
        "Challenge %d created on route %d by %d (opponent=%s)",
        challenge.id, route_id, challenger_id, challenged_id,
    )
    return challenge


async def accept_challenge(db: AsyncSession, challenge_id: int, caller_id: int) -> Challenge:
    """Move a pending challenge to active. Only the status changes.

    A challenge that is missing or not pending raises NotFoundError.
    """
    result = await db.execute(
        update(Challenge)
        .where(Challenge.id == challenge_id, Challenge.status == PENDING)
        .values(status="active")
        .returning(Challenge.id)
        .execution_options(synchronize_session=False)
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Challenge", challenge_id, "No pending challenge with this id")

    refreshed = await db.execute(
        select(Challenge)
        .where(Challenge.id == challenge_id)
        .execution_options(populate_existing=True)
    )
    challenge = refreshed.scalar_one()

    # Accepting on behalf of someone else is not rejected yet.
    if challenge.challenged_id is not None and challenge.challenged_id != caller_id:
        logger.warning(
            "Challenge %d accepted by %d, designated opponent is %d",
            challenge_id, caller_id, challenge.challenged_id,
        )
    else:
        logger.info("Challenge %d accepted by %d", challenge_id, caller_id)
    return challenge


async def complete_challenge(db: AsyncSession, challenge_id: int, patch: ChallengePatch) -> Challenge:
    """Merge times and status into a challenge and recompute its winner."""
    result = await db.execute(
        select(Challenge).where(Challenge.id == challenge_id).with_for_update()
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise NotFoundError("Challenge", challenge_id)
    if is_terminal(challenge.status):
        raise NotFoundError("Challenge", challenge_id, "Challenge is already completed")

    try:
        values = resolve_completion(challenge, patch, datetime.now(timezone.utc))
    except ValueError as e:
        logger.info("Challenge %d completion rejected: %s", challenge_id, e)
        raise NotFoundError("Challenge", challenge_id, str(e)) from e

    for name, value in values.items():
        setattr(challenge, name, value)
    await db.flush()

    if values["status"] == COMPLETED:
        logger.info("Challenge %d completed, winner=%s", challenge_id, values["winner_id"])
    return challenge


async def list_available_challenges(db: AsyncSession) -> list[Challenge]:
    """Open challenges still waiting for an opponent, newest first."""
    result = await db.execute(
        select(Challenge)
        .where(Challenge.status == PENDING, Challenge.challenged_id.is_(None))
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
    )
    return list(result.scalars().all())
