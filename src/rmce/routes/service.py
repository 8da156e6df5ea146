"""Route and score business logic.

Rules:
- A route is owned by its creator; update/delete require the owner
- Lookup precedes the ownership check (404 before 403)
- Updates are COALESCE merges: omitted or null fields keep their value
- Scores are immutable; a user may submit any number per route
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.ownership import ensure_owner
from rmce.db.models import Route, Score
from rmce.errors import NotFoundError
from rmce.patch import RoutePatch

logger = logging.getLogger(__name__)


async def get_route(db: AsyncSession, route_id: int) -> Route:
    """Get a route by ID or raise NotFoundError."""
    result = await db.execute(select(Route).where(Route.id == route_id))
    route = result.scalar_one_or_none()
    if route is None:
        raise NotFoundError("Route", route_id)
    return route


async def route_exists(db: AsyncSession, route_id: int) -> bool:
    result = await db.execute(select(Route.id).where(Route.id == route_id))
    return result.scalar_one_or_none() is not None


async def list_routes(
    db: AsyncSession,
    user_id: int | None = None,
    is_public: bool | None = None,
) -> list[Route]:
    """List routes newest first, optionally filtered by owner and visibility."""
    q = select(Route)
    if user_id is not None:
        q = q.where(Route.user_id == user_id)
    if is_public is not None:
        q = q.where(Route.is_public.is_(is_public))
    q = q.order_by(Route.created_at.desc(), Route.id.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


async def create_route(
    db: AsyncSession,
    owner_id: int,
    name: str,
    path_data: Any,  # noqa: ANN401
    description: str | None = None,
    is_public: bool = True,
    distance_meters: float | None = None,
) -> Route:
    """Create a route owned by ``owner_id``."""
    now = datetime.now(timezone.utc)
    route = Route(
        user_id=owner_id,
        name=name,
        description=description,
        is_public=is_public,
        path_data=path_data,
        distance_meters=distance_meters,
        created_at=now,
        updated_at=now,
    )
    db.add(route)
    await db.flush()
    logger.info("Route created: %s (id=%d, owner=%d)", name, route.id, owner_id)
    return route


async def update_route(db: AsyncSession, route_id: int, caller_id: int, patch: RoutePatch) -> Route:
    """Merge ``patch`` into the caller's route and bump updated_at."""
    route = await get_route(db, route_id)
    ensure_owner("Route", route_id, route.user_id, caller_id)

    patch.apply(route)
    route.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Route %d updated by %d (fields=%s)", route_id, caller_id, sorted(patch.changes()))
    return route


async def delete_route(db: AsyncSession, route_id: int, caller_id: int) -> None:
    """Delete the caller's route."""
    route = await get_route(db, route_id)
    ensure_owner("Route", route_id, route.user_id, caller_id)

    await db.delete(route)
    await db.flush()
    logger.info("Route %d deleted by %d", route_id, caller_id)


async def submit_score(
    db: AsyncSession,
    route_id: int,
    user_id: int,
    time_seconds: float,
    **telemetry: float | None,
) -> Score:
    """Record a timed run. Telemetry summaries are optional."""
    if not await route_exists(db, route_id):
        logger.warning("Score submitted for unknown route %d", route_id)
        raise NotFoundError("Route", route_id)

    score = Score(
        route_id=route_id,
        user_id=user_id,
        time_seconds=time_seconds,
        created_at=datetime.now(timezone.utc),
        **telemetry,
    )
    db.add(score)
    await db.flush()
    logger.info("Score %d submitted: %.2fs on route %d by %d", score.id, time_seconds, route_id, user_id)
    return score


async def score_exists(db: AsyncSession, score_id: int) -> bool:
    result = await db.execute(select(Score.id).where(Score.id == score_id))
    return result.scalar_one_or_none() is not None
