"""Leaderboard service: best score per user, ranked.

Each user appears once, with their best run. Ties on the metric are broken by
the earlier score, then by the lower user id, so the order is stable.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.config import get_settings
from rmce.db.models import Score, User

logger = logging.getLogger(__name__)


def _best_per_user(metric: Any, *criteria: Any) -> Select:  # noqa: ANN401
    """Rank each user's scores by ``metric`` (earliest first on ties), keep rn = 1."""
    ranked = (
        select(
            Score.user_id,
            Score.time_seconds,
            Score.max_speed_kmh,
            Score.created_at,
            func.row_number()
            .over(
                partition_by=Score.user_id,
                order_by=(metric, Score.created_at.asc(), Score.id.asc()),
            )
            .label("rn"),
        )
        .where(*criteria)
        .subquery("ranked")
    )
    return (
        select(
            ranked.c.user_id,
            User.username,
            ranked.c.time_seconds,
            ranked.c.max_speed_kmh,
            ranked.c.created_at,
        )
        .join(User, User.id == ranked.c.user_id)
        .where(ranked.c.rn == 1)
    )


def _to_entries(rows: Any) -> list[dict[str, Any]]:  # noqa: ANN401
    return [
        {
            "rank": i,
            "user_id": row.user_id,
            "username": row.username,
            "time_seconds": row.time_seconds,
            "max_speed_kmh": row.max_speed_kmh,
            "created_at": row.created_at,
        }
        for i, row in enumerate(rows, start=1)
    ]


async def route_leaderboard(db: AsyncSession, route_id: int, limit: int | None = None) -> list[dict[str, Any]]:
    """Fastest time per user on a route, ascending."""
    limit = limit or get_settings().leaderboard_limit
    best = _best_per_user(Score.time_seconds.asc(), Score.route_id == route_id).subquery("best")
    q = (
        select(best)
        .order_by(best.c.time_seconds.asc(), best.c.created_at.asc(), best.c.user_id.asc())
        .limit(limit)
    )
    result = await db.execute(q)
    entries = _to_entries(result.all())
    logger.debug("Route %d leaderboard: %d entries", route_id, len(entries))
    return entries


async def global_speed_leaderboard(db: AsyncSession, limit: int | None = None) -> list[dict[str, Any]]:
    """Highest recorded top speed per user across all routes, descending."""
    limit = limit or get_settings().leaderboard_limit
    best = _best_per_user(Score.max_speed_kmh.desc(), Score.max_speed_kmh.is_not(None)).subquery("best")
    q = (
        select(best)
        .order_by(best.c.max_speed_kmh.desc(), best.c.created_at.asc(), best.c.user_id.asc())
        .limit(limit)
    )
    result = await db.execute(q)
    entries = _to_entries(result.all())
    logger.debug("Global speed leaderboard: %d entries", len(entries))
    return entries
