"""Leaderboard API endpoints. Read-only, capped at the configured limit."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.database import get_session
from rmce.leaderboard.schemas import LeaderboardEntryResponse
from rmce.leaderboard.service import global_speed_leaderboard, route_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("/route/{route_id}", response_model=list[LeaderboardEntryResponse])
async def get_route_leaderboard(route_id: int, db: AsyncSession = Depends(get_session)):
    """Best time per user on a route. Unknown routes yield an empty board."""
    entries = await route_leaderboard(db, route_id)
    return [LeaderboardEntryResponse(**e) for e in entries]


@router.get("/global/speed", response_model=list[LeaderboardEntryResponse])
async def get_speed_leaderboard(db: AsyncSession = Depends(get_session)):
    """Best top speed per user across every route."""
    entries = await global_speed_leaderboard(db)
    return [LeaderboardEntryResponse(**e) for e in entries]
