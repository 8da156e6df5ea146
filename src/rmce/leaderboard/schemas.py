"""Leaderboard response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class LeaderboardEntryResponse(BaseModel):
    rank: int
    user_id: int
    username: str
    time_seconds: float
    max_speed_kmh: float | None = None
    created_at: datetime | None = None
