"""Pydantic schemas for challenge endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CreateChallengeRequest(BaseModel):
    """challenged_id omitted or null creates an open challenge."""

    route_id: int
    challenged_id: int | None = None


class CompleteChallengeRequest(BaseModel):
    status: Literal["pending", "active", "completed"] | None = None
    challenger_time: float | None = Field(None, gt=0)
    challenged_time: float | None = Field(None, gt=0)


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    route_id: int
    challenger_id: int
    challenged_id: int | None = None
    status: str
    challenger_time: float | None = None
    challenged_time: float | None = None
    winner_id: int | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None
