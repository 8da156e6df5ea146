"""Pydantic schemas for routes and score submission."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Routes ---


class CreateRouteRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
    is_public: bool = True
    path_data: Any
    distance_meters: float | None = Field(None, ge=0)


class UpdateRouteRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = None
    is_public: bool | None = None
    path_data: Any | None = None
    distance_meters: float | None = Field(None, ge=0)


class RouteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str | None = None
    is_public: bool
    path_data: Any
    distance_meters: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Scores ---


class CreateScoreRequest(BaseModel):
    """route_id comes from the URL path of /routes/{id}/score."""

    time_seconds: float = Field(..., gt=0)
    max_speed_kmh: float | None = Field(None, ge=0)
    avg_speed_kmh: float | None = Field(None, ge=0)
    max_g_force: float | None = None
    max_inclination_degrees: float | None = None
    max_sound_db: float | None = None


class ScoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    route_id: int
    user_id: int
    time_seconds: float
    max_speed_kmh: float | None = None
    avg_speed_kmh: float | None = None
    max_g_force: float | None = None
    max_inclination_degrees: float | None = None
    max_sound_db: float | None = None
    created_at: datetime | None = None


class MessageResponse(BaseModel):
    message: str
