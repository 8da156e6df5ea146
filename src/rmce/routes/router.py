"""Route API endpoints: 8 routes.

Routes (7), Scores (1). Mounted behind the identity dependency.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import Claims
from rmce.database import get_session
from rmce.patch import RoutePatch
from rmce.routes.schemas import (
    CreateRouteRequest,
    CreateScoreRequest,
    MessageResponse,
    RouteResponse,
    ScoreResponse,
    UpdateRouteRequest,
)
from rmce.routes.service import (
    create_route,
    delete_route,
    get_route,
    list_routes,
    submit_score,
    update_route,
)

router = APIRouter(prefix="/routes", tags=["Routes"])


# ── Route Endpoints ──


@router.get("", response_model=list[RouteResponse])
async def list_routes_endpoint(
    user_id: int | None = Query(None),
    is_public: bool | None = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """List routes, optionally filtered by owner and visibility."""
    routes = await list_routes(db, user_id=user_id, is_public=is_public)
    return [RouteResponse.model_validate(r) for r in routes]


@router.post("", response_model=RouteResponse)
async def create_route_endpoint(
    body: CreateRouteRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Create a route owned by the caller."""
    route = await create_route(
        db,
        owner_id=identity.user_id,
        name=body.name,
        path_data=body.path_data,
        description=body.description,
        is_public=body.is_public,
        distance_meters=body.distance_meters,
    )
    await db.commit()
    return RouteResponse.model_validate(route)


@router.get("/public", response_model=list[RouteResponse])
async def list_public_routes(db: AsyncSession = Depends(get_session)):
    routes = await list_routes(db, is_public=True)
    return [RouteResponse.model_validate(r) for r in routes]


@router.get("/user/{user_id}", response_model=list[RouteResponse])
async def list_user_routes(user_id: int, db: AsyncSession = Depends(get_session)):
    routes = await list_routes(db, user_id=user_id)
    return [RouteResponse.model_validate(r) for r in routes]


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route_endpoint(route_id: int, db: AsyncSession = Depends(get_session)):
    route = await get_route(db, route_id)
    return RouteResponse.model_validate(route)


@router.put("/{route_id}", response_model=RouteResponse)
async def update_route_endpoint(
    route_id: int,
    body: UpdateRouteRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Update a route (owner only). Omitted or null fields are left unchanged."""
    route = await update_route(db, route_id, identity.user_id, RoutePatch.from_payload(body))
    await db.commit()
    return RouteResponse.model_validate(route)


@router.delete("/{route_id}", response_model=MessageResponse)
async def delete_route_endpoint(
    route_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Delete a route (owner only)."""
    await delete_route(db, route_id, identity.user_id)
    await db.commit()
    return MessageResponse(message="Route deleted successfully")


# ── Score Endpoint ──


@router.post("/{route_id}/score", response_model=ScoreResponse)
async def submit_score_endpoint(
    route_id: int,
    body: CreateScoreRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Submit a timed run on a route for the caller."""
    score = await submit_score(
        db,
        route_id,
        identity.user_id,
        body.time_seconds,
        **body.model_dump(exclude={"time_seconds"}),
    )
    await db.commit()
    return ScoreResponse.model_validate(score)
