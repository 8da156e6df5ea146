"""Friends API endpoints. All scoped to the caller."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import Claims
from rmce.database import get_session
from rmce.friends.schemas import FriendRequestResponse, FriendResponse, FriendshipResponse
from rmce.friends.service import (
    accept_request,
    list_friends,
    list_pending_requests,
    reject_request,
    send_request,
)

router = APIRouter(prefix="/friends", tags=["Friends"])


@router.get("", response_model=list[FriendResponse])
async def get_friends(
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    rows = await list_friends(db, identity.user_id)
    return [
        FriendResponse(
            friendship_id=f.id,
            user_id=u.id,
            username=u.username,
            email=u.email,
            since=f.created_at,
        )
        for f, u in rows
    ]


@router.get("/pending", response_model=list[FriendRequestResponse])
async def get_pending_requests(
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Friend requests waiting for the caller's answer."""
    rows = await list_pending_requests(db, identity.user_id)
    return [
        FriendRequestResponse(
            friendship_id=f.id,
            requester_id=u.id,
            username=u.username,
            created_at=f.created_at,
        )
        for f, u in rows
    ]


@router.post("/add/{friend_id}", response_model=FriendshipResponse)
async def add_friend(
    friend_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    friendship = await send_request(db, identity.user_id, friend_id)
    await db.commit()
    return FriendshipResponse.model_validate(friendship)


@router.put("/accept/{friendship_id}", response_model=FriendshipResponse)
async def accept_friend(
    friendship_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    friendship = await accept_request(db, friendship_id, identity.user_id)
    await db.commit()
    return FriendshipResponse.model_validate(friendship)


@router.put("/reject/{friendship_id}", response_model=FriendshipResponse)
async def reject_friend(
    friendship_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    friendship = await reject_request(db, friendship_id, identity.user_id)
    await db.commit()
    return FriendshipResponse.model_validate(friendship)
