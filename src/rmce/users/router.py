"""User directory endpoints. Reads are public; deletion is self-only."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import Claims
from rmce.auth.schemas import UserResponse
from rmce.database import get_session
from rmce.routes.schemas import MessageResponse
from rmce.users.service import delete_user, get_user, list_users

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def get_users(db: AsyncSession = Depends(get_session)):
    users = await list_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Get the caller's own account."""
    return UserResponse.model_validate(await get_user(db, identity.user_id))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_endpoint(user_id: int, db: AsyncSession = Depends(get_session)):
    return UserResponse.model_validate(await get_user(db, user_id))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user_endpoint(
    user_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Delete the caller's own account."""
    await delete_user(db, user_id, identity.user_id)
    await db.commit()
    return MessageResponse(message="User deleted successfully")
