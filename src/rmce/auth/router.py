"""Authentication router: /auth/register and /auth/login (public)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_token_service
from rmce.auth.jwt import TokenService
from rmce.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from rmce.auth.service import authenticate_user, register_user
from rmce.config import get_settings
from rmce.database import get_session

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Create an account. 409 if the username or email is taken."""
    user = await register_user(db, body.username, body.email, body.password)
    await db.commit()
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """Exchange email + password for a 7-day bearer token."""
    user = await authenticate_user(db, body.email, body.password)
    await db.commit()
    settings = get_settings()
    return LoginResponse(
        token=tokens.issue(user.id, user.username, user.email),
        expires_in=settings.jwt_token_expire_days * 86400,
        user=UserResponse.model_validate(user),
    )
