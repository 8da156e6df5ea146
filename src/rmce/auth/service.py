"""
Credential store logic: registration and password login.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from rmce.auth.password import PasswordStrengthError, password_hasher, validate_password_strength
from rmce.db.models import User
from rmce.errors import ConflictError, InvalidCredentialsError, PayloadValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def user_exists(db: AsyncSession, user_id: int) -> bool:
    result = await db.execute(select(User.id).where(User.id == user_id))
    return result.scalar_one_or_none() is not None


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(db: AsyncSession, username: str, email: str, password: str) -> User:
    """
    Register a new user with username + email + password.

    Raises:
        PayloadValidationError: If the password is too weak.
        ConflictError: If the username or email is already taken.
    """
    try:
        validate_password_strength(password)
    except PasswordStrengthError as e:
        raise PayloadValidationError(str(e), details={"field": "password"}) from e

    existing = await db.execute(
        select(User.id).where(
            or_(func.lower(User.email) == email.lower(), func.lower(User.username) == username.lower())
        )
    )
    if existing.first() is not None:
        logger.warning("registration_conflict", username=username, email=email)
        raise ConflictError("Username or email already registered")

    user = User(
        username=username,
        email=email.lower(),
        password_hash=password_hasher.hash(password),
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same name/email.
        await db.rollback()
        raise ConflictError("Username or email already registered") from e

    logger.info("user_registered", user_id=user.id, username=username)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Check an email/password pair.

    Unknown email and wrong password both raise InvalidCredentialsError.
    Hashes created with outdated argon2 parameters are upgraded on success.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        logger.warning("login_unknown_email", email=email)
        raise InvalidCredentialsError()

    if not password_hasher.verify(password, user.password_hash):
        logger.warning("login_bad_password", user_id=user.id)
        raise InvalidCredentialsError()

    if password_hasher.needs_rehash(user.password_hash):
        user.password_hash = password_hasher.hash(password)
        await db.flush()

    logger.info("login_succeeded", user_id=user.id)
    return user
