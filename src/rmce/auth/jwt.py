"""
HS256 identity tokens.

A token is self-contained: it carries the user's id, username and email plus
issue/expiry timestamps. There is no server-side session or denylist, so
expiry is the only way a token stops being valid.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from rmce.config import Settings
from rmce.errors import ConfigurationError, ExpiredTokenError, InvalidTokenError

logger = structlog.get_logger()

_REQUIRED_CLAIMS = ["user_id", "username", "email", "iat", "exp"]


class Claims(BaseModel):
    """Decoded identity carried by a token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    email: str
    iat: int
    exp: int

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies identity tokens with a process-wide symmetric key."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            msg = "JWT secret is not configured (set RMCE_JWT_SECRET)"
            raise ConfigurationError(msg)
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        """Build the service once at startup from application settings."""
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.jwt_token_expire_days),
        )

    def issue(self, user_id: int, username: str, email: str) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: The user's database ID.
            username: The user's unique username.
            email: The user's email address.

        Returns:
            Encoded JWT string.
        """
        now = self._clock()
        payload: dict[str, Any] = {
            "user_id": user_id,
            "username": username,
            "email": email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Claims:
        """
        Verify signature and expiry, then decode the claims.

        Expiry is checked against the service clock, not the wall clock:
        a token is valid while ``now < exp``.

        Raises:
            ExpiredTokenError: If ``exp`` is at or before the current time.
            InvalidTokenError: If the signature, structure or claim set is invalid.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid authentication token: {e}") from None

        try:
            claims = Claims.model_validate(payload)
        except ValidationError:
            msg = "Token claims are malformed"
            raise InvalidTokenError(msg) from None

        if claims.expires_at <= self._clock():
            raise ExpiredTokenError()
        return claims
