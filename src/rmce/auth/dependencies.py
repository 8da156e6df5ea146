"""FastAPI authentication dependencies.

``get_current_identity`` is attached router-wide to every protected router,
so a request without a valid bearer token is rejected with 401 before any
handler runs. Handlers that need the caller declare it again; FastAPI caches
the result per request, so the token is verified once.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rmce.auth.jwt import Claims, TokenService
from rmce.errors import AuthenticationError

logger = structlog.get_logger()

_bearer = HTTPBearer(auto_error=False)


def _unauthenticated() -> AuthenticationError:
    # Expired and invalid tokens look the same to the client.
    return AuthenticationError("Not authenticated", code="UNAUTHENTICATED")


def get_token_service(request: Request) -> TokenService:
    """Return the TokenService built at startup."""
    return request.app.state.token_service


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    """
    Extract and verify the bearer token, return its claims.

    Raises 401 when the header is missing, uses another scheme, or the token
    fails verification. The failure kind is logged but not exposed.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.info("auth_rejected", reason="missing_or_malformed_header")
        raise _unauthenticated()

    try:
        claims = tokens.verify(credentials.credentials)
    except AuthenticationError as e:
        logger.info("auth_rejected", reason=e.code)
        raise _unauthenticated() from None

    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    return claims
