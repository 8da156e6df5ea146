"""Ownership guard for mutating operations.

Callers resolve the resource first (NotFoundError when the id is unknown),
then ask the guard. A resolved resource owned by someone else is always
ForbiddenError, never NotFoundError.
"""

from __future__ import annotations

import enum

import structlog

from rmce.errors import ForbiddenError

logger = structlog.get_logger()


class Decision(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize_mutation(resource_owner_id: int | None, caller_id: int) -> Decision:
    """Allow iff the caller is the recorded owner. Ownerless resources are never mutable."""
    if resource_owner_id is not None and resource_owner_id == caller_id:
        return Decision.ALLOW
    return Decision.DENY


def ensure_owner(resource: str, resource_id: int, resource_owner_id: int | None, caller_id: int) -> None:
    """Raise ForbiddenError unless ``caller_id`` owns the resource."""
    if authorize_mutation(resource_owner_id, caller_id) is Decision.DENY:
        logger.warning(
            "ownership_denied",
            resource=resource,
            resource_id=resource_id,
            owner_id=resource_owner_id,
            caller_id=caller_id,
        )
        raise ForbiddenError(f"You do not own this {resource.lower()}")
