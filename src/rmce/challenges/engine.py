"""Challenge engine: state machine and completion rules.

State progression: pending -> active -> completed (pending -> completed allowed).
Completed is terminal. Nothing here touches the database.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from rmce.db.models import Challenge
from rmce.patch import ChallengePatch

logger = logging.getLogger(__name__)

PENDING = "pending"
ACTIVE = "active"
COMPLETED = "completed"

VALID_TRANSITIONS: dict[str, list[str]] = {
    PENDING: [ACTIVE, COMPLETED],
    ACTIVE: [COMPLETED],
    COMPLETED: [],
}


def validate_transition(current_status: str, target_status: str) -> None:
    """Validate a state transition. Raises ValueError if invalid."""
    valid = VALID_TRANSITIONS.get(current_status, [])
    if target_status not in valid:
        raise ValueError(
            f"Invalid transition: {current_status} -> {target_status}. "
            f"Valid transitions: {valid}"
        )


def is_terminal(status: str) -> bool:
    return not VALID_TRANSITIONS.get(status)


def determine_winner(
    challenger_id: int,
    challenged_id: int | None,
    challenger_time: float | None,
    challenged_time: float | None,
) -> int | None:
    """Lower time wins. An exact tie goes to the challenged user.

    Returns None until both times are known.
    """
    if challenger_time is None or challenged_time is None:
        return None
    if challenger_time < challenged_time:
        return challenger_id
    return challenged_id


def resolve_completion(challenge: Challenge, patch: ChallengePatch, now: datetime) -> dict[str, Any]:
    """Compute the column values a completion request leaves on ``challenge``.

    Fields absent from the patch keep their stored values. The winner is
    always rewritten from the times carried by this request alone: a time
    stored by an earlier call does not count, so a request missing either
    time clears the winner. ``completed_at`` is stamped only when the patch
    itself sets status to completed.
    """
    status = patch.merged("status", challenge.status)
    if patch.is_set("status") and status != challenge.status:
        validate_transition(challenge.status, status)

    challenger_time = patch.merged("challenger_time", challenge.challenger_time)
    challenged_time = patch.merged("challenged_time", challenge.challenged_time)
    winner_id = determine_winner(
        challenge.challenger_id,
        challenge.challenged_id,
        patch.merged("challenger_time", None),
        patch.merged("challenged_time", None),
    )

    completed_at = challenge.completed_at
    if patch.is_set("status") and status == COMPLETED:
        completed_at = now

    logger.debug(
        "Challenge %s resolved: status=%s winner=%s",
        challenge.id, status, winner_id,
    )
    return {
        "status": status,
        "challenger_time": challenger_time,
        "challenged_time": challenged_time,
        "winner_id": winner_id,
        "completed_at": completed_at,
    }
