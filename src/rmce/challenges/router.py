"""Challenge API endpoints: create, accept, complete, inbox, detail."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import Claims
from rmce.challenges.schemas import (
    ChallengeResponse,
    CompleteChallengeRequest,
    CreateChallengeRequest,
)
from rmce.challenges.service import (
    accept_challenge,
    complete_challenge,
    create_challenge,
    get_challenge,
    list_available_challenges,
)
from rmce.database import get_session
from rmce.patch import ChallengePatch

router = APIRouter(prefix="/challenges", tags=["Challenges"])


@router.post("", response_model=ChallengeResponse)
async def create_challenge_endpoint(
    body: CreateChallengeRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Challenge a user (or anyone, when challenged_id is omitted) on a route."""
    challenge = await create_challenge(db, body.route_id, identity.user_id, body.challenged_id)
    await db.commit()
    return ChallengeResponse.model_validate(challenge)


# Must be declared before /{challenge_id}
@router.get("/available", response_model=list[ChallengeResponse])
async def available_challenges(db: AsyncSession = Depends(get_session)):
    """Open challenges nobody has accepted yet, newest first."""
    challenges = await list_available_challenges(db)
    return [ChallengeResponse.model_validate(c) for c in challenges]


@router.get("/{challenge_id}", response_model=ChallengeResponse)
async def get_challenge_endpoint(challenge_id: int, db: AsyncSession = Depends(get_session)):
    challenge = await get_challenge(db, challenge_id)
    return ChallengeResponse.model_validate(challenge)


@router.post("/{challenge_id}/accept", response_model=ChallengeResponse)
async def accept_challenge_endpoint(
    challenge_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Accept a pending challenge. 404 unless it is currently pending."""
    challenge = await accept_challenge(db, challenge_id, identity.user_id)
    await db.commit()
    return ChallengeResponse.model_validate(challenge)


@router.post("/{challenge_id}/complete", response_model=ChallengeResponse)
async def complete_challenge_endpoint(
    challenge_id: int,
    body: CompleteChallengeRequest,
    db: AsyncSession = Depends(get_session),
):
    """Record times and/or status. Omitted fields keep their stored values."""
    challenge = await complete_challenge(db, challenge_id, ChallengePatch.from_payload(body))
    await db.commit()
    return ChallengeResponse.model_validate(challenge)
