"""Friendship schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FriendshipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    friend_id: int
    status: str
    created_at: datetime | None = None


class FriendResponse(BaseModel):
    """An accepted friend, flattened with the friend's public profile."""

    friendship_id: int
    user_id: int
    username: str
    email: str
    since: datetime | None = None


class FriendRequestResponse(BaseModel):
    """An incoming pending request, with the requester's profile."""

    friendship_id: int
    requester_id: int
    username: str
    created_at: datetime | None = None
