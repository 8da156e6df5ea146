"""Post endpoints. Reads are public; writes need a token."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import Claims
from rmce.database import get_session
from rmce.patch import PostPatch
from rmce.posts.schemas import CreatePostRequest, PostResponse, UpdatePostRequest
from rmce.posts.service import create_post, delete_post, get_post, list_posts, update_post
from rmce.routes.schemas import MessageResponse

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("", response_model=list[PostResponse])
async def get_posts(db: AsyncSession = Depends(get_session)):
    posts = await list_posts(db)
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(post_id: int, db: AsyncSession = Depends(get_session)):
    return PostResponse.model_validate(await get_post(db, post_id))


@router.post("", response_model=PostResponse)
async def create_post_endpoint(
    body: CreatePostRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    post = await create_post(db, identity.user_id, body.title, body.body)
    await db.commit()
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: int,
    body: UpdatePostRequest,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    """Edit a post (author only)."""
    post = await update_post(db, post_id, identity.user_id, PostPatch.from_payload(body))
    await db.commit()
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post_endpoint(
    post_id: int,
    identity: Claims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    await delete_post(db, post_id, identity.user_id)
    await db.commit()
    return MessageResponse(message="Post deleted successfully")
