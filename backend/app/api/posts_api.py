############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# posts_api.py: Blog post management endpoints (admin and authors)
#
############################################################

"""Blog post management for admins and authors.

Admins may act on any post; authors only on posts whose snapshot
``author.id`` is their own.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import require_admin_or_author
from backend.app.api.schemas import PostCreateRequest, PostResponse, PostUpdateRequest
from backend.app.core.access import Principal
from backend.app.db.models import PostStatus
from backend.app.db.session import get_async_db
from backend.app.services import posts

router = APIRouter()


@router.get("/blog/posts", response_model=List[PostResponse])
async def list_posts(
    post_status: Optional[PostStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    """All posts in any status for admins; an author's own posts for authors."""
    items = await posts.list_posts_for_principal(db, principal, status=post_status, skip=skip, limit=limit)
    return [PostResponse.from_post(p) for p in items]


@router.get("/blog/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    post = await posts.get_post_for_principal(db, principal, post_id)
    return PostResponse.from_post(post)


@router.post("/blog/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostCreateRequest,
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a post. Admins must pass ``authorId``; authors post as themselves."""
    post = await posts.create_post(db, principal, request.model_dump())
    return PostResponse.from_post(post)


@router.put("/blog/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    request: PostUpdateRequest,
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a post the caller owns (or any post, for admins)."""
    post = await posts.update_post(db, principal, post_id, request.model_dump(exclude_unset=True))
    return PostResponse.from_post(post)


@router.delete("/blog/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a post with its comments and release its category/tag counts."""
    await posts.delete_post(db, principal, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
