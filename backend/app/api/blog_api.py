############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# blog_api.py: Public blog read and comment endpoints
#
############################################################

"""Public blog endpoints.

No authentication. Only published posts are ever visible here.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.schemas import (
    AuthorProfileResponse,
    CategoryResponse,
    CommentCreateRequest,
    CommentResponse,
    CommentSubmitResponse,
    PopularTagResponse,
    PostDetailResponse,
    PostResponse,
    SubcategoryResponse,
)
from backend.app.db.session import get_async_db
from backend.app.services import credentials, posts, taxonomy
from backend.app.settings import get_settings

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("/posts", response_model=List[PostResponse])
async def list_posts(
    category: Optional[str] = Query(None, description="Category slug"),
    featured: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_async_db),
):
    """Published posts, newest first."""
    items = await posts.list_published_posts(
        db,
        skip=skip,
        limit=limit or get_settings().public_page_size,
        category_slug=category,
        featured=featured,
    )
    return [PostResponse.from_post(p) for p in items]


@router.get("/post/{slug}", response_model=PostDetailResponse)
async def get_post(slug: str, db: AsyncSession = Depends(get_async_db)):
    """One published post with its category and comments."""
    post, comments = await posts.get_published_post(db, slug)
    return PostDetailResponse.from_post_and_comments(post, comments)


@router.post(
    "/post/{post_id}/comments",
    response_model=CommentSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_comment(
    post_id: int,
    request: CommentCreateRequest,
    db: AsyncSession = Depends(get_async_db),
):
    comment = await posts.submit_comment(
        db,
        post_id=post_id,
        name=request.name,
        mail=request.mail,
        number=request.number,
        message=request.message,
        website=request.website,
    )
    return CommentSubmitResponse(comment=CommentResponse.from_comment(comment))


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_async_db)):
    return [CategoryResponse.model_validate(c) for c in await taxonomy.list_categories(db)]


@router.get("/categories/{category_id}/subcategories", response_model=List[SubcategoryResponse])
async def list_subcategories(category_id: int, db: AsyncSession = Depends(get_async_db)):
    return [SubcategoryResponse(**s) for s in await taxonomy.get_subcategories(db, category_id)]


@router.get("/tags", response_model=List[PopularTagResponse])
async def popular_tags(db: AsyncSession = Depends(get_async_db)):
    """Most used tags, by post count."""
    tags = await taxonomy.list_popular_tags(db, limit=get_settings().popular_tag_limit)
    return [PopularTagResponse.model_validate(t) for t in tags]


@router.get("/author/{author_id}", response_model=AuthorProfileResponse)
async def author_profile(author_id: int, db: AsyncSession = Depends(get_async_db)):
    author = await credentials.get_author(db, author_id)
    return AuthorProfileResponse.from_author(author)
