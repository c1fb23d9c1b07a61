############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# authors_api.py: Author signup and management endpoints
#
############################################################

"""Author signup and management."""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import require_admin, require_admin_or_author, require_author
from backend.app.api.schemas import AuthorCreateRequest, AuthorResponse, AuthorUpdateRequest
from backend.app.core.access import Principal
from backend.app.db.session import get_async_db
from backend.app.logging_config import get_logger
from backend.app.services import credentials

logger = get_logger(__name__)
router = APIRouter()


def _update_fields(request: AuthorUpdateRequest) -> dict:
    # Only fields present in the body; an explicit null clears optional fields
    return request.model_dump(exclude_unset=True)


@router.post("/authors", response_model=AuthorResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: AuthorCreateRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Public author signup."""
    author = await credentials.create_author(
        db,
        email=request.email,
        password=request.password,
        display_name=request.display_name,
        title=request.title,
        bio=request.bio,
        profile_image=request.profile_image,
        social_links=request.social_links.model_dump() if request.social_links else None,
    )
    return AuthorResponse.from_author(author)


@router.get("/authors", response_model=List[AuthorResponse])
async def list_authors(
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    """List all authors ordered by display name."""
    return [AuthorResponse.from_author(a) for a in await credentials.list_authors(db)]


@router.put("/authors/me", response_model=AuthorResponse)
async def update_own_profile(
    request: AuthorUpdateRequest,
    principal: Principal = Depends(require_author),
    db: AsyncSession = Depends(get_async_db),
):
    """Authors edit their own profile. Existing posts keep their author snapshot."""
    author = await credentials.update_author(db, principal.author_id, _update_fields(request))
    return AuthorResponse.from_author(author)


@router.put("/authors/{author_id}", response_model=AuthorResponse)
async def update_author(
    author_id: int,
    request: AuthorUpdateRequest,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Admin: update any author."""
    author = await credentials.update_author(db, author_id, _update_fields(request))
    logger.info("author_updated_by_admin", author_id=author_id)
    return AuthorResponse.from_author(author)


@router.delete("/authors/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_author(
    author_id: int,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Admin: delete an author. Their posts remain with the stored snapshot."""
    await credentials.delete_author(db, author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
