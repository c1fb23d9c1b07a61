############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# taxonomy_api.py: Category and tag management endpoints
#
############################################################

"""Category and tag management (reads for both roles, writes for admins)."""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import require_admin, require_admin_or_author
from backend.app.api.schemas import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    TagCreateRequest,
    TagResponse,
    TagUpdateRequest,
)
from backend.app.core.access import Principal
from backend.app.db.session import get_async_db
from backend.app.services import taxonomy

router = APIRouter()


# Categories
@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    return [CategoryResponse.model_validate(c) for c in await taxonomy.list_categories(db)]


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreateRequest,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await taxonomy.create_category(
        db,
        name=request.name,
        slug=request.slug,
        subcategories=[s.model_dump() for s in request.subcategories],
    )
    return CategoryResponse.model_validate(category)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    request: CategoryUpdateRequest,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await taxonomy.update_category(db, category_id, request.model_dump(exclude_unset=True))
    return CategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await taxonomy.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Tags
@router.get("/tags", response_model=List[TagResponse])
async def list_tags(
    principal: Principal = Depends(require_admin_or_author),
    db: AsyncSession = Depends(get_async_db),
):
    return [TagResponse.model_validate(t) for t in await taxonomy.list_tags(db)]


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: TagCreateRequest,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tag = await taxonomy.create_tag(db, name=request.name, slug=request.slug)
    return TagResponse.model_validate(tag)


@router.put("/tags/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    request: TagUpdateRequest,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tag = await taxonomy.update_tag(db, tag_id, request.model_dump(exclude_unset=True))
    return TagResponse.model_validate(tag)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: int,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await taxonomy.delete_tag(db, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
