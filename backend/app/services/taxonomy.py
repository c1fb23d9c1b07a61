############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# taxonomy.py: Category and tag management
#
############################################################

"""Category and tag management.

``post_count`` is never accepted from callers; it starts at zero and is moved
only by ``services.counters``. Renaming a tag does not rewrite the tag
snapshots already stored on posts, and posts keep counting against the slug
they captured.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import DuplicateError, DuplicateName, DuplicateSlug, NotFound, ValidationError
from backend.app.core.slugs import dedupe_by_slug, require_slug
from backend.app.db import crud
from backend.app.db.models import Category, Tag
from backend.app.logging_config import get_logger

logger = get_logger(__name__)


def _raise_conflict(conflict, name: str, kind: str) -> None:
    if conflict.name == name:
        raise DuplicateName(f"{kind} name already exists.")
    raise DuplicateSlug(f"{kind} slug already exists.")


def _normalize_subcategories(subcategories: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    if subcategories is None:
        return []
    if not isinstance(subcategories, list):
        raise ValidationError("subcategories must be a list")
    result = []
    for sub in subcategories:
        name = (sub.get("name") or "").strip()
        if not name:
            raise ValidationError("Subcategory name is required.")
        result.append({"name": name, "slug": require_slug(sub.get("slug"), name)})
    return dedupe_by_slug(result)


# Categories
async def list_categories(db: AsyncSession) -> List[Category]:
    return await crud.get_categories(db)


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await crud.get_category_by_id(db, category_id)
    if category is None:
        raise NotFound("Category not found.")
    return category


async def create_category(
    db: AsyncSession,
    name: Optional[str],
    slug: Optional[str] = None,
    subcategories: Optional[List[Dict[str, Any]]] = None,
) -> Category:
    """
    Create a category.

    Raises:
        ValidationError: missing name
        DuplicateName / DuplicateSlug: name or slug already used
    """
    if not name or not name.strip():
        raise ValidationError("Name and slug are required.")
    name = name.strip()
    slug = require_slug(slug, name)

    conflict = await crud.find_category_conflict(db, name, slug)
    if conflict is not None:
        _raise_conflict(conflict, name, "Category")

    try:
        category = await crud.create_category(
            db, name=name, slug=slug, subcategories=_normalize_subcategories(subcategories)
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("Category name or slug already exists.")

    await db.refresh(category)
    logger.info("category_created", category_id=category.id, slug=slug)
    return category


async def update_category(db: AsyncSession, category_id: int, fields: Dict[str, Any]) -> Category:
    category = await get_category(db, category_id)

    name = category.name
    slug = category.slug
    if "name" in fields:
        if not fields["name"] or not fields["name"].strip():
            raise ValidationError("Category name cannot be empty.")
        name = fields["name"].strip()
    if "slug" in fields:
        slug = require_slug(fields["slug"], name)

    if name != category.name or slug != category.slug:
        conflict = await crud.find_category_conflict(db, name, slug, exclude_id=category.id)
        if conflict is not None:
            _raise_conflict(conflict, name, "Category")

    category.name = name
    category.slug = slug
    if "subcategories" in fields:
        category.subcategories = _normalize_subcategories(fields["subcategories"])

    try:
        await db.flush()
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("Category name or slug already exists.")

    await db.refresh(category)
    logger.info("category_updated", category_id=category.id)
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    """Delete a category that no post references."""
    await get_category(db, category_id)
    in_use = await crud.count_posts_in_category(db, category_id)
    if in_use:
        raise ValidationError(
            f"Category still has {in_use} post(s); move or delete them first."
        )
    await crud.delete_category(db, category_id)
    await db.commit()
    logger.info("category_deleted", category_id=category_id)


async def get_subcategories(db: AsyncSession, category_id: int) -> List[Dict[str, str]]:
    category = await get_category(db, category_id)
    return list(category.subcategories or [])


# Tags
async def list_tags(db: AsyncSession) -> List[Tag]:
    return await crud.get_tags(db)


async def list_popular_tags(db: AsyncSession, limit: int) -> List[Tag]:
    return await crud.get_popular_tags(db, limit=limit)


async def get_tag(db: AsyncSession, tag_id: int) -> Tag:
    tag = await crud.get_tag_by_id(db, tag_id)
    if tag is None:
        raise NotFound("Tag not found.")
    return tag


async def create_tag(db: AsyncSession, name: Optional[str], slug: Optional[str] = None) -> Tag:
    """
    Create a tag with a zero post count.

    Posts written earlier that already carry this slug are not counted
    retroactively.
    """
    if not name or not name.strip():
        raise ValidationError("Name and slug are required.")
    name = name.strip()
    slug = require_slug(slug, name)

    conflict = await crud.find_tag_conflict(db, name, slug)
    if conflict is not None:
        _raise_conflict(conflict, name, "Tag")

    try:
        tag = await crud.create_tag(db, name=name, slug=slug)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("Tag with this name or slug already exists.")

    await db.refresh(tag)
    logger.info("tag_created", tag_id=tag.id, slug=slug)
    return tag


async def update_tag(db: AsyncSession, tag_id: int, fields: Dict[str, Any]) -> Tag:
    tag = await get_tag(db, tag_id)

    name = tag.name
    slug = tag.slug
    if "name" in fields:
        if not fields["name"] or not fields["name"].strip():
            raise ValidationError("Tag name cannot be empty.")
        name = fields["name"].strip()
    if "slug" in fields:
        slug = require_slug(fields["slug"], name)

    if name != tag.name or slug != tag.slug:
        conflict = await crud.find_tag_conflict(db, name, slug, exclude_id=tag.id)
        if conflict is not None:
            _raise_conflict(conflict, name, "Tag")

    if slug != tag.slug:
        logger.warning("tag_slug_changed", tag_id=tag.id, old_slug=tag.slug, new_slug=slug)
    tag.name = name
    tag.slug = slug

    try:
        await db.flush()
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("Tag with this name or slug already exists.")

    await db.refresh(tag)
    logger.info("tag_updated", tag_id=tag.id)
    return tag


async def delete_tag(db: AsyncSession, tag_id: int) -> None:
    """Delete a tag. Post snapshots naming it are left in place."""
    deleted = await crud.delete_tag(db, tag_id)
    if not deleted:
        raise NotFound("Tag not found.")
    await db.commit()
    logger.info("tag_deleted", tag_id=tag_id)
