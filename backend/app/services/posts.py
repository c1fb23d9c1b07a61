############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# posts.py: Blog post and comment workflows
#
############################################################

"""Blog post and comment workflows.

Write paths check ownership, enforce title/slug uniqueness, snapshot the
author and tags, and hand counter maintenance to ``services.counters``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.access import Principal, Role, can_mutate_post
from backend.app.core.errors import (
    DuplicateError,
    DuplicateSlug,
    DuplicateTitle,
    Forbidden,
    NotFound,
    ValidationError,
)
from backend.app.core.metrics import POSTS_MUTATED
from backend.app.core.slugs import dedupe_by_slug, require_slug, resolve_slug
from backend.app.db import crud
from backend.app.db.models import Author, BlogPost, Comment, PostStatus
from backend.app.logging_config import get_logger
from backend.app.services import counters

logger = get_logger(__name__)

_REQUIRED_TEXT = ("title", "summary", "content", "image_url")
_UPDATABLE = (
    "title", "slug", "summary", "content", "image_url", "read_time",
    "category_id", "tags", "is_featured", "status", "publish_date",
)


def normalize_tags(tags: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, str]]:
    """Turn input tags into ``{name, slug}`` snapshots, one per slug."""
    snapshots = []
    for tag in tags or []:
        name = (tag.get("name") or "").strip()
        slug = (tag.get("slug") or "").strip()
        if not name and not slug:
            continue
        slug = resolve_slug(slug, name)
        if not slug:
            continue
        snapshots.append({"name": name or slug, "slug": slug})
    return dedupe_by_slug(snapshots)


def _author_snapshot(author: Author) -> Dict[str, Any]:
    return {
        "author_id": author.id,
        "author_display_name": author.display_name,
        "author_profile_image": author.profile_image,
    }


async def _check_unique(
    db: AsyncSession, title: str, slug: str, exclude_id: Optional[int] = None
) -> None:
    conflict = await crud.find_post_conflict(db, title, slug, exclude_id=exclude_id)
    if conflict is None:
        return
    if conflict.title == title:
        raise DuplicateTitle("A post with this title already exists.")
    raise DuplicateSlug("A post with this slug already exists.")


async def _resolve_post_author(
    db: AsyncSession, principal: Principal, author_id: Optional[int]
) -> Author:
    """Authors always post as themselves; admins must name the author."""
    if principal.role is Role.AUTHOR:
        return principal.author or await crud.get_author_by_id(db, principal.author_id)
    if principal.role is Role.ADMIN:
        if not author_id:
            raise ValidationError("Admin must provide an 'authorId' to create a post.")
        author = await crud.get_author_by_id(db, author_id)
        if author is None:
            raise NotFound("The specified author was not found.")
        return author
    raise Forbidden("Not authorized to create a post.")


async def _load_category(db: AsyncSession, category_id: Optional[int]):
    if not category_id:
        raise ValidationError("category is required")
    category = await crud.get_category_by_id(db, category_id)
    if category is None:
        raise NotFound("Category not found.")
    return category


async def create_post(db: AsyncSession, principal: Principal, data: Dict[str, Any]) -> BlogPost:
    """
    Create a post and count it in its category and tags.

    Raises:
        ValidationError: required fields missing, or admin without authorId
        NotFound: author or category does not exist
        DuplicateTitle / DuplicateSlug: uniqueness violated
    """
    for field in _REQUIRED_TEXT:
        if not (data.get(field) or "").strip():
            raise ValidationError(f"{field} is required")
    if data.get("read_time") is None:
        raise ValidationError("read_time is required")

    author = await _resolve_post_author(db, principal, data.get("author_id"))
    category = await _load_category(db, data.get("category_id"))

    title = data["title"].strip()
    slug = require_slug(data.get("slug"), title)
    await _check_unique(db, title, slug)

    tags = normalize_tags(data.get("tags"))
    try:
        post = await crud.create_post(
            db,
            title=title,
            slug=slug,
            summary=data["summary"],
            content=data["content"],
            image_url=data["image_url"],
            read_time=data["read_time"],
            publish_date=data.get("publish_date") or datetime.now(timezone.utc),
            category=category,
            tags=tags,
            is_featured=bool(data.get("is_featured", False)),
            status=data.get("status") or PostStatus.PUBLISHED,
            comment_count=0,
            **_author_snapshot(author),
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("A post with this title or slug already exists.")

    await db.refresh(post)
    POSTS_MUTATED.labels(action="create", role=principal.role.value).inc()
    logger.info(
        "post_created",
        post_id=post.id,
        author_id=author.id,
        category_id=category.id,
        tags=[t["slug"] for t in tags],
        by=principal.role.value,
    )

    await counters.record_post_created(db, category.id, [t["slug"] for t in tags])
    await db.refresh(post)
    return post


async def _get_mutable_post(db: AsyncSession, principal: Principal, post_id: int, action: str) -> BlogPost:
    post = await crud.get_post_by_id(db, post_id)
    if post is None:
        raise NotFound("Post not found.")
    if not can_mutate_post(principal, post):
        logger.warning(
            "post_access_denied",
            post_id=post_id,
            principal_id=principal.id,
            owner_id=post.author_id,
            action=action,
        )
        raise Forbidden(f"Not authorized to {action} this post.")
    return post


async def update_post(
    db: AsyncSession, principal: Principal, post_id: int, data: Dict[str, Any]
) -> BlogPost:
    """
    Apply a partial update to a post the principal may mutate.

    Category and tag changes move the denormalized counts. The author snapshot
    is left as it was captured at creation.
    """
    post = await _get_mutable_post(db, principal, post_id, "update")

    changes = {k: v for k, v in data.items() if k in _UPDATABLE}
    for field in _REQUIRED_TEXT:
        if field in changes and not (changes[field] or "").strip():
            raise ValidationError(f"{field} cannot be empty")
    for field in ("read_time", "status", "is_featured", "publish_date"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    old_category_id = post.category_id
    old_tag_slugs = list(post.tag_slugs)

    if "category_id" in changes and changes["category_id"] != post.category_id:
        changes["category"] = await _load_category(db, changes["category_id"])
    changes.pop("category_id", None)

    if "title" in changes:
        changes["title"] = changes["title"].strip()
    if "slug" in changes:
        changes["slug"] = require_slug(changes["slug"], changes.get("title", post.title))
    if "title" in changes or "slug" in changes:
        await _check_unique(
            db,
            changes.get("title", post.title),
            changes.get("slug", post.slug),
            exclude_id=post.id,
        )

    if "tags" in changes:
        changes["tags"] = normalize_tags(changes["tags"])

    try:
        for key, value in changes.items():
            setattr(post, key, value)
        await db.flush()
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateError("A post with this title or slug already exists.")

    await db.refresh(post)
    POSTS_MUTATED.labels(action="update", role=principal.role.value).inc()
    logger.info("post_updated", post_id=post.id, fields=sorted(changes), by=principal.role.value)

    if post.category_id != old_category_id or post.tag_slugs != old_tag_slugs:
        await counters.record_post_reassigned(
            db, old_category_id, old_tag_slugs, post.category_id, post.tag_slugs
        )
        await db.refresh(post)
    return post


async def delete_post(db: AsyncSession, principal: Principal, post_id: int) -> None:
    """Delete a post the principal may mutate, with its comments and counts."""
    post = await _get_mutable_post(db, principal, post_id, "delete")
    removed = await counters.record_post_deleted(db, post)
    POSTS_MUTATED.labels(action="delete", role=principal.role.value).inc()
    logger.info("post_deleted", post_id=post_id, comments_removed=removed, by=principal.role.value)


async def get_post_for_principal(db: AsyncSession, principal: Principal, post_id: int) -> BlogPost:
    """Admin view of a single post in any status (owners only for authors)."""
    return await _get_mutable_post(db, principal, post_id, "view")


async def list_posts_for_principal(
    db: AsyncSession,
    principal: Principal,
    status: Optional[PostStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[BlogPost]:
    """All posts for admins; only their own posts for authors."""
    author_id = None if principal.is_admin else principal.author_id
    return await crud.get_posts(db, author_id=author_id, status=status, skip=skip, limit=limit)


# Public reads
async def list_published_posts(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    category_slug: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[BlogPost]:
    return await crud.get_published_posts(
        db, skip=skip, limit=limit, category_slug=category_slug, featured=featured
    )


async def get_published_post(db: AsyncSession, slug: str) -> Tuple[BlogPost, List[Comment]]:
    post = await crud.get_published_post_by_slug(db, slug)
    if post is None:
        raise NotFound("Blog post not found.")
    comments = await crud.get_post_comments(db, post.id)
    return post, comments


async def submit_comment(
    db: AsyncSession,
    post_id: int,
    name: str,
    mail: str,
    number: str,
    message: str,
    website: Optional[str] = None,
) -> Comment:
    """
    Store a public comment and count it on the post.

    Only published posts accept comments.
    """
    if not all(v and v.strip() for v in (name, mail, number, message)):
        raise ValidationError("Name, email, number, and message are required fields.")

    post = await crud.get_post_by_id(db, post_id)
    if post is None or post.status != PostStatus.PUBLISHED:
        raise NotFound("Blog post not found.")

    comment = await crud.create_comment(
        db,
        post_id=post_id,
        author_name=name.strip(),
        author_email=mail.strip().lower(),
        author_number=number.strip(),
        author_website=(website or "").strip() or None,
        content=message.strip(),
    )
    await db.commit()
    await db.refresh(comment)
    logger.info("comment_submitted", post_id=post_id, comment_id=comment.id)

    await counters.record_comment_added(db, post_id)
    return comment
