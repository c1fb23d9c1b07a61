############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# crud.py: Database CRUD operations for all entities
#
############################################################

"""Database CRUD operations for Xarwiz CMS.

These helpers only read and write rows; they flush but never commit. Commit
boundaries, uniqueness errors and counter maintenance live in ``services``.
"""

from typing import List, Optional

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Author, BlogPost, Category, Comment, PostStatus, Tag


def _decremented(column):
    """``column - 1`` floored at zero."""
    return case((column > 0, column - 1), else_=0)


# Author CRUD
async def get_author_by_id(db: AsyncSession, author_id: int) -> Optional[Author]:
    """Get author by ID."""
    result = await db.execute(select(Author).where(Author.id == author_id))
    return result.scalar_one_or_none()


async def get_author_by_email(db: AsyncSession, email: str) -> Optional[Author]:
    """Get author by email (callers pass the normalized, lowercased address)."""
    result = await db.execute(select(Author).where(Author.email == email))
    return result.scalar_one_or_none()


async def get_authors(db: AsyncSession) -> List[Author]:
    """Get all authors ordered by display name."""
    result = await db.execute(select(Author).order_by(Author.display_name))
    return list(result.scalars().all())


async def create_author(
    db: AsyncSession,
    email: str,
    password_hash: str,
    display_name: str,
    title: Optional[str] = None,
    bio: Optional[str] = None,
    profile_image: Optional[str] = None,
    social_links: Optional[dict] = None,
) -> Author:
    """Create a new author."""
    author = Author(
        email=email,
        password_hash=password_hash,
        display_name=display_name,
        title=title,
        bio=bio,
        profile_image=profile_image,
        social_links=social_links or {},
    )
    db.add(author)
    await db.flush()
    return author


async def update_author(db: AsyncSession, author: Author, **kwargs) -> Author:
    """Apply field updates to an author."""
    for key, value in kwargs.items():
        setattr(author, key, value)
    await db.flush()
    return author


async def delete_author(db: AsyncSession, author_id: int) -> bool:
    """Delete an author. Their posts keep the author snapshot."""
    result = await db.execute(delete(Author).where(Author.id == author_id))
    await db.flush()
    return result.rowcount > 0


# Category CRUD
async def get_category_by_id(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.slug == slug))
    return result.scalar_one_or_none()


async def get_categories(db: AsyncSession) -> List[Category]:
    """Get all categories ordered by name."""
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def find_category_conflict(
    db: AsyncSession, name: str, slug: str, exclude_id: Optional[int] = None
) -> Optional[Category]:
    """Find another category already using ``name`` or ``slug``."""
    query = select(Category).where(or_(Category.name == name, Category.slug == slug))
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def create_category(
    db: AsyncSession, name: str, slug: str, subcategories: Optional[list] = None
) -> Category:
    category = Category(name=name, slug=slug, subcategories=subcategories or [], post_count=0)
    db.add(category)
    await db.flush()
    return category


async def delete_category(db: AsyncSession, category_id: int) -> bool:
    result = await db.execute(delete(Category).where(Category.id == category_id))
    await db.flush()
    return result.rowcount > 0


async def count_posts_in_category(db: AsyncSession, category_id: int) -> int:
    """Count actual posts referencing a category (authoritative, not the cache)."""
    result = await db.execute(
        select(func.count(BlogPost.id)).where(BlogPost.category_id == category_id)
    )
    return result.scalar_one()


# Tag CRUD
async def get_tag_by_id(db: AsyncSession, tag_id: int) -> Optional[Tag]:
    result = await db.execute(select(Tag).where(Tag.id == tag_id))
    return result.scalar_one_or_none()


async def get_tags(db: AsyncSession) -> List[Tag]:
    """Get all tags ordered by name."""
    result = await db.execute(select(Tag).order_by(Tag.name))
    return list(result.scalars().all())


async def get_popular_tags(db: AsyncSession, limit: int = 20) -> List[Tag]:
    """Get the most used tags."""
    result = await db.execute(
        select(Tag).order_by(Tag.post_count.desc(), Tag.name).limit(limit)
    )
    return list(result.scalars().all())


async def find_tag_conflict(
    db: AsyncSession, name: str, slug: str, exclude_id: Optional[int] = None
) -> Optional[Tag]:
    """Find another tag already using ``name`` or ``slug``."""
    query = select(Tag).where(or_(Tag.name == name, Tag.slug == slug))
    if exclude_id is not None:
        query = query.where(Tag.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def create_tag(db: AsyncSession, name: str, slug: str) -> Tag:
    tag = Tag(name=name, slug=slug, post_count=0)
    db.add(tag)
    await db.flush()
    return tag


async def delete_tag(db: AsyncSession, tag_id: int) -> bool:
    result = await db.execute(delete(Tag).where(Tag.id == tag_id))
    await db.flush()
    return result.rowcount > 0


# Blog post CRUD
async def get_post_by_id(db: AsyncSession, post_id: int) -> Optional[BlogPost]:
    result = await db.execute(select(BlogPost).where(BlogPost.id == post_id))
    return result.scalar_one_or_none()


async def get_published_post_by_slug(db: AsyncSession, slug: str) -> Optional[BlogPost]:
    """Get a published post by slug; drafts and archived posts are invisible."""
    result = await db.execute(
        select(BlogPost).where(
            BlogPost.slug == slug,
            BlogPost.status == PostStatus.PUBLISHED,
        )
    )
    return result.scalar_one_or_none()


async def get_published_posts(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    category_slug: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[BlogPost]:
    """Get published posts, newest first.

    The status filter is applied unconditionally; other filters only narrow it.
    """
    query = select(BlogPost).where(BlogPost.status == PostStatus.PUBLISHED)
    if category_slug:
        query = query.join(Category, BlogPost.category_id == Category.id).where(
            Category.slug == category_slug
        )
    if featured is not None:
        query = query.where(BlogPost.is_featured == featured)
    query = query.order_by(BlogPost.publish_date.desc(), BlogPost.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.unique().scalars().all())


async def get_posts(
    db: AsyncSession,
    author_id: Optional[int] = None,
    status: Optional[PostStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[BlogPost]:
    """Get posts in any status (admin views), optionally for one author."""
    query = select(BlogPost)
    if author_id is not None:
        query = query.where(BlogPost.author_id == author_id)
    if status is not None:
        query = query.where(BlogPost.status == status)
    query = query.order_by(BlogPost.publish_date.desc(), BlogPost.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.unique().scalars().all())


async def find_post_conflict(
    db: AsyncSession, title: str, slug: str, exclude_id: Optional[int] = None
) -> Optional[BlogPost]:
    """Find another post already using ``title`` or ``slug``."""
    query = select(BlogPost).where(or_(BlogPost.title == title, BlogPost.slug == slug))
    if exclude_id is not None:
        query = query.where(BlogPost.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.unique().scalar_one_or_none()


async def create_post(db: AsyncSession, **fields) -> BlogPost:
    post = BlogPost(**fields)
    db.add(post)
    await db.flush()
    return post


async def delete_post(db: AsyncSession, post_id: int) -> bool:
    """Hard-delete a post row. Comments must be removed first (FK)."""
    result = await db.execute(delete(BlogPost).where(BlogPost.id == post_id))
    await db.flush()
    return result.rowcount > 0


# Comment CRUD
async def get_post_comments(db: AsyncSession, post_id: int) -> List[Comment]:
    """Get comments for a post, oldest first."""
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
    )
    return list(result.scalars().all())


async def create_comment(db: AsyncSession, **fields) -> Comment:
    comment = Comment(**fields)
    db.add(comment)
    await db.flush()
    return comment


async def delete_post_comments(db: AsyncSession, post_id: int) -> int:
    """Delete every comment of a post, returning the number removed."""
    result = await db.execute(delete(Comment).where(Comment.post_id == post_id))
    await db.flush()
    return result.rowcount


# Counters
#
# Single-row atomic UPDATEs. They do not synchronize in-session objects;
# callers re-read rows when they need the new value.
async def increment_category_post_count(db: AsyncSession, category_id: int) -> int:
    result = await db.execute(
        update(Category)
        .where(Category.id == category_id)
        .values(post_count=Category.post_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def decrement_category_post_count(db: AsyncSession, category_id: int) -> int:
    result = await db.execute(
        update(Category)
        .where(Category.id == category_id)
        .values(post_count=_decremented(Category.post_count))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def increment_tag_post_count(db: AsyncSession, slug: str) -> int:
    """Increment the tag with this slug; an unknown slug matches nothing."""
    result = await db.execute(
        update(Tag)
        .where(Tag.slug == slug)
        .values(post_count=Tag.post_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def decrement_tag_post_count(db: AsyncSession, slug: str) -> int:
    result = await db.execute(
        update(Tag)
        .where(Tag.slug == slug)
        .values(post_count=_decremented(Tag.post_count))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def increment_post_comment_count(db: AsyncSession, post_id: int) -> int:
    result = await db.execute(
        update(BlogPost)
        .where(BlogPost.id == post_id)
        .values(comment_count=BlogPost.comment_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
