############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# counters.py: Denormalized post/comment counter maintenance
#
############################################################

"""Counter consistency engine.

Owns ``Category.post_count``, ``Tag.post_count`` and ``BlogPost.comment_count``.
Nothing else may write these columns, and post category/tag changes must come
through here so the caches follow membership.

Every step is its own committed, single-row atomic UPDATE. A failing step is
rolled back alone; steps that already committed stay committed. The counts are
therefore display aggregates that can drift after partial failures, not ledger
values. Decrements floor at zero.

Tags are matched by slug. A snapshot slug with no Tag row is a no-op: tags are
never created from posts.
"""

from typing import Awaitable, Callable, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.metrics import COUNTER_ADJUSTMENTS
from backend.app.db import crud
from backend.app.db.models import BlogPost
from backend.app.logging_config import get_logger

logger = get_logger(__name__)


async def _step(
    db: AsyncSession,
    name: str,
    action: Callable[[], Awaitable[int]],
    entity: Optional[str] = None,
    direction: Optional[str] = None,
    **context,
) -> int:
    """Run one persistence step and commit it on its own."""
    try:
        rows = await action()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("counter_step_failed", step=name, error=str(e), **context)
        raise
    if entity and rows:
        COUNTER_ADJUSTMENTS.labels(entity=entity, direction=direction).inc(rows)
    logger.debug("counter_adjusted", step=name, rows=rows, **context)
    return rows


def _unique(slugs: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(s for s in slugs if s))


async def record_post_created(db: AsyncSession, category_id: int, tag_slugs: Iterable[str]) -> None:
    """Count a newly created post in its category and each of its tags."""
    await _step(
        db, "category_inc",
        lambda: crud.increment_category_post_count(db, category_id),
        entity="category", direction="inc", category_id=category_id,
    )
    for slug in _unique(tag_slugs):
        await _step(
            db, "tag_inc",
            lambda slug=slug: crud.increment_tag_post_count(db, slug),
            entity="tag", direction="inc", tag_slug=slug,
        )


async def record_post_reassigned(
    db: AsyncSession,
    old_category_id: int,
    old_tag_slugs: Iterable[str],
    new_category_id: int,
    new_tag_slugs: Iterable[str],
) -> None:
    """Move a post's contribution after its category or tags were edited."""
    if old_category_id != new_category_id:
        await _step(
            db, "category_dec",
            lambda: crud.decrement_category_post_count(db, old_category_id),
            entity="category", direction="dec", category_id=old_category_id,
        )
        await _step(
            db, "category_inc",
            lambda: crud.increment_category_post_count(db, new_category_id),
            entity="category", direction="inc", category_id=new_category_id,
        )

    old_slugs = _unique(old_tag_slugs)
    new_slugs = _unique(new_tag_slugs)
    for slug in old_slugs:
        if slug not in new_slugs:
            await _step(
                db, "tag_dec",
                lambda slug=slug: crud.decrement_tag_post_count(db, slug),
                entity="tag", direction="dec", tag_slug=slug,
            )
    for slug in new_slugs:
        if slug not in old_slugs:
            await _step(
                db, "tag_inc",
                lambda slug=slug: crud.increment_tag_post_count(db, slug),
                entity="tag", direction="inc", tag_slug=slug,
            )


async def record_post_deleted(db: AsyncSession, post: BlogPost) -> int:
    """
    Delete a post with its comments, then uncount it.

    Returns:
        Number of comments removed
    """
    post_id = post.id
    category_id = post.category_id
    tag_slugs = list(post.tag_slugs)

    async def _remove() -> int:
        # Comments first: comments.post_id references blog_posts.id
        removed = await crud.delete_post_comments(db, post_id)
        await crud.delete_post(db, post_id)
        return removed

    removed = await _step(db, "post_delete", _remove, post_id=post_id)
    await _step(
        db, "category_dec",
        lambda: crud.decrement_category_post_count(db, category_id),
        entity="category", direction="dec", category_id=category_id,
    )
    for slug in _unique(tag_slugs):
        await _step(
            db, "tag_dec",
            lambda slug=slug: crud.decrement_tag_post_count(db, slug),
            entity="tag", direction="dec", tag_slug=slug,
        )
    return removed


async def record_comment_added(db: AsyncSession, post_id: int) -> None:
    """Count one new comment on a post. Comments are never uncounted."""
    await _step(
        db, "comment_inc",
        lambda: crud.increment_post_comment_count(db, post_id),
        entity="post", direction="inc", post_id=post_id,
    )
