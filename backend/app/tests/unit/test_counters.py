############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_counters.py: Unit tests for denormalized counter maintenance
#
############################################################

"""Unit tests for category/tag post counts and post comment counts."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from backend.app.db import crud
from backend.app.db.models import BlogPost, Comment
from backend.app.services import counters, posts

from conftest import make_category, make_tag, post_payload


async def _fresh(db, obj):
    await db.refresh(obj)
    return obj


class TestPostCreatedAndDeleted:
    async def test_create_increments_category_and_each_tag(self, db, admin, author, category):
        python = await make_tag(db, "Python")
        cloud = await make_tag(db, "Cloud")

        await posts.create_post(
            db, admin,
            post_payload(category.id, author_id=author.id, tags=[{"name": "Python"}, {"name": "Cloud"}]),
        )

        assert (await _fresh(db, category)).post_count == 1
        assert (await _fresh(db, python)).post_count == 1
        assert (await _fresh(db, cloud)).post_count == 1

    async def test_unknown_tag_slug_is_not_created(self, db, admin, author, category):
        await posts.create_post(
            db, admin, post_payload(category.id, author_id=author.id, tags=[{"name": "Brand New"}])
        )
        assert await crud.get_tags(db) == []

    async def test_delete_removes_comments_and_uncounts(self, db, admin, author, category):
        tag = await make_tag(db, "Python")
        post = await posts.create_post(
            db, admin, post_payload(category.id, author_id=author.id, tags=[{"name": "Python"}])
        )
        await posts.submit_comment(db, post.id, "Reader", "r@example.com", "555", "Nice")

        await posts.delete_post(db, admin, post.id)

        assert (await _fresh(db, category)).post_count == 0
        assert (await _fresh(db, tag)).post_count == 0
        remaining = await db.execute(select(Comment).where(Comment.post_id == post.id))
        assert remaining.scalars().all() == []
        assert await crud.get_post_by_id(db, post.id) is None

    async def test_decrement_floors_at_zero(self, db, category):
        tag = await make_tag(db, "Python")
        await counters.record_post_reassigned(db, category.id, ["python"], category.id, [])
        await crud.decrement_category_post_count(db, category.id)
        await db.commit()

        assert (await _fresh(db, category)).post_count == 0
        assert (await _fresh(db, tag)).post_count == 0


class TestPostReassigned:
    async def test_category_change_moves_count(self, db, admin, author, category):
        other = await make_category(db, name="Design", slug="design")
        post = await posts.create_post(db, admin, post_payload(category.id, author_id=author.id))

        await posts.update_post(db, admin, post.id, {"category_id": other.id})

        assert (await _fresh(db, category)).post_count == 0
        assert (await _fresh(db, other)).post_count == 1

    async def test_tag_change_moves_only_the_difference(self, db, admin, author, category):
        python = await make_tag(db, "Python")
        cloud = await make_tag(db, "Cloud")
        design = await make_tag(db, "Design")
        post = await posts.create_post(
            db, admin,
            post_payload(category.id, author_id=author.id, tags=[{"name": "Python"}, {"name": "Cloud"}]),
        )

        await posts.update_post(db, admin, post.id, {"tags": [{"name": "Cloud"}, {"name": "Design"}]})

        assert (await _fresh(db, python)).post_count == 0
        assert (await _fresh(db, cloud)).post_count == 1
        assert (await _fresh(db, design)).post_count == 1

    async def test_unrelated_edit_leaves_counts(self, db, admin, author, category):
        tag = await make_tag(db, "Python")
        post = await posts.create_post(
            db, admin, post_payload(category.id, author_id=author.id, tags=[{"name": "Python"}])
        )
        await posts.update_post(db, admin, post.id, {"summary": "Changed"})

        assert (await _fresh(db, category)).post_count == 1
        assert (await _fresh(db, tag)).post_count == 1


class TestComments:
    async def test_comment_increments_post_count(self, db, admin, author, category):
        post = await posts.create_post(db, admin, post_payload(category.id, author_id=author.id))
        await posts.submit_comment(db, post.id, "Reader", "r@example.com", "555", "First")
        await posts.submit_comment(db, post.id, "Reader", "r@example.com", "555", "Second")

        fresh = await db.execute(
            select(BlogPost).where(BlogPost.id == post.id).execution_options(populate_existing=True)
        )
        assert fresh.scalar_one().comment_count == 2


class TestPartialFailure:
    async def test_committed_steps_survive_a_failing_step(self, db, admin, author, category, monkeypatch):
        tag = await make_tag(db, "Python")

        async def broken(*args, **kwargs):
            raise OperationalError("UPDATE tags", {}, Exception("connection lost"))

        monkeypatch.setattr(crud, "increment_tag_post_count", broken)

        with pytest.raises(OperationalError):
            await counters.record_post_created(db, category.id, ["python"])

        # Category step committed before the tag step failed; nothing undoes it
        assert (await _fresh(db, category)).post_count == 1
        assert (await _fresh(db, tag)).post_count == 0
