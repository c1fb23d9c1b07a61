############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_access.py: Unit tests for roles, principals and post ownership
#
############################################################

"""Unit tests for role checks and post ownership."""

import pytest

from backend.app.core.access import (
    ADMIN_SUBJECT,
    AccessLevel,
    Principal,
    Role,
    can_mutate_post,
)
from backend.app.db.models import Author, BlogPost


def _author(author_id: int, name: str = "Writer") -> Author:
    return Author(id=author_id, email=f"a{author_id}@example.com", password_hash="x", display_name=name)


class TestAccessLevel:
    """Tests for which roles each guard admits."""

    @pytest.mark.parametrize(
        "level,role,expected",
        [
            (AccessLevel.ADMIN, Role.ADMIN, True),
            (AccessLevel.ADMIN, Role.AUTHOR, False),
            (AccessLevel.AUTHOR, Role.AUTHOR, True),
            (AccessLevel.AUTHOR, Role.ADMIN, False),
            (AccessLevel.EITHER, Role.ADMIN, True),
            (AccessLevel.EITHER, Role.AUTHOR, True),
        ],
    )
    def test_permits(self, level, role, expected):
        assert level.permits(role) is expected


class TestPrincipal:
    def test_admin_principal_uses_sentinel_id(self):
        admin = Principal.for_admin("admin@xarwiz.test")
        assert admin.id == ADMIN_SUBJECT
        assert admin.is_admin
        assert admin.author_id is None

    def test_author_principal_carries_numeric_id(self):
        principal = Principal.for_author(_author(7))
        assert principal.id == "7"
        assert principal.author_id == 7
        assert principal.role is Role.AUTHOR
        assert not principal.is_admin


class TestCanMutatePost:
    """Ownership is decided by the snapshot author id on the post."""

    def test_admin_may_mutate_any_post(self):
        post = BlogPost(author_id=42)
        assert can_mutate_post(Principal.for_admin("admin@xarwiz.test"), post)

    def test_owner_may_mutate(self):
        post = BlogPost(author_id=3)
        assert can_mutate_post(Principal.for_author(_author(3)), post)

    def test_other_author_may_not_mutate(self):
        post = BlogPost(author_id=3)
        assert not can_mutate_post(Principal.for_author(_author(4)), post)

    def test_display_name_does_not_grant_ownership(self):
        post = BlogPost(author_id=3, author_display_name="Same Name")
        assert not can_mutate_post(Principal.for_author(_author(4, "Same Name")), post)
