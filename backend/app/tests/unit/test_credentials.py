############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_credentials.py: Unit tests for author accounts and unified login
#
############################################################

"""Unit tests for author signup, credential checks and unified login."""

import pytest

from backend.app.core.access import Role
from backend.app.core.errors import (
    DuplicateEmail,
    EmailInUse,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from backend.app.services import credentials
from backend.app.security.password_hash import verify_password

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, AUTHOR_PASSWORD, make_author


class TestCreateAuthor:
    async def test_creates_with_normalized_email_and_hash(self, db):
        author = await credentials.create_author(db, "  Jane@Example.COM ", "pass123", "Jane")
        assert author.id is not None
        assert author.email == "jane@example.com"
        assert author.password_hash != "pass123"
        assert verify_password("pass123", author.password_hash)
        assert author.social_links == {}

    async def test_duplicate_email_any_case(self, db):
        await credentials.create_author(db, "jane@example.com", "pass123", "Jane")
        with pytest.raises(DuplicateEmail):
            await credentials.create_author(db, "JANE@example.com", "pass456", "Other Jane")

    async def test_admin_email_is_reserved(self, db):
        with pytest.raises(DuplicateEmail):
            await credentials.create_author(db, ADMIN_EMAIL, "pass123", "Impostor")

    @pytest.mark.parametrize("email,password,name", [("", "pass123", "Jane"), ("j@e.com", "", "Jane"), ("j@e.com", "pass123", " ")])
    async def test_missing_fields(self, db, email, password, name):
        with pytest.raises(ValidationError):
            await credentials.create_author(db, email, password, name)


class TestLogin:
    async def test_admin_login(self, db):
        principal = await credentials.login(db, ADMIN_EMAIL.upper(), ADMIN_PASSWORD)
        assert principal.role is Role.ADMIN
        assert principal.id == "admin"

    async def test_admin_wrong_password(self, db):
        with pytest.raises(InvalidCredentials):
            await credentials.login(db, ADMIN_EMAIL, "nope")

    async def test_author_login(self, db):
        author = await make_author(db)
        principal = await credentials.login(db, author.email, AUTHOR_PASSWORD)
        assert principal.role is Role.AUTHOR
        assert principal.author_id == author.id
        assert principal.display_name == author.display_name

    async def test_author_wrong_password(self, db):
        author = await make_author(db)
        with pytest.raises(InvalidCredentials):
            await credentials.login(db, author.email, "wrong-password")

    async def test_unknown_email(self, db):
        with pytest.raises(NotFound):
            await credentials.login(db, "nobody@example.com", "whatever")

    async def test_missing_fields(self, db):
        with pytest.raises(ValidationError):
            await credentials.login(db, "", "whatever")

    async def test_verify_credentials_is_generic_for_unknown_email(self, db):
        with pytest.raises(InvalidCredentials):
            await credentials.verify_credentials(db, "nobody@example.com", "whatever")


class TestUpdateAuthor:
    async def test_update_profile_fields(self, db):
        author = await make_author(db)
        updated = await credentials.update_author(
            db, author.id, {"title": "Editor", "social_links": {"twitter": "@w"}}
        )
        assert updated.title == "Editor"
        assert updated.social_links == {"twitter": "@w"}

    async def test_email_in_use(self, db):
        author = await make_author(db)
        await make_author(db, email="taken@example.com", display_name="Taken")
        with pytest.raises(EmailInUse):
            await credentials.update_author(db, author.id, {"email": "Taken@Example.com"})

    async def test_password_change_rehashes(self, db):
        author = await make_author(db)
        await credentials.update_author(db, author.id, {"password": "new-password"})
        principal = await credentials.login(db, author.email, "new-password")
        assert principal.author_id == author.id

    async def test_blank_display_name(self, db):
        author = await make_author(db)
        with pytest.raises(ValidationError):
            await credentials.update_author(db, author.id, {"display_name": "  "})

    async def test_unknown_author(self, db):
        with pytest.raises(NotFound):
            await credentials.update_author(db, 999, {"title": "x"})

    async def test_delete(self, db):
        author = await make_author(db)
        await credentials.delete_author(db, author.id)
        with pytest.raises(NotFound):
            await credentials.get_author(db, author.id)
