############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# credentials.py: Author credential store and unified login
#
############################################################

"""Author credential store and unified login.

Authors are the only persisted login identity. The admin is a single
credential pair from configuration and is checked before any author lookup.
"""

import secrets
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.access import Principal, Role
from backend.app.core.errors import (
    DuplicateEmail,
    EmailInUse,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from backend.app.core.metrics import LOGIN_ATTEMPTS
from backend.app.db import crud
from backend.app.db.models import Author
from backend.app.logging_config import get_logger
from backend.app.security.password_hash import (
    burn_verification,
    hash_password,
    needs_rehash,
    verify_password,
)
from backend.app.settings import get_settings

logger = get_logger(__name__)

# Fields an update may replace directly (besides email and password)
_PROFILE_FIELDS = ("display_name", "title", "bio", "profile_image", "social_links")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _require(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


async def create_author(
    db: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    display_name: Optional[str],
    title: Optional[str] = None,
    bio: Optional[str] = None,
    profile_image: Optional[str] = None,
    social_links: Optional[Dict[str, Any]] = None,
) -> Author:
    """
    Register a new author.

    Raises:
        ValidationError: email, password or display name missing
        DuplicateEmail: an author already uses this email (any case)
    """
    if not email or not password or not display_name or not display_name.strip():
        raise ValidationError("Email, password, and display name are required.")

    email = normalize_email(email)
    # The admin address would shadow the author at login
    if email == get_settings().admin_email or await crud.get_author_by_email(db, email):
        raise DuplicateEmail()

    try:
        author = await crud.create_author(
            db,
            email=email,
            password_hash=hash_password(password),
            display_name=display_name.strip(),
            title=title,
            bio=bio,
            profile_image=profile_image,
            social_links=social_links,
        )
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email
        await db.rollback()
        raise DuplicateEmail()

    await db.refresh(author)
    logger.info("author_created", author_id=author.id)
    return author


async def verify_credentials(db: AsyncSession, email: Optional[str], password: Optional[str]) -> Author:
    """
    Return the author whose email and password match.

    Raises:
        InvalidCredentials: for an unknown email and a wrong password alike
    """
    author = await crud.get_author_by_email(db, normalize_email(email))
    if author is None:
        burn_verification(password or "")
        raise InvalidCredentials()

    if not verify_password(password or "", author.password_hash):
        raise InvalidCredentials()

    if needs_rehash(author.password_hash):
        author.password_hash = hash_password(password)
        await db.commit()
        await db.refresh(author)
        logger.info("author_password_rehashed", author_id=author.id)

    return author


async def get_author(db: AsyncSession, author_id: int) -> Author:
    author = await crud.get_author_by_id(db, author_id)
    if author is None:
        raise NotFound("Author not found.")
    return author


async def list_authors(db: AsyncSession) -> List[Author]:
    return await crud.get_authors(db)


async def update_author(db: AsyncSession, author_id: int, fields: Dict[str, Any]) -> Author:
    """
    Apply a partial update to an author.

    ``email`` is checked for uniqueness against other authors, ``password`` is
    re-hashed, and the remaining profile fields replace the stored values.
    Display name, email and password can never be cleared.

    Raises:
        NotFound: unknown author
        EmailInUse: another author already holds the new email
        ValidationError: a required field was blanked
    """
    author = await get_author(db, author_id)
    changes: Dict[str, Any] = {}

    if "email" in fields:
        email = normalize_email(_require(fields["email"], "email"))
        if email != author.email:
            holder = await crud.get_author_by_email(db, email)
            if email == get_settings().admin_email or (holder is not None and holder.id != author.id):
                raise EmailInUse()
            changes["email"] = email

    if "password" in fields:
        _require(fields["password"], "password")
        changes["password_hash"] = hash_password(fields["password"])

    for key in _PROFILE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key == "display_name":
            value = _require(value, "displayName")
        elif key == "social_links":
            value = value or {}
        changes[key] = value

    if not changes:
        return author

    try:
        await crud.update_author(db, author, **changes)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise EmailInUse()

    await db.refresh(author)
    logger.info(
        "author_updated",
        author_id=author.id,
        fields=sorted(k for k in changes if k != "password_hash"),
        password_changed="password_hash" in changes,
    )
    return author


async def delete_author(db: AsyncSession, author_id: int) -> None:
    """Delete an author; their posts keep the stale author snapshot."""
    deleted = await crud.delete_author(db, author_id)
    if not deleted:
        raise NotFound("Author not found.")
    await db.commit()
    logger.info("author_deleted", author_id=author_id)


def _admin_password_matches(password: str) -> bool:
    settings = get_settings()
    return secrets.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))


async def login(db: AsyncSession, email: Optional[str], password: Optional[str]) -> Principal:
    """
    Resolve a login to a principal: the configured admin first, then authors.

    Raises:
        ValidationError: email or password missing
        InvalidCredentials: the email is known but the password is wrong
        NotFound: neither the admin nor any author uses this email
    """
    if not email or not password:
        raise ValidationError("Please provide both email and password.")

    settings = get_settings()
    email = normalize_email(email)

    if settings.admin_login_enabled and email == settings.admin_email:
        if not _admin_password_matches(password):
            LOGIN_ATTEMPTS.labels(role=Role.ADMIN.value, outcome="failure").inc()
            logger.warning("login_failed", role=Role.ADMIN.value, reason="bad_password")
            raise InvalidCredentials()
        LOGIN_ATTEMPTS.labels(role=Role.ADMIN.value, outcome="success").inc()
        logger.info("login_succeeded", role=Role.ADMIN.value)
        return Principal.for_admin(settings.admin_email)

    if await crud.get_author_by_email(db, email) is None:
        LOGIN_ATTEMPTS.labels(role="unknown", outcome="failure").inc()
        logger.warning("login_failed", role="unknown", reason="no_account")
        raise NotFound("No account found for this email.")

    try:
        author = await verify_credentials(db, email, password)
    except InvalidCredentials:
        LOGIN_ATTEMPTS.labels(role=Role.AUTHOR.value, outcome="failure").inc()
        logger.warning("login_failed", role=Role.AUTHOR.value, reason="bad_password")
        raise

    LOGIN_ATTEMPTS.labels(role=Role.AUTHOR.value, outcome="success").inc()
    logger.info("login_succeeded", role=Role.AUTHOR.value, author_id=author.id)
    return Principal.for_author(author)
