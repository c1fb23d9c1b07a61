############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# conftest.py: Pytest configuration and shared test fixtures
#
############################################################

"""Pytest configuration and shared fixtures for Xarwiz CMS tests.

Every test gets its own in-memory SQLite database. The environment is set
before any application module is imported because settings are cached.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@xarwiz.test"
os.environ["ADMIN_PASSWORD"] = "admin-password"
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.core.access import Principal
from backend.app.db import crud
from backend.app.db.base import Base
from backend.app.db import models  # noqa: F401
from backend.app.db.session import get_async_db
from backend.app.security.password_hash import hash_password
from backend.app.security.tokens import issue_token

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
AUTHOR_PASSWORD = "author-password"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database shared by all sessions of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, wired to the test database."""
    from backend.app.main import create_app

    app = create_app()

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_async_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Data helpers
@pytest.fixture
def admin():
    return Principal.for_admin(ADMIN_EMAIL)


async def make_author(db, email="writer@example.com", display_name="Writer", **kwargs):
    author = await crud.create_author(
        db,
        email=email,
        password_hash=hash_password(AUTHOR_PASSWORD),
        display_name=display_name,
        **kwargs,
    )
    await db.commit()
    await db.refresh(author)
    return author


async def make_category(db, name="Engineering", slug="engineering", subcategories=None):
    category = await crud.create_category(db, name=name, slug=slug, subcategories=subcategories or [])
    await db.commit()
    await db.refresh(category)
    return category


async def make_tag(db, name, slug=None):
    tag = await crud.create_tag(db, name=name, slug=slug or name.lower())
    await db.commit()
    await db.refresh(tag)
    return tag


def post_payload(category_id, title="Hello World", **overrides):
    payload = {
        "title": title,
        "summary": "A short summary.",
        "content": "<p>Body</p>",
        "image_url": "https://img.example.com/hello.png",
        "read_time": 4,
        "category_id": category_id,
        "tags": [],
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def author(db):
    return await make_author(db)


@pytest_asyncio.fixture
async def other_author(db):
    return await make_author(db, email="other@example.com", display_name="Other")


@pytest_asyncio.fixture
async def category(db):
    return await make_category(db)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {issue_token(Principal.for_admin(ADMIN_EMAIL))}"}


def auth_headers(author) -> dict:
    return {"Authorization": f"Bearer {issue_token(Principal.for_author(author))}"}
