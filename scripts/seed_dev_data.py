#!/usr/bin/env python3
############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# seed_dev_data.py: Seed database with development test data
#
############################################################

"""Seed development data for the Xarwiz CMS."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.core.access import Principal
from backend.app.core.slugs import slugify
from backend.app.db import crud
from backend.app.db.session import get_async_db_context
from backend.app.services import credentials, posts, taxonomy

CATEGORIES = [
    {
        "name": "Product",
        "subcategories": [{"name": "Releases"}, {"name": "Roadmap"}],
    },
    {
        "name": "Engineering",
        "subcategories": [{"name": "Backend"}, {"name": "Frontend"}, {"name": "DevOps"}],
    },
    {"name": "Company News", "subcategories": []},
]

TAGS = ["Python", "FastAPI", "Design", "Cloud", "Announcements"]

DEMO_AUTHOR = {
    "email": "writer@xarwiz.local",
    "password": "writer123",
    "display_name": "Demo Writer",
    "title": "Content Lead",
    "bio": "Writes about what the team ships.",
}


async def ensure_categories(db):
    """Create the default categories unless their slug already exists."""
    categories = {}
    for data in CATEGORIES:
        existing = await crud.get_category_by_slug(db, slugify(data["name"]))
        if existing:
            categories[existing.slug] = existing
            print(f"  Category '{existing.name}' already exists, skipping...")
            continue
        category = await taxonomy.create_category(
            db, name=data["name"], subcategories=data["subcategories"]
        )
        categories[category.slug] = category
        print(f"  Created category: {category.name}")
    return categories


async def ensure_tags(db):
    existing = {t.slug for t in await crud.get_tags(db)}
    for name in TAGS:
        if slugify(name) in existing:
            print(f"  Tag '{name}' already exists, skipping...")
            continue
        tag = await taxonomy.create_tag(db, name=name)
        print(f"  Created tag: {tag.name}")


async def ensure_author(db):
    author = await crud.get_author_by_email(db, DEMO_AUTHOR["email"])
    if author:
        print(f"  Author '{author.email}' already exists, skipping...")
        return author
    author = await credentials.create_author(db, **DEMO_AUTHOR)
    print(f"  Created author: {author.email}")
    return author


async def seed():
    async with get_async_db_context() as db:
        print("Ensuring categories...")
        categories = await ensure_categories(db)

        print("Ensuring tags...")
        await ensure_tags(db)

        print("Ensuring demo author...")
        author = await ensure_author(db)

        if await crud.get_posts(db, author_id=author.id, limit=1):
            print("Demo post already exists, skipping...")
            return

        post = await posts.create_post(
            db,
            Principal.for_author(author),
            {
                "title": "Hello from the Xarwiz blog",
                "summary": "A first post to check the public blog renders.",
                "content": "<p>Welcome! This post was created by the development seeder.</p>",
                "image_url": "https://picsum.photos/seed/xarwiz/1200/630",
                "read_time": 2,
                "category_id": categories["company-news"].id,
                "tags": [{"name": "Announcements"}, {"name": "Python"}],
                "is_featured": True,
            },
        )
        print(f"Created post: {post.slug}")


async def main():
    """Main entry point."""
    print("=" * 60)
    print("Xarwiz CMS Development Data Seeder")
    print("=" * 60)
    print()

    await seed()

    print()
    print("=" * 60)
    print("Seeding complete!")
    print()
    print("Demo author credentials:")
    print(f"  {DEMO_AUTHOR['email']} / {DEMO_AUTHOR['password']}")
    print()
    print("The admin logs in with ADMIN_EMAIL / ADMIN_PASSWORD from the environment.")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
